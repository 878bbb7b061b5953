"""HTTP handlers for memoized generation.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes and error responses.
"""

from fastapi import HTTPException, status

from codegen_cache.dto import CodeResponse, GenerateRequest, HealthCheckResponse, StatsResponse
from codegen_cache.errors import (
    DeviceNotFoundError,
    InvalidRequestError,
    StorageError,
    UpstreamError,
)
from codegen_cache.services import MemoService


class CodeHandler:
    """HTTP handlers for generate/fetch operations.

    This handler delegates business logic to MemoService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Mapping domain errors to status codes
    """

    def __init__(self, memo_service: MemoService) -> None:
        """Initialize the handler.

        Args:
            memo_service: The memoization service (required).
        """
        self._memo = memo_service

    async def generate(self, request: GenerateRequest) -> CodeResponse:
        """Handle POST /generate requests.

        Args:
            request: The generate request DTO

        Returns:
            CodeResponse with the stored or freshly generated entry

        Raises:
            HTTPException: 400 on missing fields, 502 on provider failure,
                500 on storage failure
        """
        try:
            entry = await self._memo.resolve(request.to_entity())
        except InvalidRequestError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except UpstreamError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Generation failed: {e}",
            ) from e
        except StorageError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Storage failure: {e}",
            ) from e

        return CodeResponse.from_entity(entry)

    async def get_code(self, device: str) -> CodeResponse:
        """Handle GET /code requests.

        Args:
            device: The device name query parameter

        Returns:
            CodeResponse with the stored entry

        Raises:
            HTTPException: 400 on empty device, 404 if unknown, 500 on storage failure
        """
        try:
            entry = self._memo.fetch(device)
        except InvalidRequestError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except DeviceNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="device not found") from e
        except StorageError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to read entry: {e}",
            ) from e

        return CodeResponse.from_entity(entry)

    async def get_stats(self) -> StatsResponse:
        """Handle GET /stats requests."""
        try:
            stats = self._memo.get_stats()
        except StorageError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get stats: {e}",
            ) from e

        return StatsResponse(**stats)

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        store_healthy, provider_healthy = await self._memo.is_healthy()

        return HealthCheckResponse(
            status="healthy" if store_healthy and provider_healthy else "unhealthy",
            store_healthy=store_healthy,
            provider_healthy=provider_healthy,
        )
