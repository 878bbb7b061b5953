"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
import secrets
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status

from codegen_cache.config import Settings, configure_logging, settings
from codegen_cache.handlers import CodeHandler
from codegen_cache.protocols import EntryStore, GenerationProvider
from codegen_cache.repositories import OpenAIGenerationProvider, create_entry_store
from codegen_cache.services import MemoService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> CodeHandler:
    """Dependency injection for CodeHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CodeHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "code_handler", None)
    if handler is None:
        raise RuntimeError("CodeHandler not initialized. Check lifespan setup.")
    return handler


def verify_api_key(
    request: Request,
    x_api_key: Annotated[str | None, Header()] = None,
) -> None:
    """Reject the request unless X-API-Key matches the configured secret.

    Raises:
        HTTPException: 401 if the header is missing or wrong
    """
    expected = getattr(request.app.state, "service_api_key", None)
    if not expected or x_api_key is None or not secrets.compare_digest(x_api_key, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


def make_lifespan(
    config: Settings | None = None,
    store: EntryStore | None = None,
    provider: GenerationProvider | None = None,
):
    """Build the lifespan context manager for the FastAPI app.

    Store and provider default to the ones selected by settings; passing
    them in lets tests run the real app against fakes.

    Args:
        config: Settings to use. Defaults to the global settings.
        store: Entry store override.
        provider: Generation provider override.

    Returns:
        An async context manager factory suitable for FastAPI(lifespan=...)
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize all layers and store them in app.state.

        1. Secret check - missing SERVICE_API_KEY aborts startup
        2. Repository and provider
        3. Service - wrapped by the handler
        4. Handler - stored in app.state.code_handler
        """
        configure_logging(config.log_level)
        service_api_key = config.require_service_api_key()

        entry_store = store or create_entry_store(config)
        generation_provider = provider or OpenAIGenerationProvider(
            api_key=config.openai_api_key,
            model_name=config.openai_model,
            base_url=config.openai_base_url,
            organization=config.openai_organization,
            project=config.openai_project,
            output_index=config.openai_output_index,
            timeout=config.openai_timeout,
        )

        memo_service = MemoService.create(
            store=entry_store,
            provider=generation_provider,
            single_flight=config.single_flight,
        )

        app.state.service_api_key = service_api_key
        app.state.code_handler = CodeHandler(memo_service=memo_service)

        logger.info("Entry store: %s", entry_store.backend_name)
        logger.info("Generation model: %s", generation_provider.model_name)

        yield

        close = getattr(generation_provider, "close", None)
        if close is not None:
            await close()
        close_store = getattr(entry_store, "close", None)
        if close_store is not None:
            close_store()

        del app.state.code_handler
        del app.state.service_api_key
        logger.info("Service shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[CodeHandler, Depends(get_handler)]
AuthDep = Depends(verify_api_key)
