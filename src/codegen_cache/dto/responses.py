"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field

from codegen_cache.entities import EntryEntity


class CodeResponse(BaseModel):
    """Response DTO for a memoized entry."""

    device_name: str = Field(..., description="Device identifier")
    keyword: str = Field(..., description="Tag stored with the entry")
    language: str = Field(..., description="Tag stored with the entry")
    prompt: str = Field(..., description="Prompt that produced the output")
    output: str = Field(..., description="Generated output")

    @classmethod
    def from_entity(cls, entry: EntryEntity) -> "CodeResponse":
        return cls(
            device_name=entry.device_name,
            keyword=entry.keyword,
            language=entry.language,
            prompt=entry.prompt,
            output=entry.output,
        )


class StatsResponse(BaseModel):
    """Response DTO for service statistics."""

    total_entries: int = Field(..., description="Number of stored entries", ge=0)
    store_backend: str = Field(..., description="Entry store backend in use")
    model: str = Field(..., description="Generation model identifier")
    single_flight: bool = Field(
        ...,
        description="Whether concurrent requests for one device share a single generation",
    )


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    store_healthy: bool = Field(..., description="Whether the entry store is reachable")
    provider_healthy: bool = Field(..., description="Whether the generation provider is configured")
