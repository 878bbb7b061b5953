"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field

from codegen_cache.entities import GenerationRequestEntity


class GenerateRequest(BaseModel):
    """Request DTO for generating (or fetching the memoized) output.

    Required-field checks happen in the service layer so that a missing
    field is reported as a client-input error, not a schema error.
    """

    device_name: str = Field("", description="Device the result is memoized under")
    keyword: str = Field("", description="Caller-supplied tag stored with the result")
    language: str = Field("", description="Caller-supplied tag stored with the result")
    prompt: str = Field("", description="Prompt sent to the generation provider")
    refresh: bool = Field(False, description="Regenerate even if a result is already stored")

    def to_entity(self) -> GenerationRequestEntity:
        return GenerationRequestEntity(
            device_name=self.device_name,
            keyword=self.keyword,
            language=self.language,
            prompt=self.prompt,
            refresh=self.refresh,
        )
