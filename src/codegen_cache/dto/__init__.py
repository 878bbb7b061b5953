"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import GenerateRequest
from .responses import CodeResponse, HealthCheckResponse, StatsResponse

__all__ = [
    "GenerateRequest",
    "CodeResponse",
    "StatsResponse",
    "HealthCheckResponse",
]
