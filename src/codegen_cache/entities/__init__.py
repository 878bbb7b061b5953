"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .entry import EntryEntity
from .generation_request import GenerationRequestEntity

__all__ = ["EntryEntity", "GenerationRequestEntity"]
