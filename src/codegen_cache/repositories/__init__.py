"""Repository layer for data access.

This layer abstracts external dependencies (SQLite, Redis, the generation
API) behind protocol-based interfaces. This enables:
- Easy swapping of implementations (SQLite → Redis, OpenAI → another provider)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from codegen_cache.config import Settings, settings
from codegen_cache.protocols import EntryStore, GenerationProvider

from .memory_repository import InMemoryEntryRepository
from .openai_generation_provider import OpenAIGenerationProvider
from .redis_repository import RedisEntryRepository
from .sqlite_repository import SQLiteEntryRepository


def create_entry_store(config: Settings | None = None) -> EntryStore:
    """Build the entry store selected by STORE_BACKEND.

    Args:
        config: Settings to read from. Defaults to the global settings.

    Returns:
        The configured EntryStore implementation
    """
    config = config or settings
    if config.store_backend == "memory":
        return InMemoryEntryRepository.create()
    if config.store_backend == "redis":
        return RedisEntryRepository.create(key_prefix=config.redis_key_prefix)
    return SQLiteEntryRepository.create(db_path=config.sqlite_path)


__all__ = [
    "EntryStore",
    "GenerationProvider",
    "InMemoryEntryRepository",
    "SQLiteEntryRepository",
    "RedisEntryRepository",
    "OpenAIGenerationProvider",
    "create_entry_store",
]
