"""Codegen Cache - memoized code generation keyed by device name.

A client submits a prompt for a device; the service returns the output
stored for that device or calls the generation provider, stores the result
and returns it. ``refresh`` forces regeneration.

Layers:
    - protocols: Interface contracts (EntryStore, GenerationProvider)
    - repositories: Data access implementations (memory, SQLite, Redis, OpenAI)
    - services: Business logic (MemoService)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from codegen_cache.repositories import SQLiteEntryRepository, OpenAIGenerationProvider
    from codegen_cache.services import MemoService

    service = MemoService.create(
        store=SQLiteEntryRepository.create(),
        provider=OpenAIGenerationProvider.create(),
    )
    ```

For HTTP API:
    ```python
    from codegen_cache.api.app import app
    ```
"""

from codegen_cache.config import get_settings, settings
from codegen_cache.dto import CodeResponse, GenerateRequest
from codegen_cache.entities import EntryEntity, GenerationRequestEntity
from codegen_cache.errors import (
    CodegenCacheError,
    DeviceNotFoundError,
    InvalidRequestError,
    StorageError,
    UpstreamError,
)
from codegen_cache.handlers import CodeHandler
from codegen_cache.protocols import EntryStore, GenerationProvider
from codegen_cache.repositories import (
    InMemoryEntryRepository,
    OpenAIGenerationProvider,
    RedisEntryRepository,
    SQLiteEntryRepository,
)
from codegen_cache.services import MemoService

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    # Errors
    "CodegenCacheError",
    "InvalidRequestError",
    "DeviceNotFoundError",
    "UpstreamError",
    "StorageError",
    # Protocols (interfaces)
    "EntryStore",
    "GenerationProvider",
    # Services (business logic)
    "MemoService",
    # Handlers (HTTP)
    "CodeHandler",
    # Repositories (data access)
    "InMemoryEntryRepository",
    "SQLiteEntryRepository",
    "RedisEntryRepository",
    "OpenAIGenerationProvider",
    # Entities (domain models)
    "EntryEntity",
    "GenerationRequestEntity",
    # DTOs (API contracts)
    "GenerateRequest",
    "CodeResponse",
]
