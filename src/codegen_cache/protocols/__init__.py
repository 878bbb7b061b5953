"""Protocol interfaces for swappable implementations.

Protocols enable:
- Swapping the entry store (memory, SQLite, Redis) without touching the service
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from codegen_cache.protocols import EntryStore, GenerationProvider

    store: EntryStore = SQLiteEntryRepository.create()
    store: EntryStore = InMemoryEntryRepository()
    ```
"""

from .entry_store import EntryStore
from .generation_provider import GenerationProvider

__all__ = [
    "EntryStore",
    "GenerationProvider",
]
