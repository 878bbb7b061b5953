"""In-memory implementation of EntryStore."""

import threading

from codegen_cache.entities import EntryEntity


class InMemoryEntryRepository:
    """Process-local entry store.

    This class satisfies the EntryStore protocol through structural
    typing - no explicit inheritance needed.

    Entries are frozen dataclasses, so swapping the dict slot under a lock
    is enough for readers to always see a whole entry. Contents are lost
    when the process exits.
    """

    def __init__(self) -> None:
        self._entries: dict[str, EntryEntity] = {}
        self._lock = threading.Lock()

    @classmethod
    def create(cls) -> "InMemoryEntryRepository":
        return cls()

    @property
    def backend_name(self) -> str:
        return "memory"

    def get(self, device_name: str) -> EntryEntity | None:
        with self._lock:
            return self._entries.get(device_name)

    def put(self, entry: EntryEntity) -> None:
        with self._lock:
            self._entries[entry.device_name] = entry

    def count_all(self) -> int:
        with self._lock:
            return len(self._entries)

    def health_check(self) -> bool:
        return True
