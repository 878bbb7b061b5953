"""Entry storage protocol.

Defines the interface for any backend that keeps one memoized entry per
device name.

Implementations include:
- Process memory (tests, single-process deployments)
- SQLite table (default, durable)
- Redis hashes (shared between workers)
"""

from typing import Protocol, runtime_checkable

from codegen_cache.entities import EntryEntity


@runtime_checkable
class EntryStore(Protocol):
    """Protocol for entry storage backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed.

    Implementations must make ``get`` and ``put`` atomic per key: a
    concurrent reader sees either the old or the new entry in full.
    """

    @property
    def backend_name(self) -> str:
        """Short identifier of the backend (e.g. "sqlite")."""
        ...

    def get(self, device_name: str) -> EntryEntity | None:
        """Fetch the entry stored for a device.

        Args:
            device_name: The device key

        Returns:
            The stored entry, or None if the key does not exist

        Raises:
            StorageError: If the backend fails for any other reason
        """
        ...

    def put(self, entry: EntryEntity) -> None:
        """Insert or wholly replace the entry for ``entry.device_name``.

        Args:
            entry: The entry to store

        Raises:
            StorageError: If the write fails (the previous entry is kept)
        """
        ...

    def count_all(self) -> int:
        """Count stored entries.

        Returns:
            Total number of entries
        """
        ...

    def health_check(self) -> bool:
        """Check if the backend is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...
