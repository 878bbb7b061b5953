"""Memoization service for core business logic.

This service orchestrates the read-through-or-generate decision by
coordinating the entry store (data access) and the generation provider
(external text generation).
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from codegen_cache.config import settings
from codegen_cache.entities import EntryEntity, GenerationRequestEntity
from codegen_cache.errors import DeviceNotFoundError, InvalidRequestError, StorageError
from codegen_cache.protocols import EntryStore, GenerationProvider

logger = logging.getLogger(__name__)


class MemoService:
    """Core memoization service.

    This service depends on PROTOCOLS, not concrete implementations:
    - EntryStore: can be memory, SQLite, Redis, etc.
    - GenerationProvider: can be OpenAI or any other text generator

    With ``single_flight`` enabled, generations for the same device are
    serialized on a per-device asyncio.Lock: the first caller on a miss
    generates, later non-refresh callers find its entry. Cache hits are
    served without the lock, so they see the pre- or post-refresh entry.
    Calls for different devices never wait on each other.

    Example:
        ```python
        from codegen_cache.repositories import InMemoryEntryRepository, OpenAIGenerationProvider
        from codegen_cache.services import MemoService

        service = MemoService.create(
            store=InMemoryEntryRepository(),
            provider=OpenAIGenerationProvider.create(),
        )
        entry = await service.resolve(request)
        ```
    """

    def __init__(
        self,
        store: EntryStore,
        provider: GenerationProvider,
        single_flight: bool | None = None,
    ) -> None:
        """Initialize the memoization service.

        Args:
            store: Entry storage backend (required).
            provider: Generation provider (required).
            single_flight: Serialize concurrent resolves per device. Defaults to settings.
        """
        self._store = store
        self._provider = provider
        self._single_flight = settings.single_flight if single_flight is None else single_flight
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @classmethod
    def create(
        cls,
        store: EntryStore,
        provider: GenerationProvider,
        single_flight: bool | None = None,
    ) -> "MemoService":
        """Factory method to create MemoService with sensible defaults.

        Args:
            store: Entry storage backend (required).
            provider: Generation provider (required).
            single_flight: If None, uses settings.

        Returns:
            Configured MemoService instance
        """
        return cls(store=store, provider=provider, single_flight=single_flight)

    @asynccontextmanager
    async def _device_lock(self, device_name: str) -> AsyncIterator[None]:
        if not self._single_flight:
            yield
            return

        lock = self._locks.setdefault(device_name, asyncio.Lock())
        self._lock_users[device_name] = self._lock_users.get(device_name, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[device_name] -= 1
            if self._lock_users[device_name] == 0:
                del self._lock_users[device_name]
                del self._locks[device_name]

    async def resolve(self, request: GenerationRequestEntity) -> EntryEntity:
        """Return the memoized entry for a device, generating it if needed.

        Business logic:
        1. Validate required fields (no store or network access on failure)
        2. Look up the stored entry
        3. Hit without refresh: return the stored entry as-is
        4. Miss or refresh: generate, store the new entry, return it

        Args:
            request: The generation request

        Returns:
            The authoritative entry for the device

        Raises:
            InvalidRequestError: If a required field is empty
            UpstreamError: If generation fails (store untouched)
            StorageError: If reading or writing the store fails
        """
        request.validate()

        # Hits never wait on an in-flight generation for the same device.
        if not request.refresh:
            existing = self._store.get(request.device_name)
            if existing is not None:
                logger.debug("Cache hit for device %s", request.device_name)
                return existing

        async with self._device_lock(request.device_name):
            existing = self._store.get(request.device_name)
            if existing is not None and not request.refresh:
                logger.debug("Cache hit for device %s after waiting", request.device_name)
                return existing

            logger.info(
                "%s for device %s, generating",
                "Refresh requested" if existing is not None else "Cache miss",
                request.device_name,
            )
            output = await self._provider.generate(request.prompt)
            entry = request.to_entry(output)

            try:
                self._store.put(entry)
            except StorageError:
                logger.error("Generated output for device %s could not be stored", request.device_name)
                raise

            return entry

    def fetch(self, device_name: str) -> EntryEntity:
        """Return the stored entry for a device without generating.

        Args:
            device_name: The device key

        Returns:
            The stored entry

        Raises:
            InvalidRequestError: If device_name is empty
            DeviceNotFoundError: If nothing is stored for the device
            StorageError: If the store read fails
        """
        if not device_name:
            raise InvalidRequestError("device must not be empty")

        entry = self._store.get(device_name)
        if entry is None:
            raise DeviceNotFoundError(device_name)
        return entry

    def get_stats(self) -> dict:
        """Get service statistics.

        Returns:
            Dictionary with entry count, backend and model
        """
        return {
            "total_entries": self._store.count_all(),
            "store_backend": self._store.backend_name,
            "model": self._provider.model_name,
            "single_flight": self._single_flight,
        }

    async def is_healthy(self) -> tuple[bool, bool]:
        """Check store and provider health.

        Returns:
            Tuple of (store_healthy, provider_healthy)
        """
        store_healthy = self._store.health_check()
        provider_healthy = await self._provider.is_available()
        return store_healthy, provider_healthy

    @property
    def store(self) -> EntryStore:
        """Get the underlying entry store (for testing)."""
        return self._store

    @property
    def provider(self) -> GenerationProvider:
        """Get the underlying generation provider (for testing)."""
        return self._provider
