"""Redis implementation of EntryStore.

Each entry is a Redis hash at ``{prefix}:{device_name}``. Entries never
expire; they are replaced on refresh.
"""

import logging

import redis

from codegen_cache.config import get_redis_client, settings
from codegen_cache.entities import EntryEntity
from codegen_cache.errors import StorageError

logger = logging.getLogger(__name__)

ENTRY_FIELDS = ("device_name", "keyword", "language", "prompt", "output")


class RedisEntryRepository:
    """Redis entry store.

    This class satisfies the EntryStore protocol through structural
    typing - no explicit inheritance needed.

    Writes run DEL + HSET inside a MULTI/EXEC pipeline, so a reader never
    observes a hash that mixes fields of two entries.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis entry repository.

        Args:
            redis_client: Redis client instance (decode_responses=True). If None, creates default.
            key_prefix: Prefix for entry keys. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or settings.redis_key_prefix

    @classmethod
    def create(
        cls,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> "RedisEntryRepository":
        """Factory method to create RedisEntryRepository with defaults.

        Args:
            redis_client: Redis client. If None, built from settings.
            key_prefix: Key prefix. If None, uses settings.

        Returns:
            Configured RedisEntryRepository
        """
        return cls(redis_client=redis_client, key_prefix=key_prefix)

    @property
    def backend_name(self) -> str:
        return "redis"

    def _key(self, device_name: str) -> str:
        return f"{self._prefix}:{device_name}"

    def get(self, device_name: str) -> EntryEntity | None:
        """Fetch the entry hash for a device.

        Args:
            device_name: The device key

        Returns:
            The stored entry, or None if the hash does not exist

        Raises:
            StorageError: On any Redis failure
        """
        try:
            data = self._client.hgetall(self._key(device_name))
        except redis.RedisError as e:
            raise StorageError(f"Failed to read entry: {e}") from e

        if not data:
            return None
        data = {_text(k): _text(v) for k, v in data.items()}  # type: ignore[union-attr]
        return EntryEntity(
            device_name=data.get("device_name", device_name),
            keyword=data.get("keyword", ""),
            language=data.get("language", ""),
            prompt=data.get("prompt", ""),
            output=data.get("output", ""),
        )

    def put(self, entry: EntryEntity) -> None:
        """Replace the entry hash atomically.

        Args:
            entry: The entry to store

        Raises:
            StorageError: If the transaction fails
        """
        key = self._key(entry.device_name)
        try:
            pipe = self._client.pipeline(transaction=True)
            pipe.delete(key)
            pipe.hset(key, mapping={name: getattr(entry, name) for name in ENTRY_FIELDS})
            pipe.execute()
        except redis.RedisError as e:
            raise StorageError(f"Failed to save entry: {e}") from e

    def count_all(self) -> int:
        try:
            return sum(1 for _ in self._client.scan_iter(match=f"{self._prefix}:*"))
        except redis.RedisError as e:
            raise StorageError(f"Failed to count entries: {e}") from e

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client


def _text(value: str | bytes) -> str:
    return value.decode() if isinstance(value, bytes) else value
