"""SQLite implementation of EntryStore.

Stores one row per device in the ``entries`` table. This is the default
durable backend.
"""

import logging
import sqlite3
import threading

from codegen_cache.config import settings
from codegen_cache.entities import EntryEntity
from codegen_cache.errors import StorageError

logger = logging.getLogger(__name__)

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS entries (
    device_name TEXT PRIMARY KEY,
    keyword TEXT,
    language TEXT,
    prompt TEXT,
    output TEXT
)
"""

_UPSERT = """
INSERT INTO entries (device_name, keyword, language, prompt, output)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT(device_name) DO UPDATE SET
    keyword = excluded.keyword,
    language = excluded.language,
    prompt = excluded.prompt,
    output = excluded.output
"""


class SQLiteEntryRepository:
    """SQLite entry store.

    This class satisfies the EntryStore protocol through structural
    typing - no explicit inheritance needed.

    A single connection is shared between threads and serialized by an
    RLock; every upsert runs in its own transaction, so a failed write is
    rolled back and the previous row stays intact.
    """

    def __init__(self, db_path: str | None = None) -> None:
        """Initialize the SQLite repository.

        Args:
            db_path: Database file path, or ":memory:". Defaults to settings.

        Raises:
            StorageError: If the database cannot be opened or the table created
        """
        self._db_path = db_path or settings.sqlite_path
        self._lock = threading.RLock()
        try:
            self._conn = sqlite3.connect(self._db_path, timeout=30.0, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            with self._conn:
                self._conn.execute(_CREATE_TABLE)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to open SQLite database {self._db_path}: {e}") from e
        logger.info("Using SQLite entry store at %s", self._db_path)

    @classmethod
    def create(cls, db_path: str | None = None) -> "SQLiteEntryRepository":
        """Factory method to create SQLiteEntryRepository with defaults.

        Args:
            db_path: Database path. If None, uses settings.

        Returns:
            Configured SQLiteEntryRepository
        """
        return cls(db_path=db_path)

    @property
    def backend_name(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> str:
        return self._db_path

    def get(self, device_name: str) -> EntryEntity | None:
        """Fetch the entry for a device.

        Args:
            device_name: The device key

        Returns:
            The stored entry, or None if no row exists

        Raises:
            StorageError: On any SQLite failure
        """
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT device_name, keyword, language, prompt, output "
                    "FROM entries WHERE device_name = ?",
                    (device_name,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read entry: {e}") from e

        if row is None:
            return None
        return EntryEntity(
            device_name=row["device_name"],
            keyword=row["keyword"] or "",
            language=row["language"] or "",
            prompt=row["prompt"] or "",
            output=row["output"] or "",
        )

    def put(self, entry: EntryEntity) -> None:
        """Upsert the entry row.

        Args:
            entry: The entry to store

        Raises:
            StorageError: If the transaction fails (it is rolled back)
        """
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    _UPSERT,
                    (entry.device_name, entry.keyword, entry.language, entry.prompt, entry.output),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save entry: {e}") from e

    def count_all(self) -> int:
        try:
            with self._lock:
                (count,) = self._conn.execute("SELECT COUNT(*) FROM entries").fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to count entries: {e}") from e
        return int(count)

    def health_check(self) -> bool:
        """Check if the database answers a trivial query.

        Returns:
            True if healthy, False otherwise
        """
        try:
            with self._lock:
                self._conn.execute("SELECT 1").fetchone()
            return True
        except sqlite3.Error:
            return False

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            self._conn.close()
