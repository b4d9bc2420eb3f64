"""
External (authoritative) attraction store access.

The external store is a SQLite database addressed by a location string
supplied with the merge/initialize commands. Its destinations table has
no image URL column: images are redistributed through the sink instead.
"""

import json
import logging
import sqlite3
import threading
from typing import Optional

from ..errors import ExternalStoreError
from ..feature_flags import FeatureFlags, get_feature_flags
from ..models.records import AttractionRecord, Title
from .cache_repository import CacheRepository
from .normalizer import to_id

logger = logging.getLogger(__name__)


class ExternalStoreWriter:
    """
    Writes cache batches into an external store.

    Connections are opened lazily per store location and reused for the
    life of the writer.

    Delivery is at-most-once: the cache is cleared after every batch,
    including a batch whose insert failed, so a failed batch is lost
    rather than replayed. Enable feature_staged_commit to clear only
    after a successful insert.
    """

    def __init__(self, cache: CacheRepository, flags: Optional[FeatureFlags] = None):
        self.cache = cache
        self.flags = flags or get_feature_flags()
        self._connections: dict[str, sqlite3.Connection] = {}
        self._lock = threading.Lock()

    def _get_connection(self, store_ref: str) -> sqlite3.Connection:
        """Open the store on first use, then reuse the connection."""
        with self._lock:
            conn = self._connections.get(store_ref)
            if conn is None:
                conn = sqlite3.connect(store_ref, check_same_thread=False)
                self._connections[store_ref] = conn
            return conn

    def write_batch(self, store_ref: str, records: list[AttractionRecord]) -> int:
        """
        Insert a batch into the external store, then clear the cache.

        Args:
            store_ref: Location of the external SQLite store
            records: Snapshot read from the cache

        Returns:
            Number of records written

        Raises:
            ExternalStoreError: The store could not be opened or the insert
                failed. The whole batch is rolled back in the store.
        """
        error: Optional[sqlite3.Error] = None

        try:
            conn = self._get_connection(store_ref)
            with conn:
                conn.executemany("""
                    INSERT INTO destinations (id, category, description, location, copyright)
                    VALUES (?, ?, ?, ?, ?)
                """, [
                    (r.id, r.category, r.description, r.location, r.image_copyright)
                    for r in records
                ])
        except sqlite3.Error as e:
            error = e
            logger.error(f"External store write to {store_ref} failed: {e}")

        if error is None or not self.flags.feature_staged_commit:
            self.cache.clear_attractions()
        else:
            logger.warning(f"Keeping {len(records)} cached attraction(s) after failed write")

        if error is not None:
            raise ExternalStoreError(str(error)) from error

        logger.info(f"Wrote {len(records)} attraction(s) to {store_ref}")
        return len(records)

    def read_titles(self, store_ref: str) -> list[Title]:
        """
        Derive titles from the attractions already in an external store.

        The name is recovered from each row's JSON description. Rows whose
        description does not decode or has no name are skipped.

        Raises:
            ExternalStoreError: The store could not be opened or read.
        """
        try:
            rows = self._get_connection(store_ref).execute(
                "SELECT description FROM destinations"
            ).fetchall()
        except sqlite3.Error as e:
            raise ExternalStoreError(f"Failed to read target database: {e}") from e

        titles = []
        for (description,) in rows:
            try:
                name = json.loads(description).get("name")
            except (TypeError, ValueError, AttributeError):
                name = None

            if not isinstance(name, str) or not name:
                logger.warning(f"Skipping external row without a readable name: {str(description)[:50]}")
                continue

            titles.append(Title(compare=to_id(name), display=name))

        return titles

    def close(self) -> None:
        """Close every open store connection."""
        with self._lock:
            for conn in self._connections.values():
                conn.close()
            self._connections.clear()
