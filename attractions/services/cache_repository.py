"""
Local cache store with SQLite backend.

Holds accepted attractions until the next sync run drains them, and the
title pairs used by duplicate lookup. Titles are never removed by a
sync run; attraction rows are.
"""

import logging
import sqlite3
from typing import Iterable, Optional

from ..db import BaseRepository, StatementExecutor, ensure_schema
from ..errors import CacheReadError, CacheWriteError, EmptyCacheError
from ..models.records import AttractionRecord, Title

logger = logging.getLogger(__name__)


def commit_titles(executor: StatementExecutor, titles: Iterable[Title]) -> None:
    """
    Insert title pairs through any statement executor.

    Pass a cursor to take part in an open transaction, or a connection
    for a standalone write.
    """
    executor.executemany(
        "INSERT INTO titles (compare, display) VALUES (?, ?)",
        [(title.compare, title.display) for title in titles],
    )


class CacheRepository(BaseRepository):
    """
    Thread-safe SQLite repository for the attraction cache.

    One instance is created at process start and handed to the routes,
    the external store writer and the sync orchestrator.
    """

    def __init__(self, db_path: Optional[str] = None, init_schema: bool = True):
        super().__init__(db_path, use_wal=True)
        if init_schema:
            ensure_schema(self.db_path)

    def put_attraction(self, record: AttractionRecord) -> None:
        """
        Store an attraction and its title atomically.

        Raises:
            CacheWriteError: Constraint violation (e.g. duplicate id) or
                storage fault. Neither row is kept.
        """
        try:
            with self._transaction() as cursor:
                cursor.execute("""
                    INSERT INTO destinations (id, category, description, location, name, url, copyright)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    record.id,
                    record.category,
                    record.description,
                    record.location,
                    record.name,
                    record.image_url,
                    record.image_copyright,
                ))
                commit_titles(cursor, [Title(compare=record.id, display=record.name)])
        except sqlite3.Error as e:
            logger.error(f"Failed to cache attraction '{record.id}': {e}")
            raise CacheWriteError(f"Failed to store attraction: {e}") from e

        logger.info(f"Cached attraction '{record.id}' ({record.category})")

    def read_all_attractions(self) -> list[AttractionRecord]:
        """
        Read every cached attraction, in insertion order.

        Raises:
            EmptyCacheError: No attraction rows exist. An empty sync run
                is an error, not a no-op.
            CacheReadError: Storage fault.
        """
        try:
            cursor = self._get_connection().execute("""
                SELECT id, category, description, location, name, url, copyright
                FROM destinations
                ORDER BY rowid
            """)
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise CacheReadError("Failed to read cache") from e

        if not rows:
            raise EmptyCacheError()

        return [
            AttractionRecord(
                id=row['id'],
                category=row['category'],
                description=row['description'],
                location=row['location'],
                name=row['name'],
                image_url=row['url'],
                image_copyright=row['copyright'],
            )
            for row in rows
        ]

    def read_all_titles(self) -> list[Title]:
        """
        Read every cached title.

        Unlike read_all_attractions, an empty table is not an error and
        yields an empty list.

        Raises:
            CacheReadError: Storage fault.
        """
        try:
            cursor = self._get_connection().execute(
                "SELECT compare, display FROM titles ORDER BY rowid"
            )
            return [Title(compare=row['compare'], display=row['display']) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise CacheReadError("Failed to read cache") from e

    def add_titles(self, titles: list[Title]) -> int:
        """Bulk insert titles (used when seeding from an external store)."""
        try:
            with self._transaction() as cursor:
                commit_titles(cursor, titles)
        except sqlite3.Error as e:
            raise CacheWriteError(f"Failed to store titles: {e}") from e
        return len(titles)

    def clear_attractions(self) -> int:
        """
        Delete every attraction row. Titles are untouched.

        Runs under an immediate write lock so the delete is isolated
        from concurrent put_attraction transactions.
        """
        try:
            with self._transaction(immediate=True) as cursor:
                cursor.execute("DELETE FROM destinations")
                deleted = cursor.rowcount
        except sqlite3.Error as e:
            raise CacheWriteError(f"Failed to clear cache: {e}") from e
        logger.info(f"Cleared {deleted} attraction(s) from cache")
        return deleted

    def count_attractions(self) -> int:
        cursor = self._get_connection().execute("SELECT COUNT(*) FROM destinations")
        return cursor.fetchone()[0]

    def count_titles(self) -> int:
        cursor = self._get_connection().execute("SELECT COUNT(*) FROM titles")
        return cursor.fetchone()[0]
