"""
Database initialization helper.

Provides programmatic Alembic migration runner for:
- CacheRepository initialization
- Test fixtures
- Any code that needs a fully migrated cache database

All cache table creation happens through Alembic migrations.

Also provides BaseRepository class for thread-safe SQLite access and
the StatementExecutor protocol shared by connections and cursors.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Protocol, Sequence

from alembic import command
from alembic.config import Config as AlembicConfig

logger = logging.getLogger(__name__)

PROJECT_DIR = Path(__file__).parent.parent


class StatementExecutor(Protocol):
    """
    Anything that can run a parameterized statement.

    Satisfied by both sqlite3.Connection (autocommit-style writes) and
    sqlite3.Cursor (writes inside an open transaction), so helpers can
    be shared between the two.
    """

    def execute(self, sql: str, parameters: Sequence[Any] = ...) -> Any:
        ...

    def executemany(self, sql: str, seq_of_parameters: Iterable[Sequence[Any]]) -> Any:
        ...


def ensure_schema(db_path: str) -> None:
    """
    Run Alembic migrations to head for the given database.

    Safe to call multiple times - Alembic tracks applied migrations.

    Args:
        db_path: Path to the SQLite cache database file.
                 Parent directory is created if missing.
    """
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    alembic_cfg = AlembicConfig(str(PROJECT_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_DIR / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")

    # Suppress Alembic's default logging to avoid noise in tests
    logging.getLogger("alembic").setLevel(logging.WARNING)

    try:
        command.upgrade(alembic_cfg, "head")
        logger.debug(f"Schema initialized for {db_path}")
    except Exception as e:
        logger.error(f"Migration failed for {db_path}: {e}")
        raise


class BaseRepository:
    """
    Base class for thread-safe SQLite repositories.

    Provides common functionality for:
    - Thread-local connection pooling
    - Transaction context management
    - WAL mode for concurrent access
    """

    def __init__(self, db_path: Optional[str] = None, use_wal: bool = False):
        """
        Initialize repository.

        Args:
            db_path: Path to SQLite database. Defaults to Config.cache_db_path()
            use_wal: Enable WAL mode for better concurrent access
        """
        if db_path is None:
            from .config import Config
            db_path = Config.cache_db_path()

        self.db_path = str(db_path)
        self._local = threading.local()
        self._use_wal = use_wal

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if not hasattr(self._local, 'connection') or self._local.connection is None:
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            if self._use_wal:
                # WAL mode for better concurrent access
                conn.execute("PRAGMA journal_mode = WAL")
            self._local.connection = conn
        return self._local.connection

    @contextmanager
    def _transaction(self, immediate: bool = False) -> Iterator[sqlite3.Cursor]:
        """
        Context manager for transactions with automatic commit/rollback.

        With immediate=True the write lock is taken up front, so no other
        writer can interleave between the statements of the transaction.
        """
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            if immediate and not conn.in_transaction:
                cursor.execute("BEGIN IMMEDIATE")
            yield cursor
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def close(self) -> None:
        """Close database connection."""
        if hasattr(self._local, 'connection') and self._local.connection:
            self._local.connection.close()
            self._local.connection = None
