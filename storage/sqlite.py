"""SQLite helpers for the persistence layer."""
from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from config.settings import settings
from scheduling.errors import StoreUnavailable


@contextmanager
def get_conn(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """Yield an autocommit SQLite connection with a busy timeout.

    Lock timeouts, I/O failures and unreadable files are raised as
    ``StoreUnavailable`` so callers can retry. Integrity errors pass through
    unchanged for the stores to map onto domain errors, and programming
    errors (bad SQL, misuse of a closed connection) are not masked.
    """

    path = db_path or settings.DB_PATH
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    try:
        conn = sqlite3.connect(path, timeout=settings.STORE_TIMEOUT_S, isolation_level=None)
    except sqlite3.Error as exc:
        raise StoreUnavailable(f"Unable to open interview store: {exc}") from exc
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA foreign_keys = ON")
        yield conn
    except (sqlite3.IntegrityError, sqlite3.ProgrammingError, sqlite3.NotSupportedError):
        raise
    except sqlite3.DatabaseError as exc:
        raise StoreUnavailable(f"Interview store error: {exc}") from exc
    finally:
        conn.close()


@contextmanager
def write_transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run the block inside ``BEGIN IMMEDIATE`` so concurrent writers serialize."""

    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        if conn.in_transaction:
            conn.rollback()
        raise
    conn.commit()


__all__ = ["get_conn", "write_transaction"]
