"""
Database utility functions for transaction management and connection handling.
"""
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_BUSY_TIMEOUT = 5.0  # Seconds


def open_connection(db_path: Union[str, Path], timeout: float = DEFAULT_BUSY_TIMEOUT) -> sqlite3.Connection:
    """
    Open a connection in autocommit mode with foreign keys enforced.

    Transactions are opened explicitly with transaction(); rows come back as
    sqlite3.Row so columns can be read by name.
    """
    conn = sqlite3.connect(str(db_path), timeout=timeout, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """
    Context manager for explicit transaction management.

    Usage:
        with transaction(conn):
            conn.execute("DELETE FROM runs")
            conn.execute("DELETE FROM maps")

    Automatically handles BEGIN, COMMIT, and ROLLBACK.
    """
    conn.execute("BEGIN IMMEDIATE")
    logger.debug("Transaction started")
    try:
        yield conn
    except Exception as e:
        conn.execute("ROLLBACK")
        logger.error(f"Transaction rolled back due to error: {e}")
        raise
    conn.execute("COMMIT")
    logger.debug("Transaction committed")


class DatabaseConnection:
    """
    Connection context manager: opens with open_connection() and always closes.
    """

    def __init__(self, db_path: Union[str, Path], timeout: float = DEFAULT_BUSY_TIMEOUT):
        self.db_path = db_path
        self.timeout = timeout
        self.conn = None

    def __enter__(self) -> sqlite3.Connection:
        self.conn = open_connection(self.db_path, self.timeout)
        return self.conn

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.conn:
            if self.conn.in_transaction:
                self.conn.rollback()
            self.conn.close()
