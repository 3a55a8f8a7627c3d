"""
Campaign Store

Data access layer for maps and runs. The ingestion pipeline is the only
writer; award queries open their own read connections through connect().
"""

import logging
import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional, Union

from data_pipeline.common.exceptions import InvariantViolation
from database.db_utils import DatabaseConnection, transaction
from database.models import MapRecord, RunRecord
from database.schema import SCHEMA_STATEMENTS

logger = logging.getLogger(__name__)


class CampaignStore:
    """SQLite-backed store for one or more seasons of maps and runs."""

    def __init__(self, db_path: Union[str, Path]):
        """
        Initialize the store.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = Path(db_path)

    def connect(self) -> DatabaseConnection:
        """Return a connection context manager (foreign keys on, Row results)."""
        return DatabaseConnection(self.db_path)

    def init_schema(self):
        """Create tables and indexes if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            with transaction(conn):
                for statement in SCHEMA_STATEMENTS:
                    conn.execute(statement)
        logger.info(f"Database initialized at {self.db_path}")

    def reset(self, season: int):
        """
        Remove every map and run of a season in one transaction.

        Runs go first so the foreign key from runs to maps is never broken.
        """
        with self.connect() as conn:
            with transaction(conn):
                runs_deleted = conn.execute("""
                    DELETE FROM runs
                    WHERE map_uid IN (SELECT uid FROM maps WHERE year = ?)
                """, (season,)).rowcount
                maps_deleted = conn.execute(
                    "DELETE FROM maps WHERE year = ?", (season,)
                ).rowcount

        logger.info(f"Reset season {season}: removed {maps_deleted} maps and {runs_deleted} runs")

    def upsert_maps(self, records: Iterable[MapRecord]) -> int:
        """
        Insert or replace map rows.

        Returns:
            Number of rows written
        """
        rows = [record.as_row() for record in records]
        if not rows:
            return 0

        with self.connect() as conn:
            with transaction(conn):
                conn.executemany("""
                    INSERT INTO maps (
                        uid, day, month, year, bronze_time, silver_time,
                        gold_time, author_time, thumbnail_url
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(uid) DO UPDATE SET
                        day = excluded.day,
                        month = excluded.month,
                        year = excluded.year,
                        bronze_time = excluded.bronze_time,
                        silver_time = excluded.silver_time,
                        gold_time = excluded.gold_time,
                        author_time = excluded.author_time,
                        thumbnail_url = excluded.thumbnail_url
                """, rows)

        logger.debug(f"Upserted {len(rows)} maps")
        return len(rows)

    def upsert_runs(self, records: Iterable[RunRecord]) -> int:
        """
        Insert or replace run rows on (map_uid, user_id).

        Returns:
            Number of rows written

        Raises:
            InvariantViolation: If a run references a map that is not stored
        """
        rows = [record.as_row() for record in records]
        if not rows:
            return 0

        try:
            with self.connect() as conn:
                with transaction(conn):
                    conn.executemany("""
                        INSERT OR REPLACE INTO runs (map_uid, user_id, time, medal, position)
                        VALUES (?, ?, ?, ?, ?)
                    """, rows)
        except sqlite3.IntegrityError as e:
            map_uids = sorted({row[0] for row in rows})
            raise InvariantViolation(f"Runs reference maps missing from the store ({map_uids}): {e}") from e

        logger.debug(f"Upserted {len(rows)} runs")
        return len(rows)

    def get_map(self, uid: str) -> Optional[MapRecord]:
        """Get a stored map by uid."""
        with self.connect() as conn:
            row = conn.execute("""
                SELECT uid, day, month, year, bronze_time, silver_time,
                       gold_time, author_time, thumbnail_url
                FROM maps WHERE uid = ?
            """, (uid,)).fetchone()

        if row is None:
            return None
        return MapRecord(**dict(row))

    def get_runs_for_map(self, map_uid: str) -> List[RunRecord]:
        """Get all runs on a map ordered by leaderboard position."""
        with self.connect() as conn:
            rows = conn.execute("""
                SELECT map_uid, user_id, time, medal, position
                FROM runs WHERE map_uid = ?
                ORDER BY position ASC
            """, (map_uid,)).fetchall()

        return [RunRecord(**dict(row)) for row in rows]

    def count_maps(self, season: int) -> int:
        with self.connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM maps WHERE year = ?", (season,)).fetchone()[0]

    def count_runs(self, season: int) -> int:
        with self.connect() as conn:
            return conn.execute("""
                SELECT COUNT(*)
                FROM runs r
                JOIN maps m ON r.map_uid = m.uid
                WHERE m.year = ?
            """, (season,)).fetchone()[0]

    def find_orphan_runs(self) -> List[RunRecord]:
        """Runs whose map row is missing. Always empty unless the invariant broke."""
        with self.connect() as conn:
            rows = conn.execute("""
                SELECT r.map_uid, r.user_id, r.time, r.medal, r.position
                FROM runs r
                LEFT JOIN maps m ON r.map_uid = m.uid
                WHERE m.uid IS NULL
            """).fetchall()

        return [RunRecord(**dict(row)) for row in rows]
