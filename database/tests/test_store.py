"""
Unit tests for the CampaignStore class.
"""

import os
import tempfile
import unittest
from pathlib import Path

# Add parent directory to path
import sys
sys.path.append(str(Path(__file__).parent.parent.parent))

from data_pipeline.common.exceptions import InvariantViolation
from database.db_utils import transaction
from database.models import MapRecord, RunRecord
from database.store import CampaignStore


def _map(uid, day=1, month=1, year=2024):
    return MapRecord(uid, day, month, year, bronze_time=60000, silver_time=48000,
                     gold_time=43000, author_time=40000, thumbnail_url=f"https://example.com/{uid}.jpg")


class TestCampaignStore(unittest.TestCase):
    """Test cases for CampaignStore."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_db = tempfile.NamedTemporaryFile(suffix='.db', delete=False)
        self.temp_db.close()

        self.store = CampaignStore(self.temp_db.name)
        self.store.init_schema()

    def tearDown(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_db.name):
            os.unlink(self.temp_db.name)

    def test_init_schema_is_repeatable(self):
        self.store.init_schema()
        with self.store.connect() as conn:
            tables = {row['name'] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
        self.assertTrue({'maps', 'runs', 'job_log'} <= tables)

    def test_upsert_and_get_map(self):
        self.store.upsert_maps([_map("a", day=3, month=2)])

        record = self.store.get_map("a")

        self.assertEqual(record, _map("a", day=3, month=2))
        self.assertIsNone(self.store.get_map("missing"))

    def test_map_upsert_keeps_runs(self):
        """Test that refreshing a map's metadata does not drop its runs."""
        self.store.upsert_maps([_map("a")])
        self.store.upsert_runs([RunRecord("a", "p1", 41000, "GOLD", 1)])

        self.store.upsert_maps([_map("a", day=2)])

        self.assertEqual(self.store.get_map("a").day, 2)
        self.assertEqual(len(self.store.get_runs_for_map("a")), 1)

    def test_run_upsert_is_idempotent(self):
        """Test that a second run for the same (map, user) replaces the first."""
        self.store.upsert_maps([_map("a")])

        self.store.upsert_runs([RunRecord("a", "p1", 45000, "SILVER", 2)])
        self.store.upsert_runs([RunRecord("a", "p1", 41000, "GOLD", 1)])

        runs = self.store.get_runs_for_map("a")
        self.assertEqual(runs, [RunRecord("a", "p1", 41000, "GOLD", 1)])
        self.assertEqual(self.store.count_runs(2024), 1)

    def test_run_without_map_is_invariant_violation(self):
        with self.assertRaises(InvariantViolation):
            self.store.upsert_runs([RunRecord("ghost", "p1", 41000, "GOLD", 1)])

        self.assertEqual(self.store.find_orphan_runs(), [])

    def test_failed_batch_is_rolled_back(self):
        self.store.upsert_maps([_map("a")])

        with self.assertRaises(InvariantViolation):
            self.store.upsert_runs([
                RunRecord("a", "p1", 41000, "GOLD", 1),
                RunRecord("ghost", "p2", 41000, "GOLD", 1),
            ])

        self.assertEqual(self.store.get_runs_for_map("a"), [])

    def test_reset_only_touches_season(self):
        self.store.upsert_maps([_map("a", year=2024), _map("old", year=2023)])
        self.store.upsert_runs([
            RunRecord("a", "p1", 41000, "GOLD", 1),
            RunRecord("old", "p1", 41000, "GOLD", 1),
        ])

        self.store.reset(2024)

        self.assertEqual(self.store.count_maps(2024), 0)
        self.assertEqual(self.store.count_runs(2024), 0)
        self.assertEqual(self.store.count_maps(2023), 1)
        self.assertEqual(self.store.count_runs(2023), 1)

    def test_empty_upserts(self):
        self.assertEqual(self.store.upsert_maps([]), 0)
        self.assertEqual(self.store.upsert_runs([]), 0)

    def test_transaction_rolls_back(self):
        with self.store.connect() as conn:
            with self.assertRaises(RuntimeError):
                with transaction(conn):
                    conn.execute("INSERT INTO maps VALUES ('a', 1, 1, 2024, 4, 3, 2, 1, NULL)")
                    raise RuntimeError("boom")

        self.assertIsNone(self.store.get_map("a"))

    def test_runs_ordered_by_position(self):
        self.store.upsert_maps([_map("a")])
        self.store.upsert_runs([
            RunRecord("a", "p2", 42000, "GOLD", 2),
            RunRecord("a", "p1", 41000, "GOLD", 1),
        ])

        self.assertEqual([run.user_id for run in self.store.get_runs_for_map("a")], ["p1", "p2"])


if __name__ == '__main__':
    unittest.main()
