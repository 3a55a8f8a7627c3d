"""
Unit tests for the CampaignDataQualityChecker class.
"""

import os
import sqlite3
import tempfile
import unittest
from pathlib import Path

# Add parent directory to path
import sys
sys.path.append(str(Path(__file__).parent.parent.parent.parent))

from data_pipeline.campaign_maps.data_quality_check import CampaignDataQualityChecker
from data_pipeline.campaign_maps.models import LeaderboardEntry, MapMeta
from data_pipeline.common.exceptions import InvariantViolation
from database.models import MapRecord, RunRecord
from database.store import CampaignStore


class TestCampaignDataQualityChecker(unittest.TestCase):
    """Test cases for CampaignDataQualityChecker."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_db = tempfile.NamedTemporaryFile(suffix='.db', delete=False)
        self.temp_db.close()

        self.store = CampaignStore(self.temp_db.name)
        self.store.init_schema()
        self.checker = CampaignDataQualityChecker()

    def tearDown(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_db.name):
            os.unlink(self.temp_db.name)

    def test_valid_map_meta(self):
        meta = MapMeta(uid="a", author_time=40000, gold_time=43000, silver_time=48000, bronze_time=60000)
        self.assertEqual(self.checker.validate_map_meta(meta), [])
        self.assertEqual(self.checker.validation_stats['maps_checked'], 1)

    def test_out_of_order_thresholds(self):
        meta = MapMeta(uid="a", author_time=44000, gold_time=43000, silver_time=48000, bronze_time=60000)

        warnings = self.checker.validate_map_meta(meta)

        self.assertEqual(len(warnings), 1)
        self.assertIn("gold_time", warnings[0])

    def test_non_positive_threshold(self):
        meta = MapMeta(uid="a", author_time=0, gold_time=43000, silver_time=48000, bronze_time=60000)
        self.assertTrue(any("author_time" in w for w in self.checker.validate_map_meta(meta)))

    def test_leaderboard_anomalies(self):
        entries = [
            LeaderboardEntry("p1", 42000, 1),
            LeaderboardEntry("p2", 41000, 2),
            LeaderboardEntry("p1", 43000, 3),
        ]

        warnings = self.checker.validate_leaderboard("a", entries)

        self.assertTrue(any("Duplicate account p1" in w for w in warnings))
        self.assertTrue(any("slower than" in w for w in warnings))
        self.assertEqual(self.checker.validation_stats['leaderboard_warnings'], len(warnings))

    def test_clean_leaderboard(self):
        entries = [LeaderboardEntry("p1", 41000, 1), LeaderboardEntry("p2", 41000, 2)]
        self.assertEqual(self.checker.validate_leaderboard("a", entries), [])

    def test_referential_integrity(self):
        self.store.upsert_maps([MapRecord("a", 1, 1, 2024, 60000, 48000, 43000, 40000)])
        self.store.upsert_runs([RunRecord("a", "p1", 41000, "GOLD", 1)])

        self.checker.check_referential_integrity(self.store)

        # Bypass the foreign key to plant an orphan
        conn = sqlite3.connect(self.temp_db.name)
        conn.execute("INSERT INTO runs (map_uid, user_id, time, medal, position) VALUES ('ghost', 'p1', 1, 'NONE', 1)")
        conn.commit()
        conn.close()

        with self.assertRaises(InvariantViolation) as ctx:
            self.checker.check_referential_integrity(self.store)
        self.assertIn("ghost", str(ctx.exception))

    def test_season_report(self):
        self.store.upsert_maps([
            MapRecord("a", 1, 1, 2024, 60000, 48000, 43000, 40000),
            MapRecord("b", 2, 1, 2024, 60000, 48000, 43000, 40000),
            MapRecord("c", 1, 3, 2024, 60000, 48000, 43000, 40000),
            MapRecord("old", 1, 1, 2023, 60000, 48000, 43000, 40000),
        ])
        self.store.upsert_runs([
            RunRecord("a", "p1", 41000, "GOLD", 1),
            RunRecord("a", "p2", 42000, "GOLD", 2),
            RunRecord("c", "p1", 50000, "BRONZE", 1),
            RunRecord("old", "p3", 50000, "BRONZE", 1),
        ])

        report = self.checker.season_report(self.store, 2024)

        self.assertEqual(report['maps'], 3)
        self.assertEqual(report['runs'], 3)
        self.assertEqual(report['players'], 2)
        self.assertEqual(report['months'], [1, 3])
        self.assertEqual(report['maps_without_runs'], ["b"])
        self.assertEqual(report['orphan_runs'], 0)


if __name__ == '__main__':
    unittest.main()
