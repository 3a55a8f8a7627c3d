"""
Helpers for seeding a temporary campaign store in award tests.
"""

import os
import tempfile
import unittest
from pathlib import Path

# Add parent directory to path
import sys
sys.path.append(str(Path(__file__).parent.parent.parent))

from data_pipeline.campaign_maps.medals import classify
from database.models import MapRecord, RunRecord
from database.store import CampaignStore

# author / gold / silver / bronze
DEFAULT_THRESHOLDS = (40000, 43000, 48000, 60000)


def add_map(store, uid, day, month, times, thresholds=DEFAULT_THRESHOLDS, year=2024):
    """
    Store a map and its leaderboard.

    Args:
        store: CampaignStore to write into
        uid: Map uid
        day, month, year: Publication date
        times: user_id -> time in ms; positions follow time order
        thresholds: (author, gold, silver, bronze) times
    """
    author, gold, silver, bronze = thresholds
    record = MapRecord(uid, day, month, year, bronze_time=bronze, silver_time=silver,
                       gold_time=gold, author_time=author,
                       thumbnail_url=f"https://example.com/{uid}.jpg")
    store.upsert_maps([record])

    ranked = sorted(times.items(), key=lambda item: item[1])
    store.upsert_runs([
        RunRecord(uid, user_id, time, classify(time, record).value, position)
        for position, (user_id, time) in enumerate(ranked, start=1)
    ])
    return record


class StoreTestCase(unittest.TestCase):
    """Base test case with an initialized temporary store."""

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
