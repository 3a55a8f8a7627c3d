"""
Unit tests for the SeasonManager class.
"""

import unittest
from datetime import date
from pathlib import Path

# Add parent directory to path
import sys
sys.path.append(str(Path(__file__).parent.parent.parent.parent))

from data_pipeline.common.season_manager import FIRST_SEASON, SeasonManager


class TestSeasonManager(unittest.TestCase):
    """Test cases for SeasonManager."""

    def setUp(self):
        self.manager = SeasonManager(today=date(2024, 3, 15))

    def test_available_seasons(self):
        seasons = self.manager.get_available_seasons()
        self.assertEqual(seasons[0], FIRST_SEASON)
        self.assertEqual(seasons[-1], 2024)

    def test_validate_season(self):
        self.assertTrue(self.manager.validate_season(2024))
        self.assertTrue(self.manager.validate_season(FIRST_SEASON))
        self.assertFalse(self.manager.validate_season(2025))
        self.assertFalse(self.manager.validate_season(FIRST_SEASON - 1))

    def test_current_season_elapsed_months(self):
        """Test that the current season runs up to the current month inclusive."""
        self.assertEqual(self.manager.get_elapsed_months(2024), [1, 2, 3])

    def test_past_season_elapsed_months(self):
        self.assertEqual(self.manager.get_elapsed_months(2023), list(range(1, 13)))

    def test_future_season_rejected(self):
        with self.assertRaises(ValueError):
            self.manager.get_elapsed_months(2025)

    def test_month_offsets_current_season(self):
        """Test that offsets count back from the current month, most recent first."""
        self.assertEqual(self.manager.get_month_offsets(2024), [(3, 0), (2, 1), (1, 2)])

    def test_month_offsets_past_season(self):
        offsets = dict(self.manager.get_month_offsets(2023))
        self.assertEqual(len(offsets), 12)
        self.assertEqual(offsets[12], 3)
        self.assertEqual(offsets[1], 14)

    def test_month_offset_in_future(self):
        with self.assertRaises(ValueError):
            self.manager.get_month_offset(2024, 4)

    def test_invalid_month(self):
        with self.assertRaises(ValueError):
            self.manager.get_month_offset(2024, 13)

    def test_january(self):
        """Test that in January only one month has been published."""
        manager = SeasonManager(today=date(2025, 1, 2))
        self.assertEqual(manager.get_month_offsets(2025), [(1, 0)])


if __name__ == '__main__':
    unittest.main()
