"""
Unit tests for medal classification.
"""

import unittest
from pathlib import Path

# Add parent directory to path
import sys
sys.path.append(str(Path(__file__).parent.parent.parent.parent))

from data_pipeline.campaign_maps.medals import Medal, classify
from data_pipeline.campaign_maps.models import MapMeta


class TestClassify(unittest.TestCase):
    """Test cases for classify()."""

    def setUp(self):
        self.thresholds = MapMeta(
            uid="map1",
            author_time=40000,
            gold_time=43000,
            silver_time=48000,
            bronze_time=60000
        )

    def test_threshold_boundaries(self):
        """Test that a time exactly on a threshold earns that tier."""
        self.assertEqual(classify(40000, self.thresholds), Medal.AUTHOR)
        self.assertEqual(classify(43000, self.thresholds), Medal.GOLD)
        self.assertEqual(classify(48000, self.thresholds), Medal.SILVER)
        self.assertEqual(classify(60000, self.thresholds), Medal.BRONZE)

    def test_just_past_threshold(self):
        self.assertEqual(classify(40001, self.thresholds), Medal.GOLD)
        self.assertEqual(classify(43001, self.thresholds), Medal.SILVER)
        self.assertEqual(classify(48001, self.thresholds), Medal.BRONZE)
        self.assertEqual(classify(60001, self.thresholds), Medal.NONE)

    def test_extremes(self):
        self.assertEqual(classify(1, self.thresholds), Medal.AUTHOR)
        self.assertEqual(classify(10 ** 9, self.thresholds), Medal.NONE)

    def test_every_score_gets_one_tier(self):
        for score in range(39000, 62000, 250):
            self.assertIsInstance(classify(score, self.thresholds), Medal)

    def test_equal_thresholds_award_best_tier(self):
        thresholds = MapMeta(uid="flat", author_time=5000, gold_time=5000,
                             silver_time=5000, bronze_time=5000)
        self.assertEqual(classify(5000, thresholds), Medal.AUTHOR)

    def test_weights(self):
        self.assertEqual(
            [medal.weight for medal in Medal],
            [4, 3, 2, 1, 0]
        )

    def test_threshold_field(self):
        self.assertEqual(Medal.GOLD.threshold_field, "gold_time")
        self.assertIsNone(Medal.NONE.threshold_field)


if __name__ == '__main__':
    unittest.main()
