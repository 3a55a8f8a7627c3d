"""
Unit tests for the CampaignParser class.
"""

import unittest
from pathlib import Path

# Add parent directory to path
import sys
sys.path.append(str(Path(__file__).parent.parent.parent.parent))

from data_pipeline.campaign_maps.parser import CampaignParser
from data_pipeline.common.exceptions import RemoteFetchFailure, ResponseDecodeError


class TestCampaignParser(unittest.TestCase):
    """Test cases for CampaignParser."""

    def test_parse_month_response(self):
        """Test parsing a month page with a gap day."""
        data = {
            "monthList": [{
                "year": 2024,
                "month": 7,
                "days": [
                    {"campaignId": 1, "monthDay": 1, "mapUid": "uidA"},
                    {"campaignId": 1, "monthDay": 2, "mapUid": ""},
                    {"campaignId": 1, "monthDay": 3, "mapUid": "uidC"}
                ]
            }]
        }

        descriptor = CampaignParser.parse_month_response(data)

        self.assertEqual(descriptor.month, 7)
        self.assertEqual(descriptor.year, 2024)
        self.assertEqual(len(descriptor.days), 3)
        self.assertEqual(
            [(day.month_day, day.map_uid) for day in descriptor.published_days()],
            [(1, "uidA"), (3, "uidC")]
        )

    def test_parse_month_without_year(self):
        data = {"monthList": [{"month": 2, "days": []}]}
        descriptor = CampaignParser.parse_month_response(data)
        self.assertIsNone(descriptor.year)
        self.assertEqual(descriptor.published_days(), [])

    def test_parse_month_missing_days(self):
        with self.assertRaises(ResponseDecodeError):
            CampaignParser.parse_month_response({"monthList": [{"month": 2}]})

    def test_parse_month_empty_list(self):
        with self.assertRaises(ResponseDecodeError):
            CampaignParser.parse_month_response({"monthList": []})

    def test_parse_maps_response(self):
        data = {
            "mapList": [{
                "uid": "uidA",
                "name": "Summer 01",
                "bronzeTime": 60000,
                "silverTime": 48000,
                "goldTime": 43000,
                "authorTime": 40000,
                "thumbnailUrl": "https://example.com/a.jpg"
            }]
        }

        maps = CampaignParser.parse_maps_response(data)

        self.assertEqual(len(maps), 1)
        meta = maps[0]
        self.assertEqual(meta.uid, "uidA")
        self.assertEqual(meta.author_time, 40000)
        self.assertEqual(meta.bronze_time, 60000)
        self.assertEqual(meta.thumbnail_url, "https://example.com/a.jpg")

    def test_parse_maps_mistyped_time(self):
        """Test that a string time is a decode error, not a silent coercion."""
        data = {"mapList": [{
            "uid": "uidA", "bronzeTime": "60000", "silverTime": 48000,
            "goldTime": 43000, "authorTime": 40000
        }]}

        with self.assertRaises(ResponseDecodeError) as ctx:
            CampaignParser.parse_maps_response(data)

        self.assertIn("bronzeTime", str(ctx.exception))

    def test_decode_error_is_fetch_failure(self):
        with self.assertRaises(RemoteFetchFailure):
            CampaignParser.parse_maps_response({"maps": []})

    def test_parse_leaderboard_response(self):
        data = {"top": [
            {"accountId": "p1", "zoneName": "World", "position": 1, "score": 41000},
            {"accountId": "p2", "zoneName": "World", "position": 2, "score": 41050}
        ]}

        entries = CampaignParser.parse_leaderboard_response(data)

        self.assertEqual([e.account_id for e in entries], ["p1", "p2"])
        self.assertEqual(entries[1].score, 41050)
        self.assertEqual(entries[1].position, 2)

    def test_parse_leaderboard_without_top(self):
        """Test that an absent 'top' is an empty leaderboard."""
        self.assertEqual(CampaignParser.parse_leaderboard_response({}), [])

    def test_parse_leaderboard_boolean_position(self):
        data = {"top": [{"accountId": "p1", "position": True, "score": 41000}]}
        with self.assertRaises(ResponseDecodeError):
            CampaignParser.parse_leaderboard_response(data)


if __name__ == '__main__':
    unittest.main()
