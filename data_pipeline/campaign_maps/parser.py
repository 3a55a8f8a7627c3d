"""
JSON Parser for Campaign Data
Decodes live-services JSON bodies into typed records, failing fast on any
missing or mistyped field.
"""

import logging
from typing import Any, Dict, List

from data_pipeline.campaign_maps.models import (
    LeaderboardEntry,
    MapMeta,
    MonthDay,
    MonthDescriptor,
)
from data_pipeline.common.exceptions import ResponseDecodeError

logger = logging.getLogger(__name__)


def _require(payload: Dict[str, Any], key: str, context: str) -> Any:
    if not isinstance(payload, dict):
        raise ResponseDecodeError(f"{context}: expected an object, got {type(payload).__name__}")
    if key not in payload:
        raise ResponseDecodeError(f"{context}: missing field '{key}'")
    return payload[key]


def _require_int(payload: Dict[str, Any], key: str, context: str) -> int:
    value = _require(payload, key, context)
    # bool is an int subclass; a flag is never a valid time or rank
    if isinstance(value, bool) or not isinstance(value, int):
        raise ResponseDecodeError(f"{context}: field '{key}' must be an integer, got {value!r}")
    return value


def _require_str(payload: Dict[str, Any], key: str, context: str) -> str:
    value = _require(payload, key, context)
    if not isinstance(value, str):
        raise ResponseDecodeError(f"{context}: field '{key}' must be a string, got {value!r}")
    return value


def _require_list(payload: Dict[str, Any], key: str, context: str) -> list:
    value = _require(payload, key, context)
    if not isinstance(value, list):
        raise ResponseDecodeError(f"{context}: field '{key}' must be a list")
    return value


class CampaignParser:
    """Parse live-services responses for campaign, map and leaderboard data."""

    @staticmethod
    def parse_month_response(data: Dict[str, Any]) -> MonthDescriptor:
        """
        Parse a campaign month page (requested with length=1).

        Args:
            data: Body of /campaign/month

        Returns:
            MonthDescriptor for the single month in the page
        """
        month_list = _require_list(data, "monthList", "campaign month")
        if not month_list:
            raise ResponseDecodeError("campaign month: monthList is empty")

        entry = month_list[0]
        month = _require_int(entry, "month", "campaign month")
        year = entry.get("year") if isinstance(entry, dict) else None
        if year is not None and (isinstance(year, bool) or not isinstance(year, int)):
            raise ResponseDecodeError(f"campaign month: field 'year' must be an integer, got {year!r}")

        days = []
        for raw_day in _require_list(entry, "days", "campaign month"):
            days.append(MonthDay(
                month_day=_require_int(raw_day, "monthDay", "campaign day"),
                map_uid=_require(raw_day, "mapUid", "campaign day") or ""
            ))

        descriptor = MonthDescriptor(month=month, days=days, year=year)
        logger.debug(f"Parsed month {month} with {len(descriptor.published_days())} published days")
        return descriptor

    @staticmethod
    def parse_maps_response(data: Dict[str, Any]) -> List[MapMeta]:
        """
        Parse a batched map metadata response.

        Args:
            data: Body of /map/get-multiple

        Returns:
            List of MapMeta records
        """
        maps = []
        for raw_map in _require_list(data, "mapList", "map list"):
            context = f"map {raw_map.get('uid', '?') if isinstance(raw_map, dict) else '?'}"
            thumbnail_url = raw_map.get("thumbnailUrl") if isinstance(raw_map, dict) else None
            maps.append(MapMeta(
                uid=_require_str(raw_map, "uid", context),
                bronze_time=_require_int(raw_map, "bronzeTime", context),
                silver_time=_require_int(raw_map, "silverTime", context),
                gold_time=_require_int(raw_map, "goldTime", context),
                author_time=_require_int(raw_map, "authorTime", context),
                thumbnail_url=thumbnail_url or None
            ))

        logger.debug(f"Parsed {len(maps)} maps from response")
        return maps

    @staticmethod
    def parse_leaderboard_response(data: Dict[str, Any]) -> List[LeaderboardEntry]:
        """
        Parse a club leaderboard response.

        Args:
            data: Body of /leaderboard/group/.../club/.../top

        Returns:
            List of LeaderboardEntry records; an absent 'top' is an empty board
        """
        if not isinstance(data, dict):
            raise ResponseDecodeError("leaderboard: expected an object")

        top = data.get("top")
        if top is None:
            return []
        if not isinstance(top, list):
            raise ResponseDecodeError("leaderboard: field 'top' must be a list")

        return [
            LeaderboardEntry(
                account_id=_require_str(raw_entry, "accountId", "leaderboard entry"),
                score=_require_int(raw_entry, "score", "leaderboard entry"),
                position=_require_int(raw_entry, "position", "leaderboard entry")
            )
            for raw_entry in top
        ]
