"""
Data Quality Validation Module for Campaign Data

Checks on remote records and on the stored season. Threshold and leaderboard
anomalies are reported as warnings because the remote source is trusted;
a run without its map is a broken invariant and raises.
"""

import logging
from typing import Any, Dict, List, Sequence

from data_pipeline.campaign_maps.models import LeaderboardEntry, MapMeta
from data_pipeline.common.exceptions import InvariantViolation
from database.store import CampaignStore

logger = logging.getLogger(__name__)


class CampaignDataQualityChecker:
    """Validates campaign data quality and completeness."""

    def __init__(self):
        """Initialize the quality checker."""
        self.validation_stats = {
            'maps_checked': 0,
            'threshold_warnings': 0,
            'leaderboards_checked': 0,
            'leaderboard_warnings': 0
        }

    def validate_map_meta(self, meta: MapMeta) -> List[str]:
        """
        Check that a map's thresholds are positive and non-increasing
        from bronze to author.

        Args:
            meta: Map metadata

        Returns:
            List of warnings (empty when the map looks sane)
        """
        self.validation_stats['maps_checked'] += 1
        warnings = []

        thresholds = [
            ('bronze_time', meta.bronze_time),
            ('silver_time', meta.silver_time),
            ('gold_time', meta.gold_time),
            ('author_time', meta.author_time),
        ]

        for name, value in thresholds:
            if value <= 0:
                warnings.append(f"{name} is not positive: {value}")

        for (slower_name, slower), (faster_name, faster) in zip(thresholds, thresholds[1:]):
            if slower < faster:
                warnings.append(f"{slower_name} ({slower}) is faster than {faster_name} ({faster})")

        if warnings:
            self.validation_stats['threshold_warnings'] += len(warnings)
            for warning in warnings:
                logger.warning(f"Map {meta.uid}: {warning}")

        return warnings

    def validate_leaderboard(self, map_uid: str, entries: Sequence[LeaderboardEntry]) -> List[str]:
        """
        Check a leaderboard for duplicate players and out-of-order positions.

        Args:
            map_uid: Map the leaderboard belongs to
            entries: Leaderboard rows as returned by the service

        Returns:
            List of warnings
        """
        self.validation_stats['leaderboards_checked'] += 1
        warnings = []

        seen = set()
        for entry in entries:
            if entry.account_id in seen:
                warnings.append(f"Duplicate account {entry.account_id}")
            seen.add(entry.account_id)
            if entry.position < 1:
                warnings.append(f"Invalid position {entry.position} for {entry.account_id}")
            if entry.score <= 0:
                warnings.append(f"Invalid score {entry.score} for {entry.account_id}")

        ordered = sorted(entries, key=lambda e: e.position)
        for better, worse in zip(ordered, ordered[1:]):
            if better.score > worse.score:
                warnings.append(
                    f"Position {better.position} ({better.score}) is slower than "
                    f"position {worse.position} ({worse.score})"
                )

        if warnings:
            self.validation_stats['leaderboard_warnings'] += len(warnings)
            for warning in warnings:
                logger.warning(f"Leaderboard {map_uid}: {warning}")

        return warnings

    def check_referential_integrity(self, store: CampaignStore) -> None:
        """
        Raise if any run references a missing map.

        Raises:
            InvariantViolation: With the offending map uids
        """
        orphans = store.find_orphan_runs()
        if orphans:
            map_uids = sorted({run.map_uid for run in orphans})
            raise InvariantViolation(f"{len(orphans)} runs reference missing maps: {map_uids}")

    def season_report(self, store: CampaignStore, season: int) -> Dict[str, Any]:
        """
        Summarize the stored season.

        Args:
            store: Store to inspect
            season: Season year

        Returns:
            Dictionary with counts, maps without runs and months covered
        """
        with store.connect() as conn:
            maps_without_runs = [row['uid'] for row in conn.execute("""
                SELECT m.uid
                FROM maps m
                LEFT JOIN runs r ON r.map_uid = m.uid
                WHERE m.year = ? AND r.id IS NULL
                ORDER BY m.month, m.day
            """, (season,))]

            months = [row['month'] for row in conn.execute("""
                SELECT DISTINCT month FROM maps WHERE year = ? ORDER BY month
            """, (season,))]

            players = conn.execute("""
                SELECT COUNT(DISTINCT r.user_id)
                FROM runs r
                JOIN maps m ON r.map_uid = m.uid
                WHERE m.year = ?
            """, (season,)).fetchone()[0]

        report = {
            'season': season,
            'maps': store.count_maps(season),
            'runs': store.count_runs(season),
            'players': players,
            'months': months,
            'maps_without_runs': maps_without_runs,
            'orphan_runs': len(store.find_orphan_runs())
        }

        logger.info(
            f"Season {season}: {report['maps']} maps, {report['runs']} runs, "
            f"{report['players']} players, {len(maps_without_runs)} maps without runs"
        )
        return report
