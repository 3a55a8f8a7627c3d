"""
Season Awards Engine

Computes the year-end awards from the maps and runs of one season. Every
award is a read-only query over the store, so awards can be computed in any
order or in parallel. An award with no qualifying rows is an empty list.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List

from analytics.models import (
    AverageMedal,
    CloseCall,
    CloseCallSummary,
    CompletedMonths,
    MedalCount,
    NarrowVictory,
    NarrowVictorySummary,
    OutlierRun,
    RunHighlight,
    Streak,
)
from data_pipeline.campaign_maps.medals import (
    MEDAL_WEIGHTS,
    SILVER_OR_BETTER,
    THRESHOLD_FIELDS,
    Medal,
)
from database.store import CampaignStore

logger = logging.getLogger(__name__)

DEFAULT_AWARD_LIMIT = 3
CLOSE_CALL_MARGIN_MS = 100
NARROW_VICTORY_MARGIN_MS = 100

AWARD_NAMES = (
    'medal_counts',
    'average_medal',
    'earliest_qualifying_medal',
    'best_outlier',
    'monthly_completionist',
    'close_calls',
    'narrow_victories',
    'longest_endurance',
    'longest_streak',
)

# SQL fragments built from the medal tables; values are enum constants, never user input
WEIGHT_CASE = "CASE r.medal {} ELSE 0 END".format(
    " ".join(f"WHEN '{medal.value}' THEN {weight}" for medal, weight in MEDAL_WEIGHTS.items())
)
THRESHOLD_CASE = "CASE r.medal {} END".format(
    " ".join(f"WHEN '{medal.value}' THEN m.{field}" for medal, field in THRESHOLD_FIELDS.items())
)
SILVER_OR_BETTER_LIST = ", ".join(f"'{medal.value}'" for medal in SILVER_OR_BETTER)


def _highlight(row) -> RunHighlight:
    return RunHighlight(
        user_id=row['user_id'],
        map_uid=row['map_uid'],
        time=row['time'],
        medal=Medal(row['medal']),
        day=row['day'],
        month=row['month'],
        thumbnail_url=row['thumbnail_url']
    )


class AwardsEngine:
    """Year-end awards for one season of a club."""

    def __init__(self, store: CampaignStore, season: int, limit: int = DEFAULT_AWARD_LIMIT):
        """
        Initialize the engine.

        Args:
            store: Store holding the season's maps and runs
            season: Season year; every award only looks at maps of this year
            limit: Number of entries kept per award
        """
        self.store = store
        self.season = season
        self.limit = limit

    def _query(self, sql: str, params: tuple = ()) -> list:
        with self.store.connect() as conn:
            return conn.execute(sql, params).fetchall()

    def medal_counts(self) -> List[MedalCount]:
        """Runs per tier for each player, most author medals first."""
        rows = self._query(f"""
            SELECT
                r.user_id,
                SUM(CASE WHEN r.medal = '{Medal.AUTHOR.value}' THEN 1 ELSE 0 END) AS author_count,
                SUM(CASE WHEN r.medal = '{Medal.GOLD.value}' THEN 1 ELSE 0 END) AS gold_count,
                SUM(CASE WHEN r.medal = '{Medal.SILVER.value}' THEN 1 ELSE 0 END) AS silver_count,
                SUM(CASE WHEN r.medal = '{Medal.BRONZE.value}' THEN 1 ELSE 0 END) AS bronze_count,
                SUM(CASE WHEN r.medal != '{Medal.NONE.value}' THEN 1 ELSE 0 END) AS total_tracks
            FROM runs r
            JOIN maps m ON r.map_uid = m.uid
            WHERE m.year = ?
            GROUP BY r.user_id
            ORDER BY author_count DESC, gold_count DESC, silver_count DESC,
                     bronze_count DESC, r.user_id
            LIMIT ?
        """, (self.season, self.limit))

        return [MedalCount(**dict(row)) for row in rows]

    def average_medal(self) -> List[AverageMedal]:
        """Mean medal weight over all of a player's runs, NONE counting as zero."""
        rows = self._query(f"""
            SELECT
                r.user_id,
                AVG({WEIGHT_CASE}) AS average_medal,
                COUNT(*) AS runs
            FROM runs r
            JOIN maps m ON r.map_uid = m.uid
            WHERE m.year = ?
            GROUP BY r.user_id
            ORDER BY average_medal DESC, r.user_id
            LIMIT ?
        """, (self.season, self.limit))

        return [AverageMedal(**dict(row)) for row in rows]

    def earliest_qualifying_medal(self) -> List[RunHighlight]:
        """Each player's first silver-or-better run; the earliest players overall."""
        rows = self._query(f"""
            WITH qualifying AS (
                SELECT
                    r.user_id, r.map_uid, r.time, r.medal,
                    m.day, m.month, m.thumbnail_url,
                    ROW_NUMBER() OVER (
                        PARTITION BY r.user_id
                        ORDER BY m.month, m.day, r.id
                    ) AS player_rank
                FROM runs r
                JOIN maps m ON r.map_uid = m.uid
                WHERE m.year = ?
                AND r.medal IN ({SILVER_OR_BETTER_LIST})
            )
            SELECT user_id, map_uid, time, medal, day, month, thumbnail_url
            FROM qualifying
            WHERE player_rank = 1
            ORDER BY month, day, user_id
            LIMIT ?
        """, (self.season, self.limit))

        return [_highlight(row) for row in rows]

    def best_outlier(self) -> List[OutlierRun]:
        """
        Runs that beat their map's mean time by the widest margin.

        Only maps on which every player of the season has a run are
        considered, so a map a slow player skipped cannot inflate the result.
        """
        rows = self._query("""
            WITH season_runs AS (
                SELECT r.user_id, r.map_uid, r.time, r.medal,
                       m.day, m.month, m.thumbnail_url
                FROM runs r
                JOIN maps m ON r.map_uid = m.uid
                WHERE m.year = ?
            ),
            map_stats AS (
                SELECT map_uid, AVG(time) AS mean_time
                FROM season_runs
                GROUP BY map_uid
                HAVING COUNT(*) = (SELECT COUNT(DISTINCT user_id) FROM season_runs)
            )
            SELECT
                s.user_id, s.map_uid, s.time, s.medal,
                s.day, s.month, s.thumbnail_url,
                ms.mean_time,
                (ms.mean_time - s.time) / ms.mean_time * 100.0 AS improvement_percent
            FROM season_runs s
            JOIN map_stats ms ON s.map_uid = ms.map_uid
            ORDER BY improvement_percent DESC, s.user_id, s.map_uid
            LIMIT ?
        """, (self.season, self.limit))

        return [
            OutlierRun(
                user_id=row['user_id'],
                map_uid=row['map_uid'],
                time=row['time'],
                medal=Medal(row['medal']),
                day=row['day'],
                month=row['month'],
                thumbnail_url=row['thumbnail_url'],
                mean_time=row['mean_time'],
                improvement_percent=row['improvement_percent']
            )
            for row in rows
        ]

    def monthly_completionist(self) -> List[CompletedMonths]:
        """Players who earned a medal on every map of a month, most months first."""
        rows = self._query(f"""
            WITH monthly_maps AS (
                SELECT month, COUNT(*) AS total_maps
                FROM maps
                WHERE year = ?
                GROUP BY month
            ),
            player_months AS (
                SELECT r.user_id, m.month, COUNT(*) AS completed_maps
                FROM runs r
                JOIN maps m ON r.map_uid = m.uid
                WHERE m.year = ?
                AND r.medal != '{Medal.NONE.value}'
                GROUP BY r.user_id, m.month
            )
            SELECT pm.user_id, pm.month
            FROM player_months pm
            JOIN monthly_maps mm ON pm.month = mm.month
            WHERE pm.completed_maps >= mm.total_maps
            ORDER BY pm.user_id, pm.month
        """, (self.season, self.season))

        months_by_player: Dict[str, List[int]] = {}
        for row in rows:
            months_by_player.setdefault(row['user_id'], []).append(row['month'])

        completed = [
            CompletedMonths(user_id=user_id, completed_months=len(months), months=months)
            for user_id, months in months_by_player.items()
        ]
        # sorted() is stable, so ties stay in user order
        completed = sorted(completed, key=lambda c: c.completed_months, reverse=True)
        return completed[:self.limit]

    def close_calls(self) -> List[CloseCallSummary]:
        """Medals earned within CLOSE_CALL_MARGIN_MS of the tier's own threshold."""
        rows = self._query(f"""
            WITH margins AS (
                SELECT
                    r.id, r.user_id, r.map_uid, r.time, r.medal,
                    m.day, m.month, m.thumbnail_url,
                    ABS(r.time - {THRESHOLD_CASE}) AS time_diff
                FROM runs r
                JOIN maps m ON r.map_uid = m.uid
                WHERE m.year = ?
                AND r.medal != '{Medal.NONE.value}'
            )
            SELECT user_id, map_uid, time, medal, day, month, thumbnail_url, time_diff
            FROM margins
            WHERE time_diff <= ?
            ORDER BY user_id, id
        """, (self.season, CLOSE_CALL_MARGIN_MS))

        calls_by_player: Dict[str, List[CloseCall]] = {}
        for row in rows:
            calls_by_player.setdefault(row['user_id'], []).append(CloseCall(
                map_uid=row['map_uid'],
                medal=Medal(row['medal']),
                time=row['time'],
                time_diff=row['time_diff'],
                day=row['day'],
                month=row['month'],
                thumbnail_url=row['thumbnail_url']
            ))

        summaries = [
            CloseCallSummary(user_id=user_id, count=len(calls), instances=calls)
            for user_id, calls in calls_by_player.items()
        ]
        summaries = sorted(summaries, key=lambda s: s.count, reverse=True)
        return summaries[:self.limit]

    def narrow_victories(self) -> List[NarrowVictorySummary]:
        """First places won by more than 0 and at most NARROW_VICTORY_MARGIN_MS."""
        rows = self._query("""
            SELECT
                r1.user_id, r1.map_uid, r1.time AS winner_time, r1.medal,
                r2.user_id AS runner_up_id, r2.time AS runner_up_time,
                r2.time - r1.time AS gap,
                m.day, m.month, m.thumbnail_url
            FROM runs r1
            JOIN runs r2 ON r1.map_uid = r2.map_uid AND r1.user_id != r2.user_id
            JOIN maps m ON r1.map_uid = m.uid
            WHERE m.year = ?
            AND r1.position = 1
            AND r2.position = 2
            AND r2.time - r1.time > 0
            AND r2.time - r1.time <= ?
            ORDER BY r1.user_id, m.month, m.day
        """, (self.season, NARROW_VICTORY_MARGIN_MS))

        wins_by_player: Dict[str, List[NarrowVictory]] = {}
        for row in rows:
            wins_by_player.setdefault(row['user_id'], []).append(NarrowVictory(
                map_uid=row['map_uid'],
                winner_time=row['winner_time'],
                runner_up_id=row['runner_up_id'],
                runner_up_time=row['runner_up_time'],
                gap=row['gap'],
                medal=Medal(row['medal']),
                day=row['day'],
                month=row['month'],
                thumbnail_url=row['thumbnail_url']
            ))

        summaries = [
            NarrowVictorySummary(user_id=user_id, count=len(wins), instances=wins)
            for user_id, wins in wins_by_player.items()
        ]
        summaries = sorted(summaries, key=lambda s: s.count, reverse=True)
        return summaries[:self.limit]

    def longest_endurance(self) -> List[RunHighlight]:
        """The slowest recorded runs of the season, regardless of medal."""
        rows = self._query("""
            SELECT r.user_id, r.map_uid, r.time, r.medal,
                   m.day, m.month, m.thumbnail_url
            FROM runs r
            JOIN maps m ON r.map_uid = m.uid
            WHERE m.year = ?
            ORDER BY r.time DESC, r.user_id
            LIMIT ?
        """, (self.season, self.limit))

        return [_highlight(row) for row in rows]

    def longest_streak(self) -> List[Streak]:
        """
        Longest run of consecutive published maps on which a player earned a medal.

        Maps are numbered in publication order; a player's medal runs are
        numbered again in the same order. Within an unbroken streak the
        difference of the two numbers is constant, so it identifies the streak.
        A map without a medal (no run, or a run slower than bronze) breaks it.
        """
        rows = self._query(f"""
            WITH season_maps AS (
                SELECT uid, day, month, thumbnail_url,
                       ROW_NUMBER() OVER (ORDER BY month, day, uid) AS map_index
                FROM maps
                WHERE year = ?
            ),
            medal_runs AS (
                SELECT
                    r.user_id, r.map_uid, r.time, r.medal,
                    sm.day, sm.month, sm.thumbnail_url, sm.map_index,
                    sm.map_index - ROW_NUMBER() OVER (
                        PARTITION BY r.user_id
                        ORDER BY sm.map_index
                    ) AS streak_group
                FROM runs r
                JOIN season_maps sm ON r.map_uid = sm.uid
                WHERE r.medal != '{Medal.NONE.value}'
            )
            SELECT user_id, map_uid, time, medal, day, month, thumbnail_url, streak_group
            FROM medal_runs
            ORDER BY user_id, map_index
        """, (self.season,))

        streaks: Dict[tuple, List[RunHighlight]] = {}
        for row in rows:
            streaks.setdefault((row['user_id'], row['streak_group']), []).append(_highlight(row))

        # Keep each player's longest streak; the earlier one wins a tie
        best_by_player: Dict[str, Streak] = {}
        for (user_id, _), runs in streaks.items():
            current = best_by_player.get(user_id)
            if current is None or len(runs) > current.length:
                best_by_player[user_id] = Streak(user_id=user_id, runs=runs)

        ranked = sorted(
            best_by_player.values(),
            key=lambda s: (-s.length, s.start.month, s.start.day, s.user_id)
        )
        return ranked[:self.limit]

    def compute_all(self, max_workers: int = 4) -> Dict[str, list]:
        """
        Compute every award concurrently.

        Returns:
            Award name -> records, in AWARD_NAMES order
        """
        logger.info(f"Computing {len(AWARD_NAMES)} awards for season {self.season}")
        results = {}

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_name = {
                executor.submit(getattr(self, name)): name
                for name in AWARD_NAMES
            }

            for future in as_completed(future_to_name):
                name = future_to_name[future]
                results[name] = future.result()
                logger.debug(f"Award {name}: {len(results[name])} entries")

        return {name: results[name] for name in AWARD_NAMES}
