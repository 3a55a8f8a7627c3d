"""
Monthly club standings.

Scores one month of the campaign the way the club's live leaderboard page
does: medal points are the tier weights of a player's runs, placement points
add 3 - position for every run, so positions beyond 3 subtract.
"""

import logging
from typing import List

from analytics.awards import WEIGHT_CASE
from analytics.models import StandingRow
from database.store import CampaignStore

logger = logging.getLogger(__name__)

PLACEMENT_BASE = 3


def monthly_standings(store: CampaignStore, season: int, month: int) -> List[StandingRow]:
    """
    Compute the standings of one month.

    Args:
        store: Store holding the season
        season: Season year
        month: Month number (1-12)

    Returns:
        One row per player with a run that month, highest total first
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")

    with store.connect() as conn:
        rows = conn.execute(f"""
            SELECT
                r.user_id,
                SUM({WEIGHT_CASE}) AS medal_points,
                SUM(? - r.position) AS placement_points,
                COUNT(*) AS maps_played
            FROM runs r
            JOIN maps m ON r.map_uid = m.uid
            WHERE m.year = ? AND m.month = ?
            GROUP BY r.user_id
        """, (PLACEMENT_BASE, season, month)).fetchall()

    standings = [StandingRow(**dict(row)) for row in rows]
    standings.sort(key=lambda s: (-s.total_points, s.user_id))

    logger.info(f"Standings for {season}-{month:02d}: {len(standings)} players")
    return standings
