"""
Medal classification against a map's four time thresholds.

Lower times are better. A time exactly on a threshold earns that tier.
"""

from enum import Enum


class Medal(Enum):
    """Medal tiers, best first. The value is what the store persists."""

    AUTHOR = "AUTHOR"
    GOLD = "GOLD"
    SILVER = "SILVER"
    BRONZE = "BRONZE"
    NONE = "NONE"

    @property
    def weight(self) -> int:
        return MEDAL_WEIGHTS[self]

    @property
    def emoji(self) -> str:
        return MEDAL_EMOJI[self]

    @property
    def threshold_field(self):
        """Name of the threshold attribute this tier is earned against."""
        return THRESHOLD_FIELDS.get(self)


MEDAL_WEIGHTS = {
    Medal.AUTHOR: 4,
    Medal.GOLD: 3,
    Medal.SILVER: 2,
    Medal.BRONZE: 1,
    Medal.NONE: 0,
}

MEDAL_EMOJI = {
    Medal.AUTHOR: "🏎️",
    Medal.GOLD: "🥇",
    Medal.SILVER: "🥈",
    Medal.BRONZE: "🥉",
    Medal.NONE: "💩",
}

THRESHOLD_FIELDS = {
    Medal.AUTHOR: "author_time",
    Medal.GOLD: "gold_time",
    Medal.SILVER: "silver_time",
    Medal.BRONZE: "bronze_time",
}

# Tiers that count as a finished track
QUALIFYING_MEDALS = (Medal.AUTHOR, Medal.GOLD, Medal.SILVER, Medal.BRONZE)

# Tiers that count for the earliest silver-or-better award
SILVER_OR_BETTER = (Medal.AUTHOR, Medal.GOLD, Medal.SILVER)


def classify(score: int, thresholds) -> Medal:
    """
    Classify a time against a map's thresholds.

    Args:
        score: Time in milliseconds
        thresholds: Any object exposing author_time, gold_time, silver_time
            and bronze_time (MapMeta, MapRecord, ...)

    Returns:
        The best tier whose threshold the score meets, or Medal.NONE
    """
    for medal in QUALIFYING_MEDALS:
        if score <= getattr(thresholds, medal.threshold_field):
            return medal
    return Medal.NONE
