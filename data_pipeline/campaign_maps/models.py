"""
Typed records decoded from live-services responses.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class MonthDay:
    """One day of a campaign month. An empty map_uid means no track that day."""
    month_day: int
    map_uid: str

    @property
    def has_map(self) -> bool:
        return bool(self.map_uid)


@dataclass(frozen=True)
class MonthDescriptor:
    """One page of the monthly campaign listing."""
    month: int
    days: List[MonthDay] = field(default_factory=list)
    year: Optional[int] = None

    def published_days(self) -> List[MonthDay]:
        return [day for day in self.days if day.has_map]


@dataclass(frozen=True)
class MapMeta:
    """Map metadata from the batched map lookup."""
    uid: str
    bronze_time: int
    silver_time: int
    gold_time: int
    author_time: int
    thumbnail_url: Optional[str] = None


@dataclass(frozen=True)
class LeaderboardEntry:
    """One row of a club leaderboard."""
    account_id: str
    score: int
    position: int


@dataclass(frozen=True)
class MapSchedule:
    """When a map was published within the season."""
    day: int
    month: int
    year: int
