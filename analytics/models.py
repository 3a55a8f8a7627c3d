"""
Award records returned by the awards engine.

Each record carries enough of the map (uid, day, month, thumbnail) for a
renderer to format it without going back to the store.
"""

from dataclasses import dataclass
from typing import List, Optional

from data_pipeline.campaign_maps.medals import Medal


@dataclass(frozen=True)
class MedalCount:
    user_id: str
    author_count: int
    gold_count: int
    silver_count: int
    bronze_count: int
    total_tracks: int


@dataclass(frozen=True)
class AverageMedal:
    user_id: str
    average_medal: float
    runs: int


@dataclass(frozen=True)
class RunHighlight:
    """One run singled out by an award (earliest medal, slowest finish, streak member)."""
    user_id: str
    map_uid: str
    time: int
    medal: Medal
    day: int
    month: int
    thumbnail_url: Optional[str] = None


@dataclass(frozen=True)
class OutlierRun:
    user_id: str
    map_uid: str
    time: int
    medal: Medal
    day: int
    month: int
    thumbnail_url: Optional[str]
    mean_time: float
    improvement_percent: float


@dataclass(frozen=True)
class CompletedMonths:
    user_id: str
    completed_months: int
    months: List[int]


@dataclass(frozen=True)
class CloseCall:
    """A medal earned within the close-call margin of its threshold."""
    map_uid: str
    medal: Medal
    time: int
    time_diff: int
    day: int
    month: int
    thumbnail_url: Optional[str] = None


@dataclass(frozen=True)
class CloseCallSummary:
    user_id: str
    count: int
    instances: List[CloseCall]

    @property
    def featured(self) -> CloseCall:
        """The instance shown on the report: the first recorded, not the closest."""
        return self.instances[0]


@dataclass(frozen=True)
class NarrowVictory:
    """A first place taken by no more than the narrow-victory margin."""
    map_uid: str
    winner_time: int
    runner_up_id: str
    runner_up_time: int
    gap: int
    medal: Medal
    day: int
    month: int
    thumbnail_url: Optional[str] = None


@dataclass(frozen=True)
class NarrowVictorySummary:
    user_id: str
    count: int
    instances: List[NarrowVictory]

    @property
    def featured(self) -> NarrowVictory:
        return self.instances[0]


@dataclass(frozen=True)
class Streak:
    """Consecutive published maps on which a player earned a medal."""
    user_id: str
    runs: List[RunHighlight]

    @property
    def length(self) -> int:
        return len(self.runs)

    @property
    def start(self) -> RunHighlight:
        return self.runs[0]

    @property
    def end(self) -> RunHighlight:
        return self.runs[-1]


@dataclass(frozen=True)
class StandingRow:
    user_id: str
    medal_points: int
    placement_points: int
    maps_played: int

    @property
    def total_points(self) -> int:
        return self.medal_points + self.placement_points
