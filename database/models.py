"""Row records for the maps and runs tables."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MapRecord:
    """A track published on one day of a season."""
    uid: str
    day: int
    month: int
    year: int
    bronze_time: int
    silver_time: int
    gold_time: int
    author_time: int
    thumbnail_url: Optional[str] = None

    def as_row(self) -> tuple:
        return (self.uid, self.day, self.month, self.year, self.bronze_time,
                self.silver_time, self.gold_time, self.author_time, self.thumbnail_url)


@dataclass(frozen=True)
class RunRecord:
    """A player's best leaderboard entry on a map."""
    map_uid: str
    user_id: str
    time: int
    medal: str
    position: int

    def as_row(self) -> tuple:
        return (self.map_uid, self.user_id, self.time, self.medal, self.position)
