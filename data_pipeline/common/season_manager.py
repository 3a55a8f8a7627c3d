"""
Season Manager - Centralized season management for campaign data collection.

A season is one calendar year of daily tracks. This module answers which
months of a season have been published so far and how those months map to
the live service's month offsets (offset 0 is the current month, offset 1
the month before, and so on).
"""

from datetime import date
from typing import List, Optional, Tuple

# First year the daily track campaign was published
FIRST_SEASON = 2020


class SeasonManager:
    """Manages season-related operations relative to a reference date."""

    def __init__(self, today: Optional[date] = None):
        self.today = today or date.today()
        self.current_year = self.today.year

    def get_available_seasons(self) -> List[int]:
        """Get list of all collectable seasons.

        Returns:
            List of season years in ascending order
        """
        return list(range(FIRST_SEASON, self.current_year + 1))

    def validate_season(self, year: int) -> bool:
        """Check if the season can be collected.

        Args:
            year: Season year to validate

        Returns:
            True if the season has started and is not before the first campaign
        """
        return FIRST_SEASON <= year <= self.current_year

    def get_current_season(self) -> int:
        """Get the season containing the reference date."""
        return self.current_year

    def get_elapsed_months(self, year: int) -> List[int]:
        """Get the months of a season published up to the reference date.

        Args:
            year: Season year

        Returns:
            Months 1..current month for the current season, 1..12 for past seasons

        Raises:
            ValueError: If the season is in the future or predates the campaign
        """
        if not self.validate_season(year):
            raise ValueError(
                f"Season {year} is not collectable "
                f"(valid range {FIRST_SEASON}-{self.current_year})"
            )

        last_month = self.today.month if year == self.current_year else 12
        return list(range(1, last_month + 1))

    def get_month_offset(self, year: int, month: int) -> int:
        """Translate a (year, month) pair into a live-service month offset.

        Args:
            year: Season year
            month: Calendar month (1-12)

        Returns:
            Number of months between the reference month and the given month
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")

        offset = (self.today.year - year) * 12 + (self.today.month - month)
        if offset < 0:
            raise ValueError(f"{year}-{month:02d} is in the future")
        return offset

    def get_month_offsets(self, year: int) -> List[Tuple[int, int]]:
        """Get (month, offset) pairs for every elapsed month of a season.

        Pairs are ordered by ascending offset, i.e. the most recent month first,
        which is the order the campaign pages are requested in.
        """
        pairs = [(month, self.get_month_offset(year, month)) for month in self.get_elapsed_months(year)]
        return sorted(pairs, key=lambda pair: pair[1])


# Create a default instance for convenience
default_manager = SeasonManager()

# Export the season lookup at module level
get_current_season = default_manager.get_current_season
