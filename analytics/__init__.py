"""
Season Awards Module

Year-end awards and monthly standings computed from the campaign store,
plus export of the results for the report.
"""

from .awards import AWARD_NAMES, AwardsEngine
from .standings import monthly_standings

__all__ = [
    'AWARD_NAMES',
    'AwardsEngine',
    'monthly_standings'
]
