"""
Campaign Maps Module

Collects the daily campaign tracks of a season and a club's leaderboards on
them into the campaign store.

Key Components:
- api_client.py: Authenticated reads from the live services
- parser.py: JSON bodies decoded into typed records
- medals.py: Medal tiers and classification
- collector.py: Season ingestion pipeline (CLI)
- job_manager.py: Job logging
- data_quality_check.py: Threshold, leaderboard and integrity checks
"""

__version__ = "1.0.0"

from .api_client import LiveServicesClient
from .config import CollectionSettings
from .job_manager import CollectionJobManager
from .medals import Medal, classify
from .parser import CampaignParser

__all__ = [
    'LiveServicesClient',
    'CollectionSettings',
    'CollectionJobManager',
    'Medal',
    'classify',
    'CampaignParser'
]
