"""
Configuration settings for the campaign maps collection pipeline.

Constants describe the live-services API limits; CollectionSettings carries
the per-run values (club, batch size, workers) into the collector.
"""

import os
from dataclasses import dataclass

from auth.config import require_env
from config.database_config import get_environment

# ============================================
# API Configuration
# ============================================

# get-multiple rejects (or truncates) longer uid lists
MAX_MAP_BATCH_SIZE = 50
LEADERBOARD_LENGTH = 10
LEADERBOARD_GROUP = "Personal_Best"

# Request timeout
REQUEST_TIMEOUT = 30  # Seconds

# Concurrent month / map batch requests
DEFAULT_MAX_WORKERS = 4

# ============================================
# Logging Configuration
# ============================================

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
PROGRESS_STEP_PERCENT = 10

# ============================================
# Job Configuration
# ============================================

JOB_TYPE_SEASON_COLLECTION = "season_collection"
JOB_STATUS_RUNNING = "running"
JOB_STATUS_COMPLETED = "completed"
JOB_STATUS_FAILED = "failed"


@dataclass(frozen=True)
class CollectionSettings:
    """Per-run collection settings."""
    club_id: str
    batch_size: int = MAX_MAP_BATCH_SIZE
    leaderboard_length: int = LEADERBOARD_LENGTH
    max_workers: int = DEFAULT_MAX_WORKERS
    environment: str = "production"

    def __post_init__(self):
        if not self.club_id:
            raise ValueError("club_id is required")
        if not 1 <= self.batch_size <= MAX_MAP_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_MAP_BATCH_SIZE}")
        if self.leaderboard_length < 1:
            raise ValueError("leaderboard_length must be positive")
        if self.max_workers < 1:
            raise ValueError("max_workers must be positive")

    @classmethod
    def from_env(cls, environment: str = None) -> "CollectionSettings":
        """Build settings from TM_* environment variables."""
        return cls(
            club_id=require_env('TM_CLUB_ID'),
            batch_size=int(os.getenv('TM_BATCH_SIZE', MAX_MAP_BATCH_SIZE)),
            max_workers=int(os.getenv('TM_MAX_WORKERS', DEFAULT_MAX_WORKERS)),
            environment=get_environment(environment)
        )
