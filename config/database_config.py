"""
Central database configuration for the campaign wrapped store.

This module provides a single source of truth for database paths, ensuring
proper separation between test and production environments.

Environment Control:
    - Set DATA_ENV=test for test environment
    - Set DATA_ENV=production for production (default)
    - Can also be controlled via function parameters
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Database file names
PRODUCTION_DB = "campaign_wrapped.db"
TEST_DB = "campaign_wrapped_test.db"

# Default environment
DEFAULT_ENVIRONMENT = "production"
VALID_ENVIRONMENTS = ("production", "test")

# Base path to database directory
BASE_DIR = Path(__file__).parent.parent
DATABASE_DIR = Path(os.getenv('TM_DATABASE_DIR', BASE_DIR / "database"))


def get_environment(override=None):
    """
    Get the current environment setting.

    Args:
        override: Optional environment override ('test' or 'production')

    Returns:
        str: The environment ('test' or 'production')
    """
    if override:
        return override.lower()

    env = os.getenv('DATA_ENV', DEFAULT_ENVIRONMENT).lower()

    if env not in VALID_ENVIRONMENTS:
        logger.warning(f"Invalid DATA_ENV '{env}', using '{DEFAULT_ENVIRONMENT}'")
        return DEFAULT_ENVIRONMENT

    return env


def get_database_path(environment=None):
    """
    Get the appropriate database path based on environment.

    Args:
        environment: Optional environment override ('test' or 'production')

    Returns:
        Path: Full path to the database file
    """
    env = get_environment(environment)

    if env == 'test':
        return DATABASE_DIR / TEST_DB
    return DATABASE_DIR / PRODUCTION_DB

