"""
Central configuration module for the campaign wrapped project.
"""

from .database_config import (
    get_database_path,
    get_environment
)

__all__ = [
    'get_database_path',
    'get_environment'
]
