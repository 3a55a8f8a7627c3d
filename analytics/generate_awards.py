"""
Generate the year-end awards for a season.

Usage:
    python -m analytics.generate_awards --season 2024
    python -m analytics.generate_awards --season 2024 --format csv --output awards_2024/
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from analytics.awards import DEFAULT_AWARD_LIMIT, AwardsEngine
from analytics.export import (
    awards_to_frames,
    load_member_names,
    write_awards_csv,
    write_awards_json,
)
from config.database_config import get_database_path, get_environment
from data_pipeline.campaign_maps.config import JOB_STATUS_COMPLETED, LOG_FORMAT
from data_pipeline.campaign_maps.job_manager import CollectionJobManager
from data_pipeline.common.season_manager import get_current_season
from database.store import CampaignStore

load_dotenv()

logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

DEFAULT_MEMBERS_FILE = os.getenv('TM_MEMBERS_FILE', '.users.json')


def check_latest_collection(store: CampaignStore, season: int, environment: str) -> bool:
    """
    Warn when the season's most recent collection did not complete.

    Returns:
        True if the latest job completed
    """
    job = CollectionJobManager(store, environment).get_latest_job(season)
    if job is None:
        logger.warning(f"No collection job recorded for season {season}; awards may be incomplete")
        return False
    if job['status'] != JOB_STATUS_COMPLETED:
        logger.warning(
            f"Latest collection job {job['job_id']} for season {season} is '{job['status']}'; "
            f"awards are computed from partial data"
        )
        return False
    return True


def main():
    """Command line interface for award generation."""
    parser = argparse.ArgumentParser(description="Generate year-end campaign awards")
    parser.add_argument("--season", type=int, help="Season year (default: current year)")
    parser.add_argument("--env", default=None, choices=["production", "test"],
                        help="Environment (production/test)")
    parser.add_argument("--members", default=DEFAULT_MEMBERS_FILE,
                        help="JSON file mapping player ids to display names")
    parser.add_argument("--output", help="Output file (json) or directory (csv)")
    parser.add_argument("--format", default="json", choices=["json", "csv"],
                        help="Output format")
    parser.add_argument("--limit", type=int, default=DEFAULT_AWARD_LIMIT,
                        help="Entries per award")

    args = parser.parse_args()

    season = args.season or get_current_season()
    environment = get_environment(args.env)
    db_path = get_database_path(environment)

    if not db_path.exists():
        logger.error(f"Database not found: {db_path}. Run the collector first.")
        sys.exit(1)

    store = CampaignStore(db_path)
    check_latest_collection(store, season, environment)

    awards = AwardsEngine(store, season, limit=args.limit).compute_all()
    frames = awards_to_frames(awards, load_member_names(args.members))

    if args.format == "csv":
        write_awards_csv(frames, args.output or f"awards_{season}")
    else:
        write_awards_json(frames, args.output or f"awards_{season}.json", season=season)


if __name__ == "__main__":
    main()
