"""
Campaign Maps Collector Module
Collects a season of daily tracks and the club's leaderboards on them from
the live services, and writes them to the campaign store.

Usage:
    # Collect the current season (store is reset for the season first)
    python -m data_pipeline.campaign_maps.collector

    # Collect a past season into the test database
    python -m data_pipeline.campaign_maps.collector --season 2024 --env test
"""

import argparse
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Sequence

from auth.token_manager import NadeoTokenManager
from config.database_config import get_database_path
from data_pipeline.campaign_maps.api_client import LiveServicesClient
from data_pipeline.campaign_maps.config import (
    JOB_TYPE_SEASON_COLLECTION,
    LOG_FORMAT,
    PROGRESS_STEP_PERCENT,
    CollectionSettings,
)
from data_pipeline.campaign_maps.data_quality_check import CampaignDataQualityChecker
from data_pipeline.campaign_maps.job_manager import CollectionJobManager
from data_pipeline.campaign_maps.medals import classify
from data_pipeline.campaign_maps.models import MapMeta, MapSchedule, MonthDescriptor
from data_pipeline.common.exceptions import InvariantViolation
from data_pipeline.common.season_manager import SeasonManager
from database.models import MapRecord, RunRecord
from database.store import CampaignStore

# Set up logging
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


class ProgressLogger:
    """Logs a phase's completion every PROGRESS_STEP_PERCENT percent."""

    def __init__(self, total: int, step: int = PROGRESS_STEP_PERCENT):
        self.total = total
        self.step = step
        self.done = 0
        self.last_step = 0

    def advance(self, count: int = 1):
        self.done += count
        if not self.total:
            return
        current = int(self.done / self.total * 100)
        if current >= self.last_step + self.step:
            logger.info(f"   Progress: {current}%")
            self.last_step = current // self.step * self.step


class CampaignCollector:
    """Collects one season of campaign maps and club runs into the store."""

    def __init__(self, client: LiveServicesClient, store: CampaignStore,
                 settings: CollectionSettings,
                 job_manager: CollectionJobManager = None,
                 season_manager: SeasonManager = None):
        """
        Initialize the collector.

        Args:
            client: Authenticated live-services client
            store: Store to write maps and runs into (schema must exist)
            settings: Per-run collection settings
            job_manager: Job logger; one bound to the store is created if omitted
            season_manager: Season arithmetic; defaults to today's date
        """
        self.client = client
        self.store = store
        self.settings = settings
        self.job_manager = job_manager or CollectionJobManager(store, settings.environment)
        self.season_manager = season_manager or SeasonManager()
        self.quality_checker = CampaignDataQualityChecker()

        # Statistics tracking
        self.stats = {
            "months_fetched": 0,
            "maps_found": 0,
            "maps_stored": 0,
            "leaderboards_fetched": 0,
            "entries_processed": 0,
            "runs_stored": 0
        }

    def fetch_months(self, offsets: Sequence[int]) -> List[MonthDescriptor]:
        """
        Fetch campaign month pages concurrently.

        Args:
            offsets: Month offsets to request

        Returns:
            Descriptors in the same order as offsets
        """
        logger.info("Fetching monthly campaigns...")
        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
            descriptors = list(executor.map(self.client.fetch_month, offsets))

        self.stats["months_fetched"] = len(descriptors)
        logger.info("Monthly campaigns fetched")
        return descriptors

    def build_schedule(self, descriptors: Sequence[MonthDescriptor], season: int) -> Dict[str, MapSchedule]:
        """
        Collect the distinct map uids of the season with the day each was published.

        Gap days (empty map uid) are skipped. If a uid appears more than once,
        the later occurrence wins.
        """
        schedule: Dict[str, MapSchedule] = {}
        for descriptor in descriptors:
            if descriptor.year is not None and descriptor.year != season:
                logger.warning(f"Month {descriptor.month} reported year {descriptor.year}, expected {season}")

            for day in descriptor.published_days():
                if day.map_uid in schedule:
                    logger.warning(f"Map {day.map_uid} published more than once; keeping month {descriptor.month}")
                schedule[day.map_uid] = MapSchedule(day=day.month_day, month=descriptor.month, year=season)

        self.stats["maps_found"] = len(schedule)
        logger.info(f"Found {len(schedule)} unique maps")
        return schedule

    def _to_map_record(self, meta: MapMeta, scheduled: MapSchedule) -> MapRecord:
        return MapRecord(
            uid=meta.uid,
            day=scheduled.day,
            month=scheduled.month,
            year=scheduled.year,
            bronze_time=meta.bronze_time,
            silver_time=meta.silver_time,
            gold_time=meta.gold_time,
            author_time=meta.author_time,
            thumbnail_url=meta.thumbnail_url
        )

    def store_map_details(self, schedule: Dict[str, MapSchedule]) -> int:
        """
        Fetch map metadata in batches and upsert each batch as it arrives.

        Batches are requested concurrently; all writes happen on this thread.

        Returns:
            Number of maps stored
        """
        uids = list(schedule)
        batch_size = self.settings.batch_size
        batches = [uids[i:i + batch_size] for i in range(0, len(uids), batch_size)]

        logger.info(f"Fetching map details in {len(batches)} batches...")
        progress = ProgressLogger(len(uids))
        stored = 0

        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
            future_to_batch = {
                executor.submit(self.client.fetch_map_batch, batch): batch
                for batch in batches
            }

            try:
                for future in as_completed(future_to_batch):
                    batch = future_to_batch[future]
                    metas = future.result()

                    records = []
                    for meta in metas:
                        scheduled = schedule.get(meta.uid)
                        if scheduled is None:
                            logger.warning(f"Ignoring unrequested map {meta.uid}")
                            continue
                        self.quality_checker.validate_map_meta(meta)
                        records.append(self._to_map_record(meta, scheduled))

                    missing = set(batch) - {record.uid for record in records}
                    if missing:
                        logger.warning(f"No metadata returned for {len(missing)} maps: {sorted(missing)}")

                    stored += self.store.upsert_maps(records)
                    progress.advance(len(batch))
            except Exception:
                for pending in future_to_batch:
                    pending.cancel()
                raise

        self.stats["maps_stored"] = stored
        logger.info("Map details stored in database")
        return stored

    def store_leaderboards(self, schedule: Dict[str, MapSchedule]) -> int:
        """
        Fetch each map's club leaderboard, classify medals and upsert runs.

        Maps are processed one at a time, in schedule order.

        Returns:
            Number of runs stored
        """
        logger.info("Fetching leaderboard data...")
        progress = ProgressLogger(len(schedule))
        stored = 0

        for map_uid in schedule:
            map_record = self.store.get_map(map_uid)
            if map_record is None:
                raise InvariantViolation(f"Map {map_uid} has no stored metadata; cannot classify its runs")

            entries = self.client.fetch_leaderboard(map_uid)
            self.stats["leaderboards_fetched"] += 1
            self.stats["entries_processed"] += len(entries)
            self.quality_checker.validate_leaderboard(map_uid, entries)

            runs = [
                RunRecord(
                    map_uid=map_uid,
                    user_id=entry.account_id,
                    time=entry.score,
                    medal=classify(entry.score, map_record).value,
                    position=entry.position
                )
                for entry in entries
            ]
            stored += self.store.upsert_runs(runs)
            progress.advance()

        self.stats["runs_stored"] = stored
        logger.info("Leaderboard data stored in database")
        return stored

    def collect_season(self, season: int) -> Dict[str, int]:
        """
        Collect every published map of a season and the club's runs on them.

        Args:
            season: Season year

        Returns:
            Collection statistics

        Raises:
            RemoteFetchFailure: A remote call failed; the job is marked failed
            InvariantViolation: A run could not be tied to a stored map
        """
        offsets = [offset for _, offset in self.season_manager.get_month_offsets(season)]
        logger.info(f"Starting campaign data collection for {season} ({len(offsets)} months)")

        job_id = self.job_manager.start_job(
            JOB_TYPE_SEASON_COLLECTION,
            season,
            metadata={"club_id": self.settings.club_id, "months": len(offsets)}
        )

        try:
            descriptors = self.fetch_months(offsets)
            schedule = self.build_schedule(descriptors, season)
            self.store_map_details(schedule)
            self.store_leaderboards(schedule)
            self.quality_checker.check_referential_integrity(self.store)
        except Exception as e:
            logger.error(f"Collection failed: {e}")
            self.job_manager.fail_job(
                job_id, str(e),
                records_processed=self.stats["entries_processed"],
                records_inserted=self.stats["maps_stored"] + self.stats["runs_stored"]
            )
            raise

        self.job_manager.complete_job(
            job_id,
            records_processed=self.stats["entries_processed"],
            records_inserted=self.stats["maps_stored"] + self.stats["runs_stored"]
        )
        logger.info(f"Data collection complete: {self.stats}")
        return dict(self.stats)


def main():
    """Command line interface for the collector."""
    parser = argparse.ArgumentParser(description="Collect a season of campaign maps and club runs")
    parser.add_argument("--season", type=int, help="Season year (default: current year)")
    parser.add_argument("--env", default=None, choices=["production", "test"],
                        help="Environment (production/test)")
    parser.add_argument("--no-reset", action="store_true",
                        help="Keep the season's existing rows instead of rebuilding them")

    args = parser.parse_args()

    season_manager = SeasonManager()
    season = args.season or season_manager.get_current_season()
    # Raises ValueError for a season outside the collectable range
    season_manager.get_elapsed_months(season)
    settings = CollectionSettings.from_env(args.env)

    # Authenticate before touching the store so an auth failure leaves it untouched
    access_token = NadeoTokenManager().get_access_token()

    store = CampaignStore(get_database_path(settings.environment))
    store.init_schema()
    if not args.no_reset:
        store.reset(season)

    client = LiveServicesClient(access_token, settings.club_id,
                                leaderboard_length=settings.leaderboard_length)
    collector = CampaignCollector(client, store, settings, season_manager=season_manager)
    collector.collect_season(season)

    collector.quality_checker.season_report(store, season)


if __name__ == "__main__":
    main()
