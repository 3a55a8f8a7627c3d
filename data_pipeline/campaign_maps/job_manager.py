"""
Job Management Module for Campaign Collection
Handles job logging so that a partial ingestion is never mistaken for a
complete one.
"""

import json
import logging
from datetime import datetime
from typing import Dict, Optional
from uuid import uuid4

from data_pipeline.campaign_maps.config import (
    JOB_STATUS_COMPLETED,
    JOB_STATUS_FAILED,
    JOB_STATUS_RUNNING,
)
from database.db_utils import transaction
from database.store import CampaignStore

logger = logging.getLogger(__name__)


class CollectionJobManager:
    """Manages job lifecycle for season collection runs."""

    def __init__(self, store: CampaignStore, environment: str = "production"):
        """
        Initialize job manager.

        Args:
            store: Store whose job_log table records the jobs
            environment: 'production' or 'test'
        """
        self.store = store
        self.environment = environment
        self.current_job_id = None

    def start_job(self, job_type: str, season: int, metadata: Dict = None) -> str:
        """
        Start a new job and create job log entry.

        Args:
            job_type: Type of job (e.g. 'season_collection')
            season: Season year being collected
            metadata: Additional job metadata

        Returns:
            job_id: Unique job identifier
        """
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        job_id = f"{job_type}_{self.environment}_{timestamp}_{uuid4().hex[:8]}"

        with self.store.connect() as conn:
            with transaction(conn):
                conn.execute("""
                    INSERT INTO job_log (
                        job_id, job_type, environment, status,
                        season, start_time, metadata
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    job_id,
                    job_type,
                    self.environment,
                    JOB_STATUS_RUNNING,
                    season,
                    datetime.now().isoformat(),
                    json.dumps(metadata) if metadata else None
                ))

        self.current_job_id = job_id
        logger.info(f"Started job: {job_id}")
        return job_id

    def update_job(self,
                   job_id: str,
                   status: str = None,
                   records_processed: int = None,
                   records_inserted: int = None,
                   error_message: str = None) -> None:
        """
        Update job status and statistics.

        Args:
            job_id: Job identifier
            status: New status ('running', 'completed', 'failed')
            records_processed: Number of records processed
            records_inserted: Number of records inserted
            error_message: Error message if failed
        """
        updates = []
        params = []

        if status:
            updates.append("status = ?")
            params.append(status)

        if records_processed is not None:
            updates.append("records_processed = ?")
            params.append(records_processed)

        if records_inserted is not None:
            updates.append("records_inserted = ?")
            params.append(records_inserted)

        if error_message:
            updates.append("error_message = ?")
            params.append(error_message)

        if status in (JOB_STATUS_COMPLETED, JOB_STATUS_FAILED):
            updates.append("end_time = ?")
            params.append(datetime.now().isoformat())

        if not updates:
            return

        params.append(job_id)
        with self.store.connect() as conn:
            with transaction(conn):
                conn.execute(f"UPDATE job_log SET {', '.join(updates)} WHERE job_id = ?", params)

        logger.info(f"Updated job {job_id}: status={status}")

    def complete_job(self, job_id: str, records_processed: int, records_inserted: int) -> None:
        self.update_job(job_id, JOB_STATUS_COMPLETED, records_processed, records_inserted)

    def fail_job(self, job_id: str, error_message: str,
                 records_processed: int = None, records_inserted: int = None) -> None:
        self.update_job(job_id, JOB_STATUS_FAILED, records_processed, records_inserted, error_message)

    def get_job_status(self, job_id: str) -> Optional[Dict]:
        """
        Get current job status and statistics.

        Args:
            job_id: Job identifier

        Returns:
            Dictionary with job information, or None if unknown
        """
        with self.store.connect() as conn:
            row = conn.execute("SELECT * FROM job_log WHERE job_id = ?", (job_id,)).fetchone()

        return self._row_to_dict(row)

    def get_latest_job(self, season: int) -> Optional[Dict]:
        """Get the most recently started job for a season."""
        with self.store.connect() as conn:
            row = conn.execute("""
                SELECT * FROM job_log
                WHERE season = ?
                ORDER BY start_time DESC
                LIMIT 1
            """, (season,)).fetchone()

        return self._row_to_dict(row)

    @staticmethod
    def _row_to_dict(row) -> Optional[Dict]:
        if row is None:
            return None
        job = dict(row)
        job['metadata'] = json.loads(job['metadata']) if job['metadata'] else {}
        return job
