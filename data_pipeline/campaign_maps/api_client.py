"""
Live Services API Client
Authenticated reads of campaign months, map metadata and club leaderboards.

Every call either returns decoded records or raises RemoteFetchFailure;
nothing is retried here.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Sequence

import requests

from auth.config import LIVE_SERVICES_URL, USER_AGENT
from data_pipeline.campaign_maps.config import (
    LEADERBOARD_GROUP,
    LEADERBOARD_LENGTH,
    MAX_MAP_BATCH_SIZE,
    REQUEST_TIMEOUT,
)
from data_pipeline.campaign_maps.models import LeaderboardEntry, MapMeta, MonthDescriptor
from data_pipeline.campaign_maps.parser import CampaignParser
from data_pipeline.common.exceptions import AuthFailure, RemoteFetchFailure

logger = logging.getLogger(__name__)


class LiveServicesClient:
    """Reads campaign data for one club from the live services."""

    def __init__(self, access_token: str, club_id: str,
                 base_url: str = LIVE_SERVICES_URL,
                 user_agent: str = USER_AGENT,
                 timeout: float = REQUEST_TIMEOUT,
                 leaderboard_length: int = LEADERBOARD_LENGTH):
        """
        Initialize the client.

        Args:
            access_token: Live-services token from NadeoTokenManager
            club_id: Club whose members' leaderboards are read
            base_url: API root
            user_agent: User-Agent header
            timeout: Per-request transport timeout in seconds
            leaderboard_length: Number of leaderboard rows requested per map
        """
        if not access_token:
            raise AuthFailure("Failed to get auth token")
        if not club_id:
            raise ValueError("club_id is required")

        self.access_token = access_token
        self.club_id = club_id
        self.base_url = base_url.rstrip('/')
        self.user_agent = user_agent
        self.timeout = timeout
        self.leaderboard_length = leaderboard_length
        self.parser = CampaignParser()

        # Statistics tracking, shared by worker threads
        self.lock = threading.Lock()
        self.stats = {
            "requests_made": 0,
            "requests_failed": 0
        }

    def _count(self, key: str):
        with self.lock:
            self.stats[key] += 1

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"nadeo_v1 t={self.access_token}",
            "User-Agent": self.user_agent,
            "Content-Type": "application/json"
        }

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make an authenticated GET request.

        Args:
            path: Path below the API root
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            RemoteFetchFailure: On transport errors, non-2xx status or a non-JSON body
        """
        url = f"{self.base_url}{path}"
        self._count("requests_made")

        try:
            response = requests.get(
                url,
                headers=self._headers(),
                params=params,
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            self._count("requests_failed")
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"Request to {url} failed with HTTP {status_code}")
            raise RemoteFetchFailure(f"GET {url} failed: {e}", url=url, status_code=status_code) from e
        except requests.exceptions.RequestException as e:
            self._count("requests_failed")
            logger.error(f"Request to {url} failed: {e}")
            raise RemoteFetchFailure(f"GET {url} failed: {e}", url=url) from e

        try:
            return response.json()
        except ValueError as e:
            self._count("requests_failed")
            raise RemoteFetchFailure(f"GET {url} returned a non-JSON body", url=url,
                                     status_code=response.status_code) from e

    def fetch_month(self, offset: int) -> MonthDescriptor:
        """
        Fetch one month of the daily campaign.

        Args:
            offset: Months back from the current month (0 = current)

        Returns:
            MonthDescriptor for that month
        """
        if offset < 0:
            raise ValueError(f"Month offset must not be negative: {offset}")

        logger.debug(f"Fetching campaign month at offset {offset}")
        data = self._get_json("/campaign/month", params={"length": 1, "offset": offset})
        return self.parser.parse_month_response(data)

    def fetch_map_batch(self, uids: Sequence[str]) -> List[MapMeta]:
        """
        Fetch metadata for up to MAX_MAP_BATCH_SIZE maps in one request.

        Args:
            uids: Map uids

        Returns:
            List of MapMeta records (the service may omit unknown uids)
        """
        if not uids:
            return []
        if len(uids) > MAX_MAP_BATCH_SIZE:
            raise ValueError(f"At most {MAX_MAP_BATCH_SIZE} maps per request, got {len(uids)}")

        logger.debug(f"Fetching metadata for {len(uids)} maps")
        data = self._get_json("/map/get-multiple", params={"mapUidList": ",".join(uids)})
        return self.parser.parse_maps_response(data)

    def fetch_leaderboard(self, map_uid: str) -> List[LeaderboardEntry]:
        """
        Fetch the club's top personal bests on a map.

        Args:
            map_uid: Map uid

        Returns:
            List of LeaderboardEntry records, best first
        """
        path = (f"/leaderboard/group/{LEADERBOARD_GROUP}/map/{map_uid}"
                f"/club/{self.club_id}/top")
        data = self._get_json(path, params={"length": self.leaderboard_length, "offset": 0})
        return self.parser.parse_leaderboard_response(data)
