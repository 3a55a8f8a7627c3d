"""
Token manager for the Nadeo live services.
Exchanges UbiServices credentials for a session ticket, then the ticket for a
live-services access token, and caches the token until shortly before expiry.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Optional

import requests

from auth.config import (
    AUTH_REQUEST_TIMEOUT,
    NADEO_TOKEN_URL,
    TOKEN_AUDIENCE,
    TOKEN_LIFETIME_SECONDS,
    TOKEN_REFRESH_MARGIN_SECONDS,
    UBI_APP_ID,
    UBI_SESSION_URL,
    USER_AGENT,
    require_env,
)
from data_pipeline.common.exceptions import AuthFailure

logger = logging.getLogger(__name__)


class NadeoTokenManager:
    """Manages live-services access tokens with automatic renewal."""

    def __init__(self, credentials: Optional[str] = None, user_agent: str = USER_AGENT):
        """
        Initialize token manager.

        Args:
            credentials: Base64 "email:password"; read from TM_UBI_CREDENTIALS if omitted
            user_agent: User-Agent header sent with every auth request
        """
        self.credentials = credentials or require_env('TM_UBI_CREDENTIALS')
        self.user_agent = user_agent
        self.tokens: Dict = {'access_token': None, 'expires_at': None}

    def _post_json(self, url: str, headers: Dict[str, str]) -> Dict:
        """POST the audience payload and return the decoded body."""
        try:
            response = requests.post(
                url,
                headers=headers,
                json={'audience': TOKEN_AUDIENCE},
                timeout=AUTH_REQUEST_TIMEOUT
            )
        except requests.exceptions.RequestException as e:
            raise AuthFailure(f"Auth request to {url} failed: {e}") from e

        if response.status_code == 429:
            raise AuthFailure("Rate limited by identity provider", status_code=429)

        try:
            data = response.json()
        except ValueError as e:
            raise AuthFailure(
                f"Auth response from {url} is not JSON (HTTP {response.status_code})",
                status_code=response.status_code
            ) from e

        # UbiServices reports rate limiting in the body with a 200-ish envelope
        if isinstance(data, dict) and data.get('httpCode') == 429:
            raise AuthFailure("Rate limited by identity provider", status_code=429)

        if response.status_code >= 400:
            raise AuthFailure(
                f"Auth request to {url} failed with HTTP {response.status_code}",
                status_code=response.status_code
            )

        return data

    def _create_session_ticket(self) -> str:
        """Open a UbiServices session and return its ticket."""
        headers = {
            'Content-Type': 'application/json',
            'Ubi-AppId': UBI_APP_ID,
            'Authorization': f'Basic {self.credentials}',
            'User-Agent': self.user_agent
        }
        data = self._post_json(UBI_SESSION_URL, headers)

        ticket = data.get('ticket')
        if not ticket:
            raise AuthFailure("UbiServices session response contained no ticket")
        return ticket

    def _exchange_ticket(self, ticket: str) -> str:
        """Exchange a session ticket for a live-services access token."""
        headers = {
            'Content-Type': 'application/json',
            'Authorization': f'ubi_v1 t={ticket}',
            'User-Agent': self.user_agent
        }
        data = self._post_json(NADEO_TOKEN_URL, headers)

        access_token = data.get('accessToken')
        if not access_token:
            raise AuthFailure("Failed to get auth token")
        return access_token

    def _refresh_access_token(self) -> str:
        """Run the full two-step exchange and store the new token."""
        logger.info("Getting auth token...")
        ticket = self._create_session_ticket()
        access_token = self._exchange_ticket(ticket)

        self.tokens['access_token'] = access_token
        self.tokens['expires_at'] = datetime.now() + timedelta(seconds=TOKEN_LIFETIME_SECONDS)
        logger.info("Auth token received")
        return access_token

    def get_access_token(self) -> str:
        """Get a valid access token, renewing it if necessary."""
        if self.tokens.get('access_token') and self.tokens.get('expires_at'):
            margin = timedelta(seconds=TOKEN_REFRESH_MARGIN_SECONDS)
            if datetime.now() < self.tokens['expires_at'] - margin:
                return self.tokens['access_token']

        return self._refresh_access_token()
