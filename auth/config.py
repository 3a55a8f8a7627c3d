"""
Authentication configuration for the Ubisoft / Nadeo live services.
Credentials are read from the environment (a local .env file is loaded first).
"""

import os

from dotenv import load_dotenv

load_dotenv()

# ---- CLIENT ----
USER_AGENT = os.getenv('TM_USER_AGENT', 'Campaign Season Wrapped')

# ---- API ENDPOINTS ----
UBI_APP_ID = '86263886-327a-4328-ac69-527f0d20a237'
UBI_SESSION_URL = 'https://public-ubiservices.ubi.com/v3/profiles/sessions'
NADEO_TOKEN_URL = 'https://prod.trackmania.core.nadeo.online/v2/authentication/token/ubiservices'
LIVE_SERVICES_URL = 'https://live-services.trackmania.nadeo.live/api/token'
TOKEN_AUDIENCE = 'NadeoLiveServices'

# Live service tokens are valid for one hour
TOKEN_LIFETIME_SECONDS = 3600
TOKEN_REFRESH_MARGIN_SECONDS = 300

AUTH_REQUEST_TIMEOUT = 20  # Seconds


def require_env(name: str) -> str:
    """Return a required environment variable or raise an error."""
    value = os.getenv(name)
    if not value:
        raise ValueError(f"Missing required environment variable: {name}. Please add it to your .env file.")
    return value


__all__ = [
    'USER_AGENT',
    'UBI_APP_ID', 'UBI_SESSION_URL', 'NADEO_TOKEN_URL', 'LIVE_SERVICES_URL',
    'TOKEN_AUDIENCE', 'TOKEN_LIFETIME_SECONDS', 'TOKEN_REFRESH_MARGIN_SECONDS',
    'AUTH_REQUEST_TIMEOUT', 'require_env'
]
