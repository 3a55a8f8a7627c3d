"""
Error kinds raised by the campaign collection pipeline.

None of these are retried inside the pipeline; they propagate to the caller,
which decides whether to re-run.
"""


class CampaignPipelineError(Exception):
    """Base class for pipeline failures."""


class AuthFailure(CampaignPipelineError):
    """Session or token exchange failed, was rate limited, or returned no token."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429


class RemoteFetchFailure(CampaignPipelineError):
    """A live-services request failed (transport error, bad status or body)."""

    def __init__(self, message: str, url: str = None, status_code: int = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ResponseDecodeError(RemoteFetchFailure):
    """A response body did not have the expected shape."""


class InvariantViolation(CampaignPipelineError):
    """Stored data broke a referential invariant (e.g. a run without its map)."""
