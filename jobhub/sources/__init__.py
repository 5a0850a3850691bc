from .base import JobSource
from .mock import MockSource
from .remote import RemoteJobSource

from jobhub.config import Settings
from jobhub.log import get_logger

log = get_logger(__name__)

__all__ = ["JobSource", "MockSource", "RemoteJobSource", "get_source"]


def get_source(settings: Settings) -> JobSource:
    if settings.use_mock or not settings.api_url:
        log.info("Registered source: MockSource (no remote API configured)")
        return MockSource()

    if not settings.api_key:
        log.warning("JOBHUB_API_KEY not set, requesting %s without an API key", settings.api_url)
    log.info("Registered source: remote API %s", settings.api_url)
    return RemoteJobSource(
        settings.api_url,
        settings.api_key,
        timeout=settings.fetch_timeout,
        attempts=settings.fetch_attempts,
    )
