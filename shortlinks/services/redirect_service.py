"""
Redirect Service

This service handles short code resolution at visit time.
Separated from URL service so lookups never take the write lock.

A visit is classified as:
- NOT_FOUND: no record has exactly this code (case-sensitive)
- EXPIRED: the record exists but its expiry instant has passed
- ACTIVE: the record exists and is still valid; the caller redirects
"""

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from shortlinks.db.models import ShortLinkRecord
from shortlinks.services.link_store import LinkStore, Records
from shortlinks.services.url_service import current_time_ms

logger = logging.getLogger(__name__)


class ResolutionStatus(enum.Enum):
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    ACTIVE = "active"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a visit path."""
    status: ResolutionStatus
    record: Optional[ShortLinkRecord] = None


def resolve(path: str, records: Records, now_ms: int) -> Resolution:
    """
    Classify a visit to ``path`` against the store.

    Args:
        path: The visited code, with or without a leading "/"
        records: Store contents, newest first
        now_ms: Current time in epoch milliseconds

    Returns:
        Resolution with the first matching record, if any
    """
    short_code = path[1:] if path.startswith("/") else path

    found = next((record for record in records if record.short_code == short_code), None)
    if found is None:
        return Resolution(ResolutionStatus.NOT_FOUND)

    if found.is_expired(now_ms):
        return Resolution(ResolutionStatus.EXPIRED, found)

    return Resolution(ResolutionStatus.ACTIVE, found)


class RedirectService:
    """Looks up short codes in a LinkStore for redirection."""

    def __init__(self, store: LinkStore, clock: Callable[[], int] = current_time_ms):
        self.store = store
        self.clock = clock

    async def resolve_short_code(self, short_code: str, now_ms: Optional[int] = None) -> Resolution:
        """Load the store and classify ``short_code``."""
        records = await self.store.load()
        resolution = resolve(short_code, records, self.clock() if now_ms is None else now_ms)

        if resolution.status is ResolutionStatus.ACTIVE:
            logger.info(f"Redirecting {short_code} to {resolution.record.long_url}")
        elif resolution.status is ResolutionStatus.EXPIRED:
            logger.info(f"Short URL {short_code} expired at {resolution.record.expires_at}")
        else:
            logger.info(f"Short URL {short_code} not found")

        return resolution
