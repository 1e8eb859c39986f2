"""
URL Shortening Service

This service handles the core business logic for URL shortening:
- Validating the long URL and any custom short code
- Generating random base-36 short codes that do not collide with the store
- Computing the expiry timestamp from the requested validity

Design Decisions:
- allocate() is a pure function of (request, store snapshot, now): it never
  touches the store, so it can be tested without a database
- Random generation is rejection sampling over a finite code space, bounded
  by max_attempts instead of looping forever
- Collision checks cover expired records too, since they are never purged
"""

import logging
import math
import random
import re
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Union

from shortlinks.core.exceptions import ShortCodeInUseError, CodeSpaceExhaustedError, URLShortenerException
from shortlinks.core.setting import settings
from shortlinks.core.validators import validate_url, validate_short_code
from shortlinks.db.models import ShortLinkRecord
from shortlinks.services.link_store import LinkStore, Records, existing_codes, insert_record

logger = logging.getLogger(__name__)

BASE36_CHARS = "0123456789abcdefghijklmnopqrstuvwxyz"
DEFAULT_CODE_LENGTH = 6
DEFAULT_VALIDITY_MINUTES = 30
DEFAULT_MAX_ATTEMPTS = 1000
MILLISECONDS_PER_MINUTE = 60 * 1000

_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")

ValidityInput = Optional[Union[int, float, str]]


def current_time_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def generate_short_code(
    existing: Iterable[str],
    length: int = DEFAULT_CODE_LENGTH,
    rng: Optional[random.Random] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> str:
    """
    Generate a random base-36 short code not present in ``existing``.

    Args:
        existing: Codes already in use
        length: Number of characters in the code
        rng: Random source (module-level generator if omitted)
        max_attempts: Candidates to try before giving up

    Returns:
        A code of ``length`` characters from [0-9a-z]

    Raises:
        CodeSpaceExhaustedError: If every candidate collided
    """
    taken = existing if isinstance(existing, (set, frozenset)) else set(existing)
    choices = rng.choices if rng is not None else random.choices

    for _ in range(max_attempts):
        code = "".join(choices(BASE36_CHARS, k=length))
        if code not in taken:
            return code

    raise CodeSpaceExhaustedError(max_attempts)


def resolve_validity_minutes(value: ValidityInput, default: int = DEFAULT_VALIDITY_MINUTES) -> int:
    """
    Turn user-supplied validity into a positive number of minutes.

    Strings are read up to their first non-digit ("15abc" -> 15), floats are
    truncated. Missing, non-numeric, zero or negative input gives ``default``.

    Examples:
        resolve_validity_minutes(None) -> 30
        resolve_validity_minutes("45") -> 45
        resolve_validity_minutes("-5") -> 30
        resolve_validity_minutes("soon") -> 30
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, int):
        minutes = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return default
        minutes = int(value)
    else:
        match = _LEADING_INTEGER.match(str(value))
        if not match:
            return default
        minutes = int(match.group(1))

    return minutes if minutes > 0 else default


@dataclass(frozen=True)
class AllocationRequest:
    """A request to shorten ``long_url``."""
    long_url: Optional[str]
    custom_code: Optional[str] = None
    validity_minutes: ValidityInput = None


def allocate(
    request: AllocationRequest,
    records: Records,
    now_ms: int,
    *,
    code_length: int = DEFAULT_CODE_LENGTH,
    default_validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
) -> ShortLinkRecord:
    """
    Build a new record for ``request`` against a snapshot of the store.

    The store is not modified; the caller inserts the returned record.

    Args:
        request: URL, optional custom code and optional validity
        records: Current store contents
        now_ms: Current time in epoch milliseconds

    Returns:
        The new ShortLinkRecord

    Raises:
        EmptyInputError: If the URL is blank
        InvalidURLError: If the URL is not absolute
        InvalidShortCodeError: If the custom code is malformed
        ShortCodeInUseError: If the custom code already exists (case-sensitive)
        CodeSpaceExhaustedError: If no free random code was found
    """
    long_url = validate_url(request.long_url)
    taken = existing_codes(records)

    custom_code = (request.custom_code or "").strip()
    if custom_code:
        short_code = validate_short_code(custom_code)
        if short_code in taken:
            raise ShortCodeInUseError(short_code)
    else:
        short_code = generate_short_code(taken, length=code_length, rng=rng, max_attempts=max_attempts)

    minutes = resolve_validity_minutes(request.validity_minutes, default=default_validity_minutes)

    return ShortLinkRecord(
        long_url=long_url,
        short_code=short_code,
        expires_at=now_ms + minutes * MILLISECONDS_PER_MINUTE,
    )


class URLShorteningService:
    """
    Creates short URLs and persists them in a LinkStore.

    Each creation is one read-modify-write cycle under the store's write
    lock, which keeps short codes unique under concurrent requests.
    """

    def __init__(
        self,
        store: LinkStore,
        code_length: Optional[int] = None,
        default_validity_minutes: Optional[int] = None,
        max_generation_attempts: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], int] = current_time_ms,
    ):
        """
        Initialize the URL shortening service.

        Args:
            store: Link store shared by the application
            code_length: Random code length (defaults to SHORT_CODE_LENGTH)
            default_validity_minutes: Fallback validity (defaults to DEFAULT_VALIDITY_MINUTES)
            max_generation_attempts: Bound on random generation (defaults to MAX_GENERATION_ATTEMPTS)
            rng: Random source for code generation
            clock: Returns the current time in epoch milliseconds
        """
        self.store = store
        self.code_length = code_length or settings.SHORT_CODE_LENGTH
        self.default_validity_minutes = default_validity_minutes or settings.DEFAULT_VALIDITY_MINUTES
        self.max_generation_attempts = max_generation_attempts or settings.MAX_GENERATION_ATTEMPTS
        self.rng = rng
        self.clock = clock

    async def create_short_url(
        self,
        long_url: Optional[str],
        custom_code: Optional[str] = None,
        validity_minutes: ValidityInput = None,
    ) -> ShortLinkRecord:
        """
        Create and persist a new short URL.

        Returns:
            The stored ShortLinkRecord

        Raises:
            URLShortenerException: Any validation or allocation failure;
                the store is left unchanged
            DatabaseError: If the store cannot be read or written
        """
        request = AllocationRequest(
            long_url=long_url,
            custom_code=custom_code,
            validity_minutes=validity_minutes,
        )
        logger.info(
            f"Shorten requested: url={long_url!r} custom_code={custom_code!r} "
            f"validity={validity_minutes!r}"
        )

        async with self.store.write_lock:
            records = await self.store.load()

            try:
                record = allocate(
                    request,
                    records,
                    self.clock(),
                    code_length=self.code_length,
                    default_validity_minutes=self.default_validity_minutes,
                    max_attempts=self.max_generation_attempts,
                    rng=self.rng,
                )
            except URLShortenerException as e:
                logger.info(f"Shorten rejected: {type(e).__name__}: {e.message}")
                raise

            await self.store.save(insert_record(record, records))

        logger.info(
            f"Short URL created: code={record.short_code} "
            f"url={record.long_url!r} expires_at={record.expires_at}"
        )
        return record

    async def list_short_urls(self) -> Records:
        """All stored short URLs, newest first."""
        return await self.store.load()
