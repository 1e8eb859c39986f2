"""
Input Validators

This module provides validation functions for user inputs.
Validators return the accepted value or raise a URLShortenerException
subclass describing what is wrong with it.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from pydantic import AnyUrl, TypeAdapter, ValidationError

from shortlinks.core.exceptions import EmptyInputError, InvalidURLError, InvalidShortCodeError

SHORT_CODE_PATTERN = re.compile(r"[A-Za-z0-9]{3,16}")

# Longest URL accepted for shortening (2048 per RFC 7230 guidance)
MAX_URL_LENGTH = 2048

_any_url_adapter = TypeAdapter(AnyUrl)


def validate_url(url: Optional[str]) -> str:
    """
    Validate that the input is an absolute URL.

    Blank input is rejected before any parsing is attempted. Any scheme
    is accepted as long as the URL also names a host.

    Args:
        url: The raw URL input

    Returns:
        The URL with surrounding whitespace removed

    Raises:
        EmptyInputError: If the input is empty or whitespace-only
        InvalidURLError: If the input is not an absolute URL
    """
    if url is None or not str(url).strip():
        raise EmptyInputError()

    url = str(url).strip()

    if len(url) > MAX_URL_LENGTH:
        raise InvalidURLError(url, reason=f"URL is longer than {MAX_URL_LENGTH} characters")

    try:
        _any_url_adapter.validate_python(url)
    except ValidationError as e:
        raise InvalidURLError(url, reason=e.errors()[0]["msg"])

    try:
        result = urlparse(url)
        # Accessing .port validates it (raises ValueError when out of range)
        result.port
    except ValueError as e:
        raise InvalidURLError(url, reason=str(e))

    if not result.scheme or not result.netloc or not result.hostname:
        raise InvalidURLError(url, reason="URL must have a scheme and a host")

    return url


def is_valid_short_code(short_code: Optional[str]) -> bool:
    """Check a short code against the 3-16 alphanumeric format."""
    if not isinstance(short_code, str):
        return False
    return SHORT_CODE_PATTERN.fullmatch(short_code) is not None


def validate_short_code(short_code: Optional[str]) -> str:
    """
    Validate a custom short code.

    Args:
        short_code: The code requested by the user

    Returns:
        The short code, unchanged

    Raises:
        InvalidShortCodeError: If the code is not 3-16 characters of [A-Za-z0-9]
    """
    if not is_valid_short_code(short_code):
        raise InvalidShortCodeError(short_code)
    return short_code
