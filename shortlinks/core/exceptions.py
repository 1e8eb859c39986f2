"""
Custom Exceptions

This module defines custom exceptions for better error handling
and more specific error messages.

Every exception carries a single user-facing ``message`` which the API
layer returns as the error detail.
"""


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""

    message = "Something went wrong."

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class EmptyInputError(URLShortenerException):
    """Raised when the long URL is blank."""

    message = "Please enter a URL."


class InvalidURLError(URLShortenerException):
    """Raised when URL validation fails."""

    message = "Invalid URL format. Please enter a valid URL including http(s)://"

    def __init__(self, url: str, reason: str = None):
        self.url = url
        self.reason = reason
        super().__init__()


class InvalidShortCodeError(URLShortenerException):
    """Raised when a custom short code does not match the allowed format."""

    message = "Shortcode must be 3-16 alphanumeric characters."

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__()


class ShortCodeInUseError(URLShortenerException):
    """Raised when a custom short code is already present in the store."""

    message = "Shortcode already in use. Please choose another."

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__()


class CodeSpaceExhaustedError(URLShortenerException):
    """Raised when random generation keeps colliding with existing codes."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not generate a free short code after {attempts} attempts. "
            "Please choose a custom shortcode."
        )


class DatabaseError(URLShortenerException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
