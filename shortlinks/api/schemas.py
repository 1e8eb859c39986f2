"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

URL and short code validation happens in the service layer so that every
failure maps to one user-facing message.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from shortlinks.db.models import ShortLinkRecord


class ShortenRequest(BaseModel):
    """Request model for URL shortening endpoint."""
    url: Optional[str] = Field(default=None, description="The long URL to shorten")
    custom_code: Optional[str] = Field(
        default=None,
        description="Optional custom short code (3-16 alphanumeric characters)"
    )
    # Strict members keep JSON true/false from being coerced to 1/0
    validity: Optional[Union[StrictInt, StrictFloat, StrictStr, StrictBool]] = Field(
        default=None,
        description="Validity in minutes; missing or non-positive values mean 30"
    )


class ShortenResponse(BaseModel):
    """Response model for a stored short URL."""
    short_code: str = Field(..., description="The short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The original long URL")
    expires_at: int = Field(..., description="Expiry as epoch milliseconds")

    @classmethod
    def from_record(cls, record: ShortLinkRecord, base_url: str) -> "ShortenResponse":
        return cls(
            short_code=record.short_code,
            short_url=f"{base_url.rstrip('/')}/{record.short_code}",
            original_url=record.long_url,
            expires_at=record.expires_at,
        )
