"""
Data Models for the Short Link Service

This module defines:
- StorageEntry: SQLModel table holding serialized blobs under fixed keys
- ShortLinkRecord: one short code -> long URL mapping with its expiry

Design Decisions:
- All short links are persisted together as one JSON array under a single
  key, so the table is a plain key/value store with no per-link rows
- ShortLinkRecord serializes with the camelCase names of the original
  browser blob (longUrl, shortUrl, expiresAt) for compatibility
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlalchemy import String, DateTime, Text
from sqlmodel import SQLModel, Field, Column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StorageEntry(SQLModel, table=True):
    """
    Key/value table for persisted blobs.

    Fields:
    - key: Storage key (e.g. "shortened-urls")
    - value: Serialized payload, overwritten in full on every save
    - updated_at: When the value was last written
    """
    __tablename__ = "storage_entries"

    key: str = Field(sa_column=Column(String(100), primary_key=True))
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class ShortLinkRecord(BaseModel):
    """
    A shortened URL mapping.

    Fields:
    - long_url: The absolute URL the short code redirects to (wire name: longUrl)
    - short_code: 3-16 alphanumeric characters, unique within a store (wire name: shortUrl)
    - expires_at: Expiry as epoch milliseconds (wire name: expiresAt)
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    long_url: str = PydanticField(alias="longUrl")
    short_code: str = PydanticField(alias="shortUrl")
    expires_at: int = PydanticField(alias="expiresAt")

    def is_expired(self, now_ms: int) -> bool:
        """A record stays active up to and including its expiry instant."""
        return now_ms > self.expires_at
