"""
Link Store

Persists the ordered list of short links as one JSON blob under a fixed
storage key. The list is newest-first; the only mutation is prepending a
record, after which the whole list is re-encoded and written back.

Design:
- decode/encode/insert are pure functions over tuples of records
- LinkStore does the database I/O and owns the single-writer lock
- A missing or unreadable blob loads as an empty store
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from shortlinks.core.exceptions import DatabaseError
from shortlinks.db.interface import DatabaseAdapter
from shortlinks.db.models import ShortLinkRecord, StorageEntry
from shortlinks.db.sqlite_adapter import get_database_adapter

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "shortened-urls"

Records = tuple[ShortLinkRecord, ...]

_records_adapter = TypeAdapter(list[ShortLinkRecord])


def decode_records(raw: Optional[Union[str, bytes]]) -> Records:
    """
    Decode a persisted blob into records.

    Never raises: absent, empty or malformed input yields an empty store.

    Args:
        raw: JSON array of {longUrl, shortUrl, expiresAt} objects

    Returns:
        Tuple of records in stored order
    """
    if not raw:
        return ()

    try:
        return tuple(_records_adapter.validate_json(raw))
    except ValidationError as e:
        logger.warning(
            f"Discarding unreadable link store blob ({e.error_count()} errors); starting empty"
        )
        return ()


def encode_records(records: Iterable[ShortLinkRecord]) -> str:
    """Encode records to the JSON wire form, preserving order."""
    return _records_adapter.dump_json(list(records), by_alias=True).decode("utf-8")


def insert_record(record: ShortLinkRecord, records: Records) -> Records:
    """Return a new sequence with ``record`` in front. ``records`` is left untouched."""
    return (record, *records)


def existing_codes(records: Iterable[ShortLinkRecord]) -> set[str]:
    """Short codes of every record, expired or not."""
    return {record.short_code for record in records}


class LinkStore:
    """
    Database-backed store for the short link list.

    One instance is created at application startup and shared by the
    request handlers. Callers performing read-modify-write cycles must hold
    ``write_lock`` for the whole cycle.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker,
        storage_key: str = DEFAULT_STORAGE_KEY,
        adapter: Optional[DatabaseAdapter] = None,
    ):
        """
        Initialize the link store.

        Args:
            session_maker: Async session factory for the storage database
            storage_key: Key the blob is stored under
            adapter: Database adapter used for row locking
        """
        self.session_maker = session_maker
        self.storage_key = storage_key
        self.adapter = adapter or get_database_adapter()
        self.write_lock = asyncio.Lock()

    async def load(self) -> Records:
        """
        Load all records, newest first.

        Raises:
            DatabaseError: If the database cannot be read
        """
        try:
            async with self.session_maker() as session:
                entry = await session.get(StorageEntry, self.storage_key)
                raw = entry.value if entry is not None else None
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to load short links", original_error=e)

        return decode_records(raw)

    async def save(self, records: Records) -> None:
        """
        Overwrite the persisted blob with ``records``.

        Raises:
            DatabaseError: If the write fails (nothing is persisted)
        """
        payload = encode_records(records)

        try:
            async with self.session_maker() as session:
                await self.adapter.lock_storage_row(session, self.storage_key)

                entry = await session.get(StorageEntry, self.storage_key)
                if entry is None:
                    entry = StorageEntry(key=self.storage_key, value=payload)
                else:
                    entry.value = payload
                entry.updated_at = datetime.now(timezone.utc)

                session.add(entry)
                await session.commit()
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to save short links", original_error=e)

        logger.debug(f"Saved {len(records)} short links under '{self.storage_key}'")
