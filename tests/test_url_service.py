"""
Tests for short URL allocation.

allocate() is pure, so most tests run without a database; the service
tests at the bottom use the temporary store fixture.
"""

import asyncio
import random
import re

import pytest

from shortlinks.core.exceptions import (
    EmptyInputError,
    InvalidURLError,
    InvalidShortCodeError,
    ShortCodeInUseError,
    CodeSpaceExhaustedError,
)
from shortlinks.db.models import ShortLinkRecord
from shortlinks.services.url_service import (
    AllocationRequest,
    BASE36_CHARS,
    URLShorteningService,
    allocate,
    generate_short_code,
    resolve_validity_minutes,
)

NOW_MS = 1_700_000_000_000
THIRTY_MINUTES_MS = 30 * 60 * 1000
RANDOM_CODE = re.compile(r"^[A-Za-z0-9]{6}$")


def make_record(code: str, long_url: str = "https://example.com", expires_at: int = NOW_MS) -> ShortLinkRecord:
    return ShortLinkRecord(long_url=long_url, short_code=code, expires_at=expires_at)


class TestGenerateShortCode:
    """Test random code generation."""

    def test_default_code_is_six_base36_characters(self):
        for _ in range(200):
            code = generate_short_code(set())
            assert len(code) == 6
            assert set(code) <= set(BASE36_CHARS)

    def test_skips_codes_already_in_use(self):
        taken = generate_short_code(set(), rng=random.Random(42))

        code = generate_short_code({taken}, rng=random.Random(42))

        assert code != taken
        assert RANDOM_CODE.match(code)

    def test_gives_up_when_code_space_is_full(self):
        every_single_char_code = set(BASE36_CHARS)

        with pytest.raises(CodeSpaceExhaustedError) as exc_info:
            generate_short_code(every_single_char_code, length=1, max_attempts=50)

        assert exc_info.value.attempts == 50

    def test_finds_last_free_code(self):
        taken = set(BASE36_CHARS) - {"q"}
        assert generate_short_code(taken, length=1, rng=random.Random(7), max_attempts=10_000) == "q"


class TestResolveValidityMinutes:
    """Test validity parsing and the 30 minute default."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, 30),
            ("", 30),
            ("abc", 30),
            (0, 30),
            ("0", 30),
            (-5, 30),
            ("-5", 30),
            (0.5, 30),
            (float("nan"), 30),
            (True, 30),
            (45, 45),
            ("45", 45),
            (" 10", 10),
            ("15abc", 15),
            ("2.9", 2),
            (2.9, 2),
        ],
    )
    def test_resolution(self, value, expected):
        assert resolve_validity_minutes(value) == expected

    def test_custom_default(self):
        assert resolve_validity_minutes(None, default=60) == 60


class TestAllocate:
    """Test the allocator against store snapshots."""

    def test_random_code_with_defaults(self):
        store = (make_record("abc"), make_record("xyz123"))

        record = allocate(AllocationRequest("https://example.com"), store, NOW_MS)

        assert record.long_url == "https://example.com"
        assert RANDOM_CODE.match(record.short_code)
        assert record.short_code not in {"abc", "xyz123"}
        assert record.expires_at == NOW_MS + THIRTY_MINUTES_MS

    def test_custom_code_preserved_exactly(self):
        record = allocate(AllocationRequest("https://example.com", custom_code="MyLink42"), (), NOW_MS)
        assert record.short_code == "MyLink42"

    def test_custom_code_is_trimmed(self):
        record = allocate(AllocationRequest("https://example.com", custom_code="  abc  "), (), NOW_MS)
        assert record.short_code == "abc"

    def test_blank_custom_code_generates_one(self):
        record = allocate(AllocationRequest("https://example.com", custom_code="   "), (), NOW_MS)
        assert RANDOM_CODE.match(record.short_code)

    def test_custom_code_in_use(self):
        store = (make_record("abc"),)

        with pytest.raises(ShortCodeInUseError) as exc_info:
            allocate(AllocationRequest("https://example.com", custom_code="abc"), store, NOW_MS)

        assert exc_info.value.short_code == "abc"
        assert exc_info.value.message == "Shortcode already in use. Please choose another."

    def test_expired_codes_still_count_as_in_use(self):
        store = (make_record("old", expires_at=NOW_MS - 1),)

        with pytest.raises(ShortCodeInUseError):
            allocate(AllocationRequest("https://example.com", custom_code="old"), store, NOW_MS)

    def test_collision_check_is_case_sensitive(self):
        store = (make_record("abc"),)

        record = allocate(AllocationRequest("https://example.com", custom_code="ABC"), store, NOW_MS)

        assert record.short_code == "ABC"

    def test_invalid_custom_code(self):
        with pytest.raises(InvalidShortCodeError):
            allocate(AllocationRequest("https://example.com", custom_code="a-b"), (), NOW_MS)

    def test_url_checked_before_custom_code(self):
        with pytest.raises(EmptyInputError):
            allocate(AllocationRequest("  ", custom_code="a-b"), (), NOW_MS)
        with pytest.raises(InvalidURLError):
            allocate(AllocationRequest("example.com", custom_code="a-b"), (), NOW_MS)

    @pytest.mark.parametrize("validity", [None, 0, -10, "soon"])
    def test_default_validity(self, validity):
        record = allocate(AllocationRequest("https://example.com", validity_minutes=validity), (), NOW_MS)
        assert record.expires_at - NOW_MS == THIRTY_MINUTES_MS

    def test_explicit_validity(self):
        record = allocate(AllocationRequest("https://example.com", validity_minutes="90"), (), NOW_MS)
        assert record.expires_at == NOW_MS + 90 * 60 * 1000

    def test_store_is_not_modified(self):
        store = (make_record("abc"),)
        allocate(AllocationRequest("https://example.com"), store, NOW_MS)
        assert store == (make_record("abc"),)


class TestURLShorteningService:
    """Test creation against a real (temporary) store."""

    @pytest.mark.asyncio
    async def test_create_persists_newest_first(self, store):
        service = URLShorteningService(store, clock=lambda: NOW_MS)

        first = await service.create_short_url("https://example.com/1")
        second = await service.create_short_url("https://example.com/2", custom_code="two")

        assert await store.load() == (second, first)
        assert await service.list_short_urls() == (second, first)

    @pytest.mark.asyncio
    async def test_same_custom_code_twice(self, store):
        service = URLShorteningService(store, clock=lambda: NOW_MS)

        await service.create_short_url("https://example.com", custom_code="abc")
        with pytest.raises(ShortCodeInUseError):
            await service.create_short_url("https://example.org", custom_code="abc")

        records = await store.load()
        assert len(records) == 1
        assert records[0].long_url == "https://example.com"

    @pytest.mark.asyncio
    async def test_rejected_request_leaves_store_unchanged(self, store):
        service = URLShorteningService(store)

        with pytest.raises(InvalidURLError):
            await service.create_short_url("not a url")

        assert await store.load() == ()

    @pytest.mark.asyncio
    async def test_concurrent_requests_for_same_code(self, store):
        service = URLShorteningService(store)

        results = await asyncio.gather(
            *(service.create_short_url(f"https://example.com/{i}", custom_code="shared") for i in range(5)),
            return_exceptions=True,
        )

        created = [r for r in results if isinstance(r, ShortLinkRecord)]
        rejected = [r for r in results if isinstance(r, ShortCodeInUseError)]
        assert len(created) == 1
        assert len(rejected) == 4
        assert [r.short_code for r in await store.load()] == ["shared"]

    @pytest.mark.asyncio
    async def test_concurrent_random_codes_are_unique(self, store):
        service = URLShorteningService(store)

        await asyncio.gather(*(service.create_short_url(f"https://example.com/{i}") for i in range(10)))

        codes = [r.short_code for r in await store.load()]
        assert len(codes) == 10
        assert len(set(codes)) == 10
