"""
Counter service tests: sequencing, per-day independence, the daily cap
and concurrent minting.
"""

import asyncio
import re

import pytest
from sqlalchemy.exc import OperationalError

from delivery_api.core.exceptions import DailyLimitExceeded, PersistenceError
from delivery_api.models import Counter
from delivery_api.services.counter import (
    DAILY_LIMIT,
    CounterService,
    format_short_id,
    today_utc,
)


def test_format_short_id_pads_to_four_digits():
    assert format_short_id(1) == "0001"
    assert format_short_id(42) == "0042"
    assert format_short_id(DAILY_LIMIT) == "9999"


def test_today_utc_is_iso_date():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", today_utc())


@pytest.mark.asyncio
async def test_first_id_of_the_day_is_0001(session):
    counters = CounterService(session)

    assert await counters.peek("2024-01-01") == 0
    assert await counters.next_short_id("2024-01-01") == "0001"
    assert await counters.peek("2024-01-01") == 1


@pytest.mark.asyncio
async def test_each_id_is_previous_plus_one(session):
    counters = CounterService(session)

    issued = [await counters.next_short_id("2024-01-01") for _ in range(5)]

    assert issued == ["0001", "0002", "0003", "0004", "0005"]
    assert await counters.peek("2024-01-01") == 5


@pytest.mark.asyncio
async def test_dates_have_independent_counters(session):
    counters = CounterService(session)

    await counters.next_short_id("2024-01-01")
    await counters.next_short_id("2024-01-01")

    assert await counters.next_short_id("2024-01-02") == "0001"
    assert await counters.peek("2024-01-01") == 2
    assert await counters.peek("2024-01-02") == 1


@pytest.mark.asyncio
async def test_last_id_of_the_day_then_limit(session):
    session.add(Counter(date="2024-01-01", last_id=DAILY_LIMIT - 1))
    await session.commit()
    counters = CounterService(session)

    assert await counters.next_short_id("2024-01-01") == "9999"

    with pytest.raises(DailyLimitExceeded) as exc_info:
        await counters.next_short_id("2024-01-01")

    assert exc_info.value.date == "2024-01-01"
    assert exc_info.value.limit == DAILY_LIMIT
    assert await counters.peek("2024-01-01") == DAILY_LIMIT


@pytest.mark.asyncio
async def test_limit_does_not_leak_into_next_day(session):
    session.add(Counter(date="2024-01-01", last_id=DAILY_LIMIT))
    await session.commit()
    counters = CounterService(session)

    with pytest.raises(DailyLimitExceeded):
        await counters.next_short_id("2024-01-01")
    assert await counters.next_short_id("2024-01-02") == "0001"


@pytest.mark.asyncio
async def test_custom_limit(session):
    counters = CounterService(session, limit=2)

    assert await counters.next_short_id("2024-01-01") == "0001"
    assert await counters.next_short_id("2024-01-01") == "0002"
    with pytest.raises(DailyLimitExceeded):
        await counters.next_short_id("2024-01-01")


@pytest.mark.asyncio
async def test_concurrent_minting_never_repeats_an_id(session_maker):
    async def mint() -> str:
        async with session_maker() as db:
            return await CounterService(db).next_short_id("2024-01-01")

    issued = await asyncio.gather(*(mint() for _ in range(10)))

    assert sorted(issued) == [format_short_id(n) for n in range(1, 11)]

    async with session_maker() as db:
        assert await CounterService(db).peek("2024-01-01") == 10


@pytest.mark.asyncio
async def test_store_failure_is_persistence_error(session, monkeypatch):
    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "execute", broken_execute)

    with pytest.raises(PersistenceError):
        await CounterService(session).next_short_id("2024-01-01")
