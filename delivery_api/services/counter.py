"""
Daily Short Id Counter

Each calendar date owns one counter row. Minting a short id bumps that
row by one and returns the new value zero-padded to four digits, so the
first order of the day is "0001" and the last possible one is "9999".

The bump is a single conditional UPDATE ... RETURNING, so two requests
racing on the same date can never receive the same number. Creating the
row for a new date tolerates a concurrent insert of the same date.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_api.core.exceptions import DailyLimitExceeded, PersistenceError
from delivery_api.models import Counter

logger = logging.getLogger(__name__)

DAILY_LIMIT = 9999
SHORT_ID_WIDTH = 4


def format_short_id(value: int) -> str:
    """Zero-pad a counter value: 7 -> "0007"."""
    return str(value).zfill(SHORT_ID_WIDTH)


def today_utc() -> str:
    """Current UTC calendar date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


class CounterService:
    """
    Mints per-day sequential short ids.

    Args:
        session: Session used for every counter read and write
        limit: Highest short id that may be issued on one date
    """

    def __init__(self, session: AsyncSession, limit: int = DAILY_LIMIT):
        self.session = session
        self.limit = limit

    async def peek(self, date: str) -> int:
        """Last value issued for `date`, 0 when nothing was issued yet."""
        try:
            result = await self.session.execute(
                select(Counter.last_id).where(Counter.date == date)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not read counter for {date}", original_error=e) from e
        return result.scalar_one_or_none() or 0

    async def next_short_id(self, date: str) -> str:
        """
        Issue the next short id for `date`.

        Raises:
            DailyLimitExceeded: The counter already reached the limit; nothing is written
            PersistenceError: The store failed
        """
        try:
            await self._ensure_counter(date)
            result = await self.session.execute(
                update(Counter)
                .where(Counter.date == date, Counter.last_id < self.limit)
                .values(last_id=Counter.last_id + 1)
                .returning(Counter.last_id)
                .execution_options(synchronize_session=False)
            )
            value = result.scalar_one_or_none()
            if value is None:
                await self.session.rollback()
                raise DailyLimitExceeded(date, self.limit)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Could not increment counter for {date}", original_error=e) from e

        short_id = format_short_id(value)
        logger.debug(f"Issued short id {short_id} for {date}")
        return short_id

    async def _ensure_counter(self, date: str) -> None:
        result = await self.session.execute(
            select(Counter.id).where(Counter.date == date)
        )
        if result.scalar_one_or_none() is not None:
            return

        self.session.add(Counter(date=date, last_id=0))
        try:
            await self.session.commit()
            logger.info(f"Started order counter for {date}")
        except IntegrityError:
            # Another request created the row first
            await self.session.rollback()
