"""
Service Factories

FastAPI dependencies that build the repository and counter service on
top of the request's database session. Both share the same session, so
a create request reads and writes through one connection.

Usage:
    @router.post("/delivery")
    async def create(orders: OrderRepository = Depends(get_order_repository)):
        ...
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_api.database import get_db
from delivery_api.services.counter import (
    DAILY_LIMIT,
    CounterService,
    format_short_id,
    today_utc,
)
from delivery_api.services.orders import OrderRepository, parse_order_id


def get_order_repository(db: AsyncSession = Depends(get_db)) -> OrderRepository:
    return OrderRepository(db)


def get_counter_service(db: AsyncSession = Depends(get_db)) -> CounterService:
    return CounterService(db)


def get_today() -> str:
    """Date the counter is keyed on. Overridden in tests to pin a day."""
    return today_utc()


__all__ = [
    "get_order_repository",
    "get_counter_service",
    "get_today",
    "CounterService",
    "OrderRepository",
    "DAILY_LIMIT",
    "format_short_id",
    "parse_order_id",
    "today_utc",
]
