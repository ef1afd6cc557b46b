"""
SQLAlchemy Database Models

Orders are kept as documents: the delivery, address and payment
sub-objects are JSON columns holding the same camelCase keys the API
accepts, so a stored order round-trips unchanged.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON

from delivery_api.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Delivery(Base):
    """
    A delivery order.

    `id` is the store identifier; `short_id` is the human-friendly
    per-day number and is never changed after creation.
    """
    __tablename__ = "deliveries"

    id = Column(String(36), primary_key=True, default=_new_id)

    delivery = Column(JSON, nullable=False)
    address = Column(JSON, nullable=False)
    payment = Column(JSON, nullable=False)

    short_id = Column(String(4), nullable=False, index=True)

    # Insertion order for listings; not exposed by the API
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<Delivery {self.id} - #{self.short_id}>"


class Counter(Base):
    """One row per calendar date holding the last short id issued that day."""
    __tablename__ = "counters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String(10), nullable=False, unique=True)
    last_id = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<Counter {self.date} - {self.last_id}>"
