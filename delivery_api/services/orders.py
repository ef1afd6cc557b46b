"""
Order Repository

CRUD over stored delivery orders. Store failures surface as
PersistenceError; lookups by id raise InvalidId for malformed ids and
NotFound for unknown ones.
"""

import logging
import uuid
from typing import Any, Sequence

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_api.core.exceptions import InvalidId, NotFound, PersistenceError
from delivery_api.models import Delivery
from delivery_api.schemas import AddressDetails, DeliveryDetails, PaymentDetails

logger = logging.getLogger(__name__)


def _document(part: BaseModel) -> dict[str, Any]:
    """Sub-document as stored: camelCase keys, unset optionals left out."""
    return part.model_dump(by_alias=True, exclude_none=True)


def parse_order_id(order_id: str) -> str:
    """
    Normalize a store id.

    Raises:
        InvalidId: If `order_id` is not a UUID
    """
    try:
        return str(uuid.UUID(str(order_id)))
    except ValueError:
        raise InvalidId(order_id)


class OrderRepository:
    """Data access for the deliveries table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        delivery: DeliveryDetails,
        address: AddressDetails,
        payment: PaymentDetails,
        short_id: str,
    ) -> Delivery:
        order = Delivery(
            delivery=_document(delivery),
            address=_document(address),
            payment=_document(payment),
            short_id=short_id,
        )
        self.session.add(order)
        await self._commit("save order")
        logger.info(f"Order #{short_id} stored as {order.id}")
        return order

    async def list_all(self) -> Sequence[Delivery]:
        try:
            result = await self.session.execute(
                select(Delivery).order_by(Delivery.created_at, Delivery.id)
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Could not list orders", original_error=e) from e
        return result.scalars().all()

    async def count(self) -> int:
        try:
            result = await self.session.execute(select(func.count(Delivery.id)))
        except SQLAlchemyError as e:
            raise PersistenceError("Could not count orders", original_error=e) from e
        return result.scalar() or 0

    async def get_by_id(self, order_id: str) -> Delivery:
        key = parse_order_id(order_id)
        try:
            order = await self.session.get(Delivery, key)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not load order {key}", original_error=e) from e
        if order is None:
            raise NotFound(key)
        return order

    async def update_by_id(
        self,
        order_id: str,
        delivery: DeliveryDetails,
        address: AddressDetails,
        payment: PaymentDetails,
    ) -> Delivery:
        """Replace the three sub-documents. The short id is left alone."""
        order = await self.get_by_id(order_id)
        order.delivery = _document(delivery)
        order.address = _document(address)
        order.payment = _document(payment)
        await self._commit(f"update order {order.id}")
        logger.info(f"Order {order.id} (#{order.short_id}) updated")
        return order

    async def delete_by_id(self, order_id: str) -> str:
        order = await self.get_by_id(order_id)
        await self.session.delete(order)
        await self._commit(f"delete order {order.id}")
        logger.info(f"Order {order.id} (#{order.short_id}) deleted")
        return order.id

    async def _commit(self, action: str) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Could not {action}", original_error=e) from e
