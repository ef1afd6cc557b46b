"""
Domain Exceptions

Every failure the services can report is one of these. Route handlers
translate them into the fixed JSON error bodies; nothing here knows
about HTTP.
"""

from typing import Any, Optional


class DeliveryAPIError(Exception):
    """Base class for all delivery API errors."""

    def __init__(self, message: str = "Delivery API error", original_error: Optional[BaseException] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class ValidationError(DeliveryAPIError):
    """
    A request body is missing a required field or has a wrong type.

    Attributes:
        errors: Field-level problems as reported by pydantic
    """

    def __init__(self, message: str = "Invalid order payload", errors: Optional[list[Any]] = None):
        self.errors = errors or []
        super().__init__(message)


class DailyLimitExceeded(DeliveryAPIError):
    """The short id counter for a date is saturated."""

    def __init__(self, date: str, limit: int):
        self.date = date
        self.limit = limit
        super().__init__(f"Daily order limit of {limit} reached for {date}")


class NotFound(DeliveryAPIError):
    """No order exists with the given id."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class InvalidId(DeliveryAPIError):
    """The id is not a well-formed store identifier."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"'{order_id}' is not a valid order id")


class PersistenceError(DeliveryAPIError):
    """The store is unreachable or rejected the operation."""


class ConfigurationError(DeliveryAPIError):
    """Required configuration is missing. Fatal at boot."""
