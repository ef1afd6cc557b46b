"""
Pydantic Schemas for Request/Response Validation

JSON uses the camelCase keys the web client sends (sideDish, postalCode,
fileName, shortId); Python code uses snake_case names.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ORDER SUB-DOCUMENTS
# =============================================================================

class DeliveryDetails(BaseModel):
    """What was ordered. Every field is required and text fields may not be empty."""
    model_config = ConfigDict(populate_by_name=True)

    bread: str = Field(..., min_length=1, examples=["Pão francês"])
    drink: str = Field(..., min_length=1, examples=["Suco de laranja"])
    local: bool = Field(..., description="Eat at the restaurant instead of delivery")
    meats: str = Field(..., min_length=1, examples=["Picanha"])
    salad: str = Field(..., min_length=1, examples=["Alface e tomate"])
    side_dish: str = Field(..., alias="sideDish", min_length=1, examples=["Arroz"])


class AddressDetails(BaseModel):
    """Where the order goes. Only the complement is optional; the rest may not be empty."""
    model_config = ConfigDict(populate_by_name=True)

    address: str = Field(..., min_length=1, examples=["Rua das Flores, 123"])
    city: str = Field(..., min_length=1, examples=["Curitiba"])
    complement: Optional[str] = Field(None, examples=["Apto 42"])
    neighborhood: str = Field(..., min_length=1, examples=["Centro"])
    postal_code: str = Field(..., alias="postalCode", min_length=1, examples=["80010-000"])
    state: str = Field(..., min_length=1, examples=["PR"])


class PaymentDetails(BaseModel):
    """
    Payment proof. The attachment is stored as given and never inspected,
    so it may be any JSON value.
    """
    model_config = ConfigDict(populate_by_name=True)

    attachment: Optional[Any] = None
    file_name: str = Field(..., alias="fileName", min_length=1, examples=["comprovante.pdf"])


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class DeliveryPayload(BaseModel):
    """Body of create and update requests."""
    delivery: DeliveryDetails
    address: AddressDetails
    payment: PaymentDetails


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class DeliveryDocument(BaseModel):
    """A stored order as returned by the listing endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    delivery: DeliveryDetails
    address: AddressDetails
    payment: PaymentDetails
    short_id: str = Field(..., alias="shortId")

    @classmethod
    def from_row(cls, row: Any) -> "DeliveryDocument":
        """Build from a Delivery model instance."""
        return cls(
            id=row.id,
            delivery=DeliveryDetails.model_validate(row.delivery),
            address=AddressDetails.model_validate(row.address),
            payment=PaymentDetails.model_validate(row.payment),
            short_id=row.short_id,
        )


class IdResponse(BaseModel):
    """Create answers with the short id; update and delete with the store id."""
    id: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[list[Any]] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    timestamp: datetime
