from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError
from typing import Literal, Optional
from datetime import date as date_type
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

InvoiceStatus = Literal["pending", "paid"]

def to_cents(amount: Decimal) -> int:
    """Convert a currency amount to integer minor units (12.50 -> 1250)."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

class InvoiceForm(BaseModel):
    """Fields a user submits when creating or editing an invoice."""

    model_config = ConfigDict(populate_by_name=True)

    customer_id: str = Field(..., alias="customerId", min_length=1)
    amount: Decimal = Field(..., gt=0, allow_inf_nan=False)
    status: InvoiceStatus

    # Stored as cents, so anything below half a cent would be written as 0.
    @field_validator("amount")
    @classmethod
    def _at_least_one_cent(cls, value: Decimal) -> Decimal:
        if to_cents(value) < 1:
            raise PydanticCustomError("greater_than", "Input should be at least 0.01")
        return value

class Invoice(BaseModel):
    id: UUID
    customer_id: UUID
    amount: int = Field(..., description="Amount in cents")
    status: InvoiceStatus
    date: date_type
    name: Optional[str] = None
    email: Optional[str] = None
    image_url: Optional[str] = None
