from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID

class Customer(BaseModel):
    id: UUID = Field(
        ...,
        examples=["3958dc9e-712f-4377-85e9-fec4b6a6442a"],
        description="Customer UUID"
    )
    name: str = Field(
        ...,
        examples=["Delba de Oliveira"],
        description="Display name of the customer"
    )
    email: Optional[str] = None
    image_url: Optional[str] = None

class CustomerSummary(Customer):
    total_invoices: int = 0
    total_pending: int = Field(0, description="Pending amount in cents")
    total_paid: int = Field(0, description="Paid amount in cents")
