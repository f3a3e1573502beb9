from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from .invoice import InvoiceForm

class ValidationReport(BaseModel):
    errors: Dict[str, List[str]] = Field(default_factory=dict)  # form field -> messages
    data: Optional[InvoiceForm] = None  # coerced fields, set only on success

    @property
    def success(self) -> bool:
        return self.data is not None and not self.errors
