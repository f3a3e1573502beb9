"""
Results returned by the invoice mutation actions.

An action never raises for user or store errors. It returns one of:

- ``FormState``: the form should be re-rendered with these errors/message.
- ``Redirect``: the write succeeded and the caller should navigate.
- ``Deleted``: the row was removed; no navigation.
"""

from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field


class FormState(BaseModel):
    errors: Dict[str, List[str]] = Field(default_factory=dict)
    message: Optional[str] = None


class Redirect(BaseModel):
    location: str


class Deleted(BaseModel):
    invoice_id: str


ActionResult = Union[FormState, Redirect, Deleted]
