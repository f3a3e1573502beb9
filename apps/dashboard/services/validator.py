import logging
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from ..models.invoice import InvoiceForm, to_cents
from ..models.validation import ValidationReport

logger = logging.getLogger(__name__)

FORM_FIELDS = ("customerId", "amount", "status")

# One user-facing message per failing form field.
FIELD_MESSAGES: Dict[str, str] = {
    "customerId": "Please select a customer.",
    "amount": "Please enter an amount greater than $0.",
    "status": "Please select an invoice status.",
}
INVALID_AMOUNT_MESSAGE = "Please enter a valid amount."


def _message_for(field: str, error_type: str) -> str:
    # Any amount error other than gt=0 means the value is not a number.
    if field == "amount" and error_type != "greater_than":
        return INVALID_AMOUNT_MESSAGE
    return FIELD_MESSAGES.get(field, "Invalid value.")


def validate_invoice_form(raw: Mapping[str, Any]) -> ValidationReport:
    """
    Validate an untyped form mapping against the invoice schema.

    Only ``customerId``, ``amount`` and ``status`` are read; anything else in
    ``raw`` is ignored, and a missing key is treated like an empty field.
    Bad input never raises: the returned ValidationReport carries either the
    coerced InvoiceForm in ``data`` or a field -> [message] mapping in
    ``errors``.
    """
    fields = {name: raw.get(name) for name in FORM_FIELDS}
    try:
        form = InvoiceForm.model_validate(fields)
    except ValidationError as ve:
        errors: Dict[str, List[str]] = {}
        for err in ve.errors():
            field = str(err["loc"][0]) if err["loc"] else "__root__"
            if field in errors:
                continue
            errors[field] = [_message_for(field, err["type"])]
        logger.info("Invoice form rejected: %s", sorted(errors))
        return ValidationReport(errors=errors)
    return ValidationReport(data=form)

