"""
Invoice mutation actions.

Each action follows the same sequence:

1) validate the raw form against the invoice schema,
2) convert the amount to cents (and stamp the date on create),
3) run exactly one parameterized write,
4) revalidate the invoices listing,
5) hand back a Redirect (create/update) or Deleted (delete).

Validation and store failures come back as a FormState; nothing here raises
for bad input or a failed write.
"""

import logging
from datetime import date as date_type, datetime, timezone
from typing import Any, Mapping, Optional

import psycopg
from psycopg import Connection

from ..cache import RenderCache
from ..models.state import ActionResult, Deleted, FormState, Redirect
from ..repos import invoices as invoices_repo
from .validator import to_cents, validate_invoice_form

logger = logging.getLogger(__name__)

INVOICES_PATH = "/dashboard/invoices"


def today_iso() -> str:
    """Current UTC calendar date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


def create_invoice(
    conn: Connection,
    cache: RenderCache,
    form: Mapping[str, Any],
    *,
    today: Optional[date_type] = None,
) -> ActionResult:
    report = validate_invoice_form(form)
    if not report.success:
        return FormState(
            errors=report.errors,
            message="Missing Fields. Failed to Create Invoice.",
        )

    data = report.data
    amount_in_cents = to_cents(data.amount)
    invoice_date = today.isoformat() if today else today_iso()

    try:
        with conn.transaction():
            rows = invoices_repo.insert_invoice(
                conn,
                customer_id=data.customer_id,
                amount=amount_in_cents,
                status=data.status,
                date=invoice_date,
            )
    except psycopg.Error:
        logger.exception("Failed to create invoice for customer %s", data.customer_id)
        return FormState(message="Database Error: Failed to Create Invoice.")

    logger.info("Created invoice for customer %s (%d rows)", data.customer_id, rows)
    cache.revalidate_path(INVOICES_PATH)
    return Redirect(location=INVOICES_PATH)


def update_invoice(
    conn: Connection,
    cache: RenderCache,
    invoice_id: str,
    form: Mapping[str, Any],
) -> ActionResult:
    report = validate_invoice_form(form)
    if not report.success:
        return FormState(
            errors=report.errors,
            message="Missing Fields. Failed to Update Invoice.",
        )

    data = report.data
    amount_in_cents = to_cents(data.amount)

    try:
        with conn.transaction():
            rows = invoices_repo.update_invoice(
                conn,
                invoice_id,
                customer_id=data.customer_id,
                amount=amount_in_cents,
                status=data.status,
            )
    except psycopg.Error:
        logger.exception("Failed to update invoice %s", invoice_id)
        return FormState(message="Database Error: Failed to Update Invoice.")

    # Zero rows (unknown id) still counts as success.
    logger.info("Updated invoice %s (%d rows)", invoice_id, rows)
    cache.revalidate_path(INVOICES_PATH)
    return Redirect(location=INVOICES_PATH)


def delete_invoice(conn: Connection, cache: RenderCache, invoice_id: str) -> ActionResult:
    try:
        with conn.transaction():
            rows = invoices_repo.delete_invoice(conn, invoice_id)
    except psycopg.Error:
        logger.exception("Failed to delete invoice %s", invoice_id)
        return FormState(message="Database Error: Failed to Delete Invoice.")

    logger.info("Deleted invoice %s (%d rows)", invoice_id, rows)
    cache.revalidate_path(INVOICES_PATH)
    return Deleted(invoice_id=invoice_id)
