from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse
from psycopg import Connection

from ..cache import RenderCache, get_render_cache
from ..db import get_conn
from ..models.customer import Customer
from ..models.invoice import Invoice
from ..models.state import ActionResult, Deleted, Redirect
from ..repos.customers import list_customers
from ..repos.invoices import (
    count_invoice_pages,
    get_invoice,
    list_invoices as repo_list_invoices,
)
from ..services import actions
from ..services.search import build_search_url, initial_search_value

router = APIRouter(prefix="/dashboard/invoices", tags=["invoices"])

ITEMS_PER_PAGE = 6


def to_response(result: ActionResult):
    """Turn an action result into the HTTP response the form expects."""
    if isinstance(result, Redirect):
        return RedirectResponse(result.location, status_code=303)
    if isinstance(result, Deleted):
        return {"ok": True, "invoice_id": result.invoice_id}
    status_code = 422 if result.errors else 500
    return JSONResponse(status_code=status_code, content=result.model_dump())


def _form(customer_id: Optional[str], amount: Optional[str], status: Optional[str]) -> dict:
    return {"customerId": customer_id, "amount": amount, "status": status}


# List invoices, filtered by ?query= and paginated by ?page=
@router.get("")
def list_invoices(
    request: Request,
    query: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    conn: Connection = Depends(get_conn),
    cache: RenderCache = Depends(get_render_cache),
):
    def load():
        return {
            "items": repo_list_invoices(
                conn, query=query, limit=ITEMS_PER_PAGE, offset=(page - 1) * ITEMS_PER_PAGE
            ),
            "total_pages": count_invoice_pages(conn, query=query, page_size=ITEMS_PER_PAGE),
        }

    listing = cache.get_or_load(actions.INVOICES_PATH, f"{query or ''}|{page}", load)
    return {
        "search": initial_search_value(request.query_params),
        "query": query,
        "page": page,
        **listing,
    }

# Search form fallback for clients without JavaScript: ?term= becomes ?query=
@router.get("/search")
def search_invoices(request: Request, term: str = Query("")):
    params = [(k, v) for k, v in request.query_params.multi_items() if k != "term"]
    return RedirectResponse(build_search_url(actions.INVOICES_PATH, params, term), status_code=303)

@router.get("/create")
def create_invoice_form(conn: Connection = Depends(get_conn)):
    return {"customers": [Customer(**c) for c in list_customers(conn)]}

@router.post("")
def create_invoice(
    customerId: Optional[str] = Form(None),
    amount: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    conn: Connection = Depends(get_conn),
    cache: RenderCache = Depends(get_render_cache),
):
    return to_response(actions.create_invoice(conn, cache, _form(customerId, amount, status)))

@router.get("/{invoice_id}/edit")
def edit_invoice_form(invoice_id: UUID, conn: Connection = Depends(get_conn)):
    invoice = get_invoice(conn, str(invoice_id))
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return {
        "invoice": Invoice(**invoice),
        "customers": [Customer(**c) for c in list_customers(conn)],
    }

@router.post("/{invoice_id}/edit")
def update_invoice(
    invoice_id: str,
    customerId: Optional[str] = Form(None),
    amount: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    conn: Connection = Depends(get_conn),
    cache: RenderCache = Depends(get_render_cache),
):
    return to_response(actions.update_invoice(conn, cache, invoice_id, _form(customerId, amount, status)))

@router.post("/{invoice_id}/delete")
def delete_invoice(
    invoice_id: str,
    conn: Connection = Depends(get_conn),
    cache: RenderCache = Depends(get_render_cache),
):
    return to_response(actions.delete_invoice(conn, cache, invoice_id))
