from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from psycopg import Connection

from ..auth import SIGN_IN_PATH, SESSION_USER_KEY, current_user
from ..db import get_conn
from ..repos.invoice_stats import get_card_data

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

@router.get("")
def overview(request: Request, conn: Connection = Depends(get_conn)):
    return {"user": current_user(request), "cards": get_card_data(conn)}

@router.post("/logout")
def logout(request: Request):
    request.session.pop(SESSION_USER_KEY, None)
    return RedirectResponse(SIGN_IN_PATH, status_code=303)
