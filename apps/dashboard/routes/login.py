from typing import List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse

from ..auth import (
    PROTECTED_ROOT,
    SESSION_USER_KEY,
    CredentialsProvider,
    authenticate,
    get_auth_providers,
)

router = APIRouter(tags=["auth"])


def _safe_callback(callback_url: Optional[str]) -> str:
    # Only same-site paths; anything else falls back to the dashboard.
    if callback_url and callback_url.startswith("/") and not callback_url.startswith("//"):
        return callback_url
    return PROTECTED_ROOT

@router.get("/login")
def login_page(
    callbackUrl: Optional[str] = None,
    providers: List[CredentialsProvider] = Depends(get_auth_providers),
):
    return {
        "providers": [p.name for p in providers],
        "callbackUrl": _safe_callback(callbackUrl),
    }

@router.post("/login")
def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    callbackUrl: Optional[str] = Form(None),
    providers: List[CredentialsProvider] = Depends(get_auth_providers),
):
    user = authenticate(providers, email.strip().lower(), password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials.")
    request.session[SESSION_USER_KEY] = user
    return RedirectResponse(_safe_callback(callbackUrl), status_code=303)
