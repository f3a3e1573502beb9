import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Protocol, Sequence
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import RedirectResponse

logger = logging.getLogger(__name__)

PROTECTED_PREFIX = "/dashboard"
PROTECTED_ROOT = "/dashboard"
SIGN_IN_PATH = "/login"
SESSION_USER_KEY = "user"

# Never consulted against the guard.
PUBLIC_PATH_PREFIXES = ("/health", "/docs", "/openapi.json", "/static")


@dataclass(frozen=True)
class GuardDecision:
    outcome: Literal["allow", "deny", "redirect"]
    target: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.outcome == "allow"


ALLOW = GuardDecision("allow")
DENY = GuardDecision("deny")


def authorized(is_logged_in: bool, pathname: str) -> GuardDecision:
    """
    Decide whether a request for ``pathname`` may proceed.

    Dashboard pages need a session (deny sends the user to sign in).
    A signed-in user asking for any other page is sent to the dashboard.
    Everyone else is allowed through.
    """
    is_on_dashboard = pathname.startswith(PROTECTED_PREFIX)
    if is_on_dashboard:
        return ALLOW if is_logged_in else DENY
    if is_logged_in:
        return GuardDecision("redirect", PROTECTED_ROOT)
    return ALLOW


def current_user(request: Request) -> Optional[Dict[str, Any]]:
    return request.session.get(SESSION_USER_KEY)


def sign_in_url(callback_path: str) -> str:
    return f"{SIGN_IN_PATH}?{urlencode({'callbackUrl': callback_path})}"


async def guard_routes(request: Request, call_next):
    path = request.url.path
    if path.startswith(PUBLIC_PATH_PREFIXES):
        return await call_next(request)

    decision = authorized(current_user(request) is not None, path)
    if decision.outcome == "deny":
        logger.info("Unauthenticated request to %s; sending to sign-in", path)
        callback = f"{path}?{request.url.query}" if request.url.query else path
        return RedirectResponse(sign_in_url(callback), status_code=303)
    if decision.outcome == "redirect":
        return RedirectResponse(decision.target, status_code=303)
    return await call_next(request)


# --- Credentials providers ----------------------------------------------------

class CredentialsProvider(Protocol):
    name: str

    def authorize(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """Return a session user dict for valid credentials, else None."""
        ...


def authenticate(
    providers: Sequence[CredentialsProvider], email: str, password: str
) -> Optional[Dict[str, Any]]:
    for provider in providers:
        user = provider.authorize(email, password)
        if user:
            logger.info("Signed in %s via %s", email, provider.name)
            return user
    logger.info("Sign-in failed for %s (%d providers)", email, len(providers))
    return None


def get_auth_providers(request: Request) -> List[CredentialsProvider]:
    return request.app.state.auth_providers
