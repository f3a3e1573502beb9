import logging

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from .settings import settings
from .auth import guard_routes
from .cache import RenderCache
from .db import db_ok
from .routes.login import router as login_router
from .routes.dashboard import router as dashboard_router
from .routes.invoices import router as invoices_router
from .routes.customers import router as customers_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("dashboard")

app = FastAPI(
    title="Invoice Dashboard",
    version="0.1.0",
    description="Invoices and customers: search, create, edit, delete."
)

app.state.render_cache = RenderCache(settings.CACHE_DIR)
# Credentials providers; none are configured by default.
app.state.auth_providers = []

# Starlette runs the last-added middleware first: the session must be loaded
# before the guard reads it.
app.middleware("http")(guard_routes)
app.add_middleware(SessionMiddleware, secret_key=settings.AUTH_SECRET, same_site="lax")

app.include_router(login_router)
app.include_router(dashboard_router)
app.include_router(invoices_router)
app.include_router(customers_router)

@app.get("/health")
def health():
    ok_db = db_ok()
    return {"ok": ok_db, "db": ok_db}
