import logging
from functools import lru_cache
from typing import Iterator

from psycopg import Connection
from psycopg_pool import ConnectionPool

from .settings import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_pool() -> ConnectionPool:
    logger.info("Opening connection pool (min=%s, max=%s)", settings.DB_POOL_MIN_SIZE, settings.DB_POOL_MAX_SIZE)
    return ConnectionPool(
        conninfo=settings.DATABASE_URL,
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
    )


# FastAPI dependency: one pooled connection per request.
def get_conn() -> Iterator[Connection]:
    with get_pool().connection() as conn:
        yield conn


def db_ok() -> bool:
    try:
        with get_pool().connection(timeout=2) as conn, conn.cursor() as cur:
            cur.execute('select 1;')
            cur.fetchone()
        return True
    except Exception:
        logger.warning("Database health check failed", exc_info=True)
        return False
