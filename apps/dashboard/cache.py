"""
Path-based render cache.

Listing views store their query results here, tagged with the view path
(e.g. ``/dashboard/invoices``). A successful mutation calls
``revalidate_path`` so the next read of that view goes back to the store
instead of returning a stale render.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import diskcache
from fastapi import Request

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RenderCache:
    def __init__(self, cache_dir: str | Path) -> None:
        self.cache_dir = Path(cache_dir)
        self._cache = diskcache.Cache(str(self.cache_dir))

    @staticmethod
    def _key(path: str, key: str) -> str:
        return f"{path}::{key}"

    @staticmethod
    def _generation_key(path: str) -> str:
        return f"{path}#generation"

    def _generation(self, path: str) -> int:
        return self._cache.get(self._generation_key(path), default=0)

    def get_or_load(
        self,
        path: str,
        key: str,
        loader: Callable[[], T],
        expire: Optional[int] = None,
    ) -> T:
        """
        Return the cached render for (path, key), calling ``loader`` on a miss.

        The stored value is tagged with ``path`` so that ``revalidate_path``
        can drop every render of that view at once.
        """
        full_key = self._key(path, key)
        missing = object()
        cached = self._cache.get(full_key, default=missing)
        if cached is not missing:
            return cached

        generation = self._generation(path)
        value = loader()
        # A revalidation during loader() means value may predate the write.
        with self._cache.transact():
            if self._generation(path) == generation:
                self._cache.set(full_key, value, expire=expire, tag=path)
        return value

    def is_cached(self, path: str, key: str) -> bool:
        return self._key(path, key) in self._cache

    def revalidate_path(self, path: str) -> int:
        """Mark every render of ``path`` as stale. Returns the number evicted."""
        self._cache.incr(self._generation_key(path), default=0)
        evicted = self._cache.evict(path)
        logger.info("Revalidated %s (%d cached renders dropped)", path, evicted)
        return evicted

    def clear(self) -> None:
        self._cache.clear()

    def close(self) -> None:
        self._cache.close()


def get_render_cache(request: Request) -> RenderCache:
    return request.app.state.render_cache
