"""
Search box <-> URL query synchronization.

The search box never fetches anything itself. It debounces keystrokes and,
once the user pauses, rewrites the ``query`` parameter of the current URL.
The listing view reads that parameter and does the filtering.

``build_search_url`` is the pure part: given the current path, the current
query parameters and a term, it returns the URL to replace the current
history entry with. ``SearchSynchronizer`` wires it to a ``Debouncer`` and a
caller-supplied ``replace`` callback that performs the navigation.
"""

import asyncio
import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlencode

logger = logging.getLogger(__name__)

QUERY_PARAM = "query"
SEARCH_DEBOUNCE_SECONDS = 0.75

SearchParams = Union[str, Mapping[str, str], Iterable[Tuple[str, str]]]


def _to_pairs(search_params: Optional[SearchParams]) -> List[Tuple[str, str]]:
    if search_params is None:
        return []
    if isinstance(search_params, str):
        return parse_qsl(search_params.lstrip("?"), keep_blank_values=True)
    # starlette QueryParams keeps repeated keys in multi_items()
    multi_items = getattr(search_params, "multi_items", None)
    if callable(multi_items):
        return list(multi_items())
    if isinstance(search_params, Mapping):
        return list(search_params.items())
    return [(str(k), str(v)) for k, v in search_params]


def initial_search_value(search_params: Optional[SearchParams]) -> str:
    """Value the search box shows on first render: the current ``query`` or ''."""
    for key, value in _to_pairs(search_params):
        if key == QUERY_PARAM:
            return value
    return ""


def set_search_term(search_params: Optional[SearchParams], term: Optional[str]) -> List[Tuple[str, str]]:
    """
    Return the parameters with ``query`` set to ``term``.

    A non-empty term replaces the first ``query`` in place and drops any
    repeats; an empty or missing term removes ``query`` entirely. Every other
    parameter is kept in order.
    """
    pairs = _to_pairs(search_params)
    if not term:
        return [(k, v) for k, v in pairs if k != QUERY_PARAM]

    result: List[Tuple[str, str]] = []
    placed = False
    for key, value in pairs:
        if key != QUERY_PARAM:
            result.append((key, value))
        elif not placed:
            result.append((QUERY_PARAM, term))
            placed = True
    if not placed:
        result.append((QUERY_PARAM, term))
    return result


def build_search_url(pathname: str, search_params: Optional[SearchParams], term: Optional[str]) -> str:
    """URL to replace the current history entry with after searching for ``term``."""
    query_string = urlencode(set_search_term(search_params, term))
    return f"{pathname}?{query_string}" if query_string else pathname


class Debouncer:
    """
    Delay a callback until calls stop arriving for ``wait`` seconds.

    Every call cancels the pending timer and schedules a new one on the
    running asyncio loop, so only the arguments of the last call inside a
    quiet window ever reach ``callback``. Must be called from a coroutine or
    loop callback.
    """

    def __init__(self, callback: Callable[..., Any], wait: float) -> None:
        self.callback = callback
        self.wait = wait
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any) -> None:
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.wait, self._fire, args)

    def _fire(self, args: Tuple[Any, ...]) -> None:
        self._handle = None
        self.callback(*args)


class SearchSynchronizer:
    """
    Search box state for one page.

    Parameters
    ----------
    pathname:
        Path of the page hosting the search box, e.g. ``/dashboard/invoices``.
    search_params:
        The page's current query parameters.
    replace:
        Called with the new URL once a term is propagated. It should replace
        the current history entry, not push a new one.
    wait:
        Quiet period in seconds before a term is propagated.
    """

    def __init__(
        self,
        pathname: str,
        search_params: Optional[SearchParams],
        replace: Callable[[str], Any],
        wait: float = SEARCH_DEBOUNCE_SECONDS,
    ) -> None:
        self.pathname = pathname
        self.search_params = _to_pairs(search_params)
        self.replace = replace
        # Read once; typing afterwards does not re-sync it from the URL.
        self.default_value = initial_search_value(self.search_params)
        self.handle_search = Debouncer(self._search, wait)

    def _search(self, term: str) -> None:
        logger.debug("Searching... %s", term)
        url = build_search_url(self.pathname, self.search_params, term)
        self.search_params = set_search_term(self.search_params, term)
        self.replace(url)
