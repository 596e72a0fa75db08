"""Request-scoped item storage via ContextVar.

The middleware opens a fresh ``dict`` for every request and resets it
afterwards. Host code running inside the request can reach the same
storage through ``request_items()``.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    threads. Concurrent requests never see each other's items.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

items_var: ContextVar[dict[str, Any]] = ContextVar("pagespeed_items")
"""The current request's items. Set by the middleware before dispatch."""


def request_items() -> dict[str, Any]:
    """Return the current request's items.

    Raises ``LookupError`` if called outside a request.
    """
    return items_var.get()


@contextmanager
def request_scope() -> Iterator[dict[str, Any]]:
    """Open a fresh item store for the duration of one request."""
    items: dict[str, Any] = {}
    token = items_var.set(items)
    try:
        yield items
    finally:
        items_var.reset(token)
