"""ASGI integration.

    LazyLoadMiddleware -- Buffer full HTML pages and rewrite their images
    ASGIActionContext -- The per-request context handed to the interceptor
"""

from pagespeed.middleware.asgi import (
    PARTIAL_SCOPE_KEY,
    ROUTE_SCOPE_KEY,
    ASGIActionContext,
    LazyLoadMiddleware,
)

__all__ = ["PARTIAL_SCOPE_KEY", "ROUTE_SCOPE_KEY", "ASGIActionContext", "LazyLoadMiddleware"]
