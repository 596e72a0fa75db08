"""PageSpeed — lazy-load and WebP rewriting for server-rendered HTML.

Buffers full pages, converts image markup into lazy-loading form and
offers a WebP variant for internally hosted media. Search-engine
crawlers always see the page as rendered.

Basic usage::

    from pagespeed import LazyLoadMiddleware, PageSpeedConfig

    app = LazyLoadMiddleware(app, config=PageSpeedConfig(media_prefix="/media/"))

Rewriting markup directly::

    from pagespeed import HtmlRewriter

    html = HtmlRewriter().rewrite('<img src="/media/a.png">')
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "HtmlRewriter",
    "LazyLoadInterceptor",
    "LazyLoadMiddleware",
    "PageSpeedConfig",
    "PageSpeedError",
    "RouteData",
    "RouteKeyBuilder",
    "RouteKeyGenerator",
    "RouteTable",
    "ValueProvider",
    "request_items",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import pagespeed`` fast; bs4 loads only when the rewriter does.
    """
    if name == "PageSpeedConfig":
        from pagespeed.config import PageSpeedConfig

        return PageSpeedConfig

    if name in ("PageSpeedError", "ConfigurationError"):
        from pagespeed import errors as _errors

        return getattr(_errors, name)

    if name in ("RouteData", "RouteTable", "ValueProvider"):
        from pagespeed import routing as _routing

        return getattr(_routing, name)

    if name in ("RouteKeyBuilder", "RouteKeyGenerator"):
        from pagespeed import keys as _keys

        return getattr(_keys, name)

    if name == "HtmlRewriter":
        from pagespeed.html.rewriter import HtmlRewriter

        return HtmlRewriter

    if name == "LazyLoadInterceptor":
        from pagespeed.interceptor.lazyload import LazyLoadInterceptor

        return LazyLoadInterceptor

    if name == "LazyLoadMiddleware":
        from pagespeed.middleware.asgi import LazyLoadMiddleware

        return LazyLoadMiddleware

    if name == "request_items":
        from pagespeed.context import request_items

        return request_items

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
