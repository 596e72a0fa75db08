"""PageSpeed exception hierarchy.

Shared across routing, keys, the rewriter and the middleware so every
module raises and catches the same types.
"""


class PageSpeedError(Exception):
    """Base for all pagespeed-specific errors."""


class ConfigurationError(PageSpeedError):
    """Raised when configuration or a route template is invalid.

    Always raised at construction time, never while a request is
    being processed.
    """
