"""Cache keys correlating the two interceptor phases of one request."""

from pagespeed.keys.builder import NULL_FRAGMENT, RouteKeyBuilder
from pagespeed.keys.generator import RouteKeyGenerator
from pagespeed.keys.protocol import HasRouteData, KeyBuilder, KeyGenerator

__all__ = [
    "NULL_FRAGMENT",
    "HasRouteData",
    "KeyBuilder",
    "KeyGenerator",
    "RouteKeyBuilder",
    "RouteKeyGenerator",
]
