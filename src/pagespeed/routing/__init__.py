"""Routing state: the route data a request resolves to.

Route resolution itself belongs to the host. ``RouteTable`` offers
conventional ``{controller}/{action}/{id?}`` templates for hosts
(and the ASGI middleware) that have nothing better.
"""

from pagespeed.routing.route import (
    ACTION,
    AREA,
    CONTROLLER,
    PathSegment,
    RouteData,
    ValueProvider,
    is_value_provider,
)
from pagespeed.routing.router import RouteTable, RouteTemplate, parse_template

__all__ = [
    "ACTION",
    "AREA",
    "CONTROLLER",
    "PathSegment",
    "RouteData",
    "RouteTable",
    "RouteTemplate",
    "ValueProvider",
    "is_value_provider",
    "parse_template",
]
