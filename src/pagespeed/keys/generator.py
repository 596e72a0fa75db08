"""Key generation from route data.

The generator reads only the immutable routing result, so calling it
twice for one request (once per interceptor phase) yields the same key.
"""

from typing import Any

from pagespeed.keys.builder import RouteKeyBuilder
from pagespeed.keys.protocol import HasRouteData, KeyBuilder
from pagespeed.routing.route import ACTION, AREA, CONTROLLER, is_value_provider

_RESERVED = frozenset({CONTROLLER, ACTION, AREA})


class RouteKeyGenerator:
    """Derives a key from ``context.route_data``.

    Returns ``None`` when route data, controller, or action is missing.
    Extra route values keep their order; provider placeholders are
    dropped; a non-blank area is appended last as ``area``.
    """

    __slots__ = ("key_builder",)

    def __init__(self, key_builder: KeyBuilder | None = None) -> None:
        self.key_builder: KeyBuilder = key_builder or RouteKeyBuilder()

    def generate_key(self, context: HasRouteData) -> str | None:
        route_data = context.route_data
        if route_data is None:
            return None

        controller = route_data.controller
        action = route_data.action
        if not controller or not action:
            return None

        parameters: list[tuple[str, Any]] = [
            (name, value)
            for name, value in route_data.values.items()
            if name.lower() not in _RESERVED and not is_value_provider(value)
        ]

        area = route_data.area
        if area and area.strip():
            parameters.append((AREA, area))

        return self.key_builder.build_key(controller, action, parameters)
