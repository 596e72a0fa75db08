"""Key builder and key generator protocols.

No base class required. Anything with the right method shape works.
"""

from collections.abc import Iterable
from typing import Any, Protocol

from pagespeed.routing.route import RouteData


class KeyBuilder(Protocol):
    """Composes a cache key from normalized name/value fragments."""

    def build_key(
        self,
        controller_name: str | None,
        action_name: str | None = None,
        parameters: Iterable[tuple[str, Any]] | None = None,
    ) -> str: ...


class HasRouteData(Protocol):
    """Anything exposing the request's routing result."""

    @property
    def route_data(self) -> RouteData | None: ...


class KeyGenerator(Protocol):
    """Derives a cache key from a request context.

    Returns ``None`` when the request is not addressable.
    """

    def generate_key(self, context: HasRouteData) -> str | None: ...
