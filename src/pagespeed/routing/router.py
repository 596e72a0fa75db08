"""Conventional route templates.

A template such as ``{controller}/{action}/{id?}`` maps a request path
onto ``RouteData`` the way MVC hosts do. Templates are parsed and
validated once, when they are added, and are immutable afterwards.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote

from pagespeed.errors import ConfigurationError
from pagespeed.routing.route import ACTION, CONTROLLER, PathSegment, RouteData

DEFAULT_TEMPLATE = "{controller}/{action}/{id?}"
DEFAULT_VALUES: Mapping[str, str] = {CONTROLLER: "home", ACTION: "index"}


def parse_template(template: str) -> list[PathSegment]:
    """Parse a route template into segments.

    Examples::

        "blog"                 -> [PathSegment("blog")]
        "{controller}"         -> [PathSegment("{controller}", is_param=True, ...)]
        "{controller}/{id?}"   -> [..., PathSegment("{id?}", is_param=True, optional=True)]

    Raises ``ConfigurationError`` on malformed parameters, duplicate
    parameter names, or a required segment after an optional one.
    """
    segments: list[PathSegment] = []
    seen: set[str] = set()
    optional_seen = False

    for part in template.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Route template {template!r} uses <param> syntax. "
                "Use {param} instead, e.g. '{controller}/{action}'."
            )
            raise ConfigurationError(msg)

        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            optional = inner.endswith("?")
            name = inner.rstrip("?")
            if not name or "{" in name or "}" in name:
                msg = f"Invalid parameter segment {part!r} in route template {template!r}."
                raise ConfigurationError(msg)
            key = name.lower()
            if key in seen:
                msg = f"Duplicate parameter {name!r} in route template {template!r}."
                raise ConfigurationError(msg)
            seen.add(key)
            segment = PathSegment(value=part, is_param=True, param_name=name, optional=optional)
        elif "{" in part or "}" in part:
            msg = f"Unbalanced braces in segment {part!r} of route template {template!r}."
            raise ConfigurationError(msg)
        else:
            segment = PathSegment(value=part)

        if optional_seen and not segment.optional:
            msg = f"Route template {template!r} has a required segment after an optional one."
            raise ConfigurationError(msg)
        optional_seen = optional_seen or segment.optional
        segments.append(segment)

    return segments


class RouteTemplate:
    """A single conventional route.

    Usage::

        route = RouteTemplate(
            "admin/{controller}/{action}/{id?}",
            defaults={"action": "index"},
            data_tokens={"area": "admin"},
        )
        route.match("/admin/users/edit/7")
        # RouteData(values={"controller": "users", "action": "edit", "id": "7"}, ...)
    """

    __slots__ = ("_segments", "data_tokens", "defaults", "template")

    def __init__(
        self,
        template: str,
        *,
        defaults: Mapping[str, Any] | None = None,
        data_tokens: Mapping[str, Any] | None = None,
    ) -> None:
        self.template = template
        self.defaults: dict[str, Any] = dict(defaults or {})
        self.data_tokens: dict[str, Any] = dict(data_tokens or {})
        self._segments = tuple(parse_template(template))

    def __repr__(self) -> str:
        return f"RouteTemplate({self.template!r})"

    def match(self, path: str) -> RouteData | None:
        """Match *path* (without query string) against this template."""
        parts = [unquote(p) for p in path.strip("/").split("/") if p]
        if len(parts) > len(self._segments):
            return None

        values: dict[str, Any] = {}
        for index, segment in enumerate(self._segments):
            part = parts[index] if index < len(parts) else None

            if not segment.is_param:
                if part is None or part.lower() != segment.value.lower():
                    return None
                continue

            name = segment.param_name or ""
            if part is not None:
                values[name] = part
            elif name in self.defaults:
                values[name] = self.defaults[name]
            elif not segment.optional:
                return None

        # Defaults for values the template never captures (e.g. a fixed controller)
        for name, value in self.defaults.items():
            values.setdefault(name, value)

        return RouteData(values=values, data_tokens=self.data_tokens)


class RouteTable:
    """Ordered route templates. The first match wins.

    Usage::

        table = RouteTable()
        table.add("admin/{controller}/{action}", data_tokens={"area": "admin"})
        table.add("{controller}/{action}/{id?}", defaults={"controller": "home", "action": "index"})
        route_data = table.match("/blog/show/3")
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: list[RouteTemplate] = []

    @classmethod
    def conventional(cls) -> "RouteTable":
        """A table holding only ``{controller}/{action}/{id?}`` (home/index)."""
        table = cls()
        table.add(DEFAULT_TEMPLATE, defaults=DEFAULT_VALUES)
        return table

    def add(
        self,
        template: str,
        *,
        defaults: Mapping[str, Any] | None = None,
        data_tokens: Mapping[str, Any] | None = None,
    ) -> RouteTemplate:
        route = RouteTemplate(template, defaults=defaults, data_tokens=data_tokens)
        self._routes.append(route)
        return route

    def __len__(self) -> int:
        return len(self._routes)

    def match(self, path: str) -> RouteData | None:
        """Return the first matching route's data, or ``None``."""
        for route in self._routes:
            route_data = route.match(path)
            if route_data is not None:
                return route_data
        return None
