"""RouteData, PathSegment and the value-provider marker."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar

# Well-known route value / data token names
CONTROLLER = "controller"
ACTION = "action"
AREA = "area"


class ValueProvider:
    """Marker base for provider placeholders injected into route values.

    Hosts sometimes park an opaque provider object among the route
    values. Such values identify nothing about the destination and are
    never serialized into a key. Subclass this, or set the class
    attribute ``is_value_provider = True`` on any type.
    """

    is_value_provider: ClassVar[bool] = True


def is_value_provider(value: object) -> bool:
    """True if *value* is a provider placeholder."""
    return getattr(type(value), "is_value_provider", False) is True


def _frozen(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, slots=True)
class RouteData:
    """The routing result for one request.

    ``values`` holds route values in match order (``controller``,
    ``action`` and any extra parameters); ``data_tokens`` holds route
    metadata such as ``area``. Both are read-only views.
    """

    values: Mapping[str, Any] = field(default_factory=dict)
    data_tokens: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", _frozen(self.values))
        object.__setattr__(self, "data_tokens", _frozen(self.data_tokens))

    @property
    def controller(self) -> str | None:
        return _as_text(_lookup(self.values, CONTROLLER))

    @property
    def action(self) -> str | None:
        return _as_text(_lookup(self.values, ACTION))

    @property
    def area(self) -> str | None:
        return _as_text(_lookup(self.data_tokens, AREA))


def _lookup(mapping: Mapping[str, Any], name: str) -> Any:
    """Value of the first key matching *name* case-insensitively."""
    if name in mapping:
        return mapping[name]
    for key, value in mapping.items():
        if key.lower() == name:
            return value
    return None


def _as_text(value: Any) -> str | None:
    return None if value is None else str(value)


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route template.

    Static:   ``blog``          (is_param=False)
    Param:    ``{action}``      (is_param=True, param_name="action")
    Optional: ``{id?}``         (is_param=True, param_name="id", optional=True)
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    optional: bool = False
