"""Cache key composition.

A key is a pure function of its inputs::

    _l4zyl04der.blog.show#id=42#area=admin#

Names and values are lowercased, so route state that differs only in
case yields the same key.
"""

from collections.abc import Iterable, Mapping
from typing import Any

NULL_FRAGMENT = "<null>"
DEFAULT_PREFIX = "_l4zyl04der."


class RouteKeyBuilder:
    """Builds keys from controller, action and an ordered parameter sequence.

    Usage::

        builder = RouteKeyBuilder()
        builder.build_key("Blog", "Show", [("id", 42)])
        # "_l4zyl04der.blog.show#id=42#"
    """

    __slots__ = ("prefix",)

    def __init__(self, prefix: str = DEFAULT_PREFIX) -> None:
        self.prefix = prefix

    def build_key(
        self,
        controller_name: str | None,
        action_name: str | None = None,
        parameters: Iterable[tuple[str, Any]] | Mapping[str, Any] | None = None,
    ) -> str:
        """Compose the key. Parameters are appended in iteration order."""
        parts = [self.prefix]
        if controller_name is not None:
            parts.append(f"{controller_name.lower()}.")
        if action_name is not None:
            parts.append(f"{action_name.lower()}#")
        if parameters is not None:
            items = parameters.items() if isinstance(parameters, Mapping) else parameters
            parts.extend(self.build_key_fragment(name, value) for name, value in items)
        return "".join(parts)

    def build_key_fragment(self, name: str, value: Any) -> str:
        """Format one ``name=value#`` fragment; ``None`` becomes ``<null>``."""
        fragment = NULL_FRAGMENT if value is None else str(value).lower()
        return f"{name.lower()}={fragment}#"
