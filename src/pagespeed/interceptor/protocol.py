"""What the interceptor needs from its host pipeline.

A host exposes one ``ActionContext`` per request at its two extension
points (before the page body is produced, after it is produced). The
host guarantees that ``after`` runs exactly once for every request
whose ``before`` ran, including when rendering fails.
"""

from collections.abc import MutableMapping
from typing import Any, Protocol

from pagespeed.routing.route import RouteData


class TextSink(Protocol):
    """A writable text stream, e.g. ``io.StringIO`` or a response writer."""

    def write(self, text: str, /) -> Any: ...


class ActionContext(Protocol):
    """Per-request view of the host pipeline.

    ``output`` is swappable: the interceptor replaces it with an
    in-memory buffer and restores it later. ``items`` is storage that
    lives exactly as long as the request. ``exception`` is set while
    the pipeline unwinds after a failure.
    """

    @property
    def route_data(self) -> RouteData | None: ...

    @property
    def is_child_action(self) -> bool: ...

    @property
    def user_agent(self) -> str | None: ...

    @property
    def items(self) -> MutableMapping[str, Any]: ...

    @property
    def exception(self) -> BaseException | None: ...

    @property
    def output(self) -> TextSink: ...

    @output.setter
    def output(self, value: TextSink) -> None: ...
