"""ASGI middleware driving the two-phase interceptor.

Wraps any ASGI application. For each HTTP request it builds an
``ASGIActionContext``, runs ``before``, lets the application render,
then runs ``after`` and sends the (possibly rewritten) page.

HTML bodies are decoded into the context's text ``output`` as they
arrive, so once ``before`` has swapped in its buffer the page is
captured rather than transmitted. Everything else streams through.
"""

import codecs
import logging
from collections.abc import Callable, MutableMapping
from io import StringIO
from typing import Any, TypeAlias

from pagespeed._internal.asgi import ASGIApp, Message, Receive, Scope, Send
from pagespeed.config import PageSpeedConfig
from pagespeed.context import request_scope
from pagespeed.http.headers import Headers, content_charset, is_html
from pagespeed.interceptor.lazyload import LazyLoadInterceptor
from pagespeed.interceptor.protocol import TextSink
from pagespeed.routing.route import RouteData
from pagespeed.routing.router import RouteTable

logger = logging.getLogger("pagespeed.middleware")

# Scope keys an outer layer may set
ROUTE_SCOPE_KEY = "pagespeed.route"
PARTIAL_SCOPE_KEY = "pagespeed.partial"

# Bytes round-trip unchanged through decode/encode, even when not valid text
_ERRORS = "surrogateescape"

RouteResolver: TypeAlias = Callable[[Scope], RouteData | None]


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    return not (100 <= status < 200 or status in {204, 304})


def _is_encoded(headers: Headers) -> bool:
    """Whether the body carries a content coding such as gzip or br."""
    encoding = headers.get("content-encoding", "").strip().lower()
    return encoding not in ("", "identity")


class ASGIActionContext:
    """``ActionContext`` for one ASGI HTTP request.

    Partial sub-renders are htmx fragment requests (``HX-Request: true``)
    or requests whose scope carries a truthy ``pagespeed.partial``.
    """

    __slots__ = ("exception", "headers", "items", "output", "route_data", "scope")

    def __init__(
        self,
        scope: Scope,
        *,
        route_data: RouteData | None,
        items: MutableMapping[str, Any],
        output: TextSink,
    ) -> None:
        self.scope = scope
        self.headers = Headers(scope.get("headers", ()))
        self.route_data = route_data
        self.items = items
        self.output = output
        self.exception: BaseException | None = None

    @property
    def is_child_action(self) -> bool:
        if self.scope.get(PARTIAL_SCOPE_KEY):
            return True
        return self.headers.get("hx-request") == "true"

    @property
    def user_agent(self) -> str | None:
        return self.headers.get("user-agent")


class _CapturedResponse:
    """Sits between the application and the real ``send``.

    HTML bodies are decoded into ``context.output``. Other responses,
    compressed bodies and bodiless statuses go straight to ``send``.
    """

    __slots__ = ("_decoder", "charset", "context", "passthrough", "send_downstream", "start")

    def __init__(self, send: Send, context: ASGIActionContext, *, passthrough: bool) -> None:
        self.send_downstream = send
        self.context = context
        self.passthrough = passthrough
        self.start: Message | None = None
        self.charset = "utf-8"
        self._decoder: codecs.IncrementalDecoder | None = None

    async def send(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            headers = Headers(message.get("headers", ()))
            content_type = headers.get("content-type")
            if (
                self.passthrough
                or not is_html(content_type)
                or not _body_allowed(message["status"])
                or _is_encoded(headers)
            ):
                self.passthrough = True
                await self.send_downstream(message)
                return
            self.start = message
            self.charset = content_charset(content_type)
            try:
                self._decoder = codecs.getincrementaldecoder(self.charset)(errors=_ERRORS)
            except LookupError:
                logger.debug("Unknown charset %r; passing response through", self.charset)
                self.passthrough = True
                self.start = None
                await self.send_downstream(message)
            return

        if message["type"] == "http.response.body" and self._decoder is not None:
            final = not message.get("more_body", False)
            text = self._decoder.decode(message.get("body", b""), final=final)
            if text:
                self.context.output.write(text)
            return

        await self.send_downstream(message)

    async def flush(self, body: str) -> None:
        """Send the held-back start message and the final body."""
        if self.start is None:
            return
        encoded = body.encode(self.charset, errors=_ERRORS)
        headers = Headers(self.start.get("headers", ())).without("content-length")
        headers.append((b"content-length", str(len(encoded)).encode("latin-1")))
        await self.send_downstream({**self.start, "headers": headers})
        await self.send_downstream({"type": "http.response.body", "body": encoded, "more_body": False})


class LazyLoadMiddleware:
    """ASGI middleware that lazy-loads images on full HTML pages.

    Usage::

        app = LazyLoadMiddleware(app, config=PageSpeedConfig.from_env())

    Route data comes from *resolve_route* when given, else from a
    ``RouteData`` an outer layer stored at ``scope["pagespeed.route"]``,
    else from *routes* (``{controller}/{action}/{id?}`` by default).

    If the application raises, nothing it rendered is sent and the
    exception propagates to the server.
    """

    __slots__ = ("app", "config", "interceptor", "resolve_route", "routes")

    def __init__(
        self,
        app: ASGIApp,
        *,
        config: PageSpeedConfig | None = None,
        routes: RouteTable | None = None,
        resolve_route: RouteResolver | None = None,
        interceptor: LazyLoadInterceptor | None = None,
    ) -> None:
        self.app = app
        self.config = config or PageSpeedConfig()
        self.routes = routes or RouteTable.conventional()
        self.resolve_route = resolve_route
        self.interceptor = interceptor or LazyLoadInterceptor(self.config)

    def route_data(self, scope: Scope) -> RouteData | None:
        if self.resolve_route is not None:
            return self.resolve_route(scope)
        existing = scope.get(ROUTE_SCOPE_KEY)
        if isinstance(existing, RouteData):
            return existing
        return self.routes.match(scope.get("path", "/"))

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        with request_scope() as items:
            output = StringIO()
            context = ASGIActionContext(
                scope,
                route_data=self.route_data(scope),
                items=items,
                output=output,
            )
            response = _CapturedResponse(send, context, passthrough=scope.get("method") == "HEAD")

            self.interceptor.before(context)
            try:
                await self.app(scope, receive, response.send)
            except BaseException as exc:
                context.exception = exc
                raise
            finally:
                self.interceptor.after(context)

            await response.flush(output.getvalue())
