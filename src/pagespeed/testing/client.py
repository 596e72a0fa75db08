"""Async test client for ASGI applications.

Sends requests through the ASGI interface directly — no HTTP involved.
"""

from dataclasses import dataclass
from typing import Any

from pagespeed._internal.asgi import ASGIApp
from pagespeed.http.headers import Headers


@dataclass(frozen=True, slots=True)
class TestResponse:
    """What the application sent back."""

    __test__ = False  # Tell pytest this is not a test class

    status: int
    headers: Headers
    body: bytes

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class TestClient:
    """Async test client for ASGI applications.

    Usage::

        client = TestClient(LazyLoadMiddleware(app))
        response = await client.get("/blog/show/1")
        assert response.status == 200
    """

    __test__ = False  # Tell pytest this is not a test class

    __slots__ = ("app",)

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def get(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        scope: dict[str, Any] | None = None,
    ) -> TestResponse:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers, scope=scope)

    async def fragment(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> TestResponse:
        """Send an htmx fragment request (sets ``HX-Request: true``)."""
        return await self.request("GET", path, headers={"HX-Request": "true", **(headers or {})})

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        scope: dict[str, Any] | None = None,
    ) -> TestResponse:
        """Send an arbitrary request. *scope* entries are merged into the ASGI scope."""
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""

        raw_headers: list[tuple[bytes, bytes]] = []
        for name, value in (headers or {}).items():
            raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

        asgi_scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path_part,
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
            **(scope or {}),
        }

        request_body = body or b""
        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            return {"type": "http.disconnect"}

        response_status = 200
        response_headers: list[tuple[bytes, bytes]] = []
        response_body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                response_body_parts.append(message.get("body", b""))

        await self.app(asgi_scope, receive, send)

        return TestResponse(
            status=response_status,
            headers=Headers(response_headers),
            body=b"".join(response_body_parts),
        )
