"""Testing helpers for applications wrapped in pagespeed middleware."""

from pagespeed.testing.client import TestClient, TestResponse

__all__ = ["TestClient", "TestResponse"]
