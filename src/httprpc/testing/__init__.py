"""Testing utilities for code built on httprpc."""

from httprpc.testing.fakes import FakeRpcEndpoint, RecordedRequest
from httprpc.testing.server import create_app

__all__ = ["FakeRpcEndpoint", "RecordedRequest", "create_app"]
