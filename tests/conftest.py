"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from httprpc import RpcClient
from httprpc.testing import FakeRpcEndpoint

BASE_URL = "http://node.test/"


class FakeClock:
    """Manually advanced monotonic clock for rotation tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Returns a FakeClock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def endpoint() -> FakeRpcEndpoint:
    """Returns a scripted endpoint answering every method with None."""
    return FakeRpcEndpoint()


@pytest_asyncio.fixture
async def rpc_client(endpoint, clock) -> AsyncGenerator[RpcClient, None]:
    """Provides an RpcClient wired to the fake endpoint and fake clock."""
    async with RpcClient(BASE_URL, transport=endpoint.transport, clock=clock) as client:
        yield client
