"""Two-slot rotating pool of HTTP transport handles.

Creating an `httpx.AsyncClient` is comparatively expensive, and a client
that lives forever keeps stale sockets and never re-resolves DNS. The pool
keeps two slots (A and B) and a flag naming the active one. Once the active
handle is older than the rotation interval, a fresh handle is installed in
the inactive slot and the flag flips to it. The handle being retired stays
untouched in its slot, so requests that already captured it finish normally.

Every read and write of the pool state happens under one reentrant lock,
which is never held across an await. Callers may therefore be asyncio tasks
or plain threads.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import httpx

from httprpc.config import ClientConfig

logger = logging.getLogger(__name__)

__all__ = ["TransportFactory", "TransportHandle", "TransportPool", "create_async_client"]

#: Returns a monotonic timestamp in seconds.
Clock = Callable[[], float]


@dataclass(frozen=True)
class TransportHandle:
    """A ready-to-use HTTP client plus its creation metadata.

    Attributes:
        client: Configured httpx client (base URL, headers, transport)
        created_at: Clock reading when the handle was built
        generation: 1 for the first handle, incremented on each rotation
    """

    client: httpx.AsyncClient
    created_at: float
    generation: int


class TransportFactory(Protocol):
    """Protocol for functions that build the HTTP client of a handle."""

    def __call__(
        self,
        base_url: str,
        headers: dict[str, str],
        transport: httpx.AsyncBaseTransport | None,
        timeout: float | None,
    ) -> httpx.AsyncClient: ...


def create_async_client(
    base_url: str,
    headers: dict[str, str],
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float | None = None,
) -> httpx.AsyncClient:
    """Default factory: an `httpx.AsyncClient` bound to the endpoint.

    A None timeout leaves httpx's default in place.
    """
    kwargs: dict = {"base_url": base_url, "headers": headers}
    if transport is not None:
        kwargs["transport"] = transport
    if timeout is not None:
        kwargs["timeout"] = timeout
    return httpx.AsyncClient(**kwargs)


class TransportPool:
    """Owns the A/B transport handles of a single `RpcClient`.

    Args:
        config: Endpoint, authorization, rotation interval and timeout
        transport: Optional custom httpx transport (proxying, TLS, mocking)
        factory: Builds the HTTP client of each new handle
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        factory: TransportFactory | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._factory = factory or create_async_client
        self._clock = clock or time.monotonic
        self._lock = threading.RLock()
        self._handle_a: TransportHandle | None = None
        self._handle_b: TransportHandle | None = None
        self._active_is_a = False
        self._last_created_at = 0.0
        self._generation = 0
        self._closed = False
        self.create_new()

    @property
    def active(self) -> TransportHandle:
        """The handle currently marked active."""
        with self._lock:
            handle = self._handle_a if self._active_is_a else self._handle_b
            assert handle is not None
            return handle

    @property
    def rotations(self) -> int:
        """Number of handles created after the initial one."""
        with self._lock:
            return self._generation - 1

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def get_or_refresh(self) -> TransportHandle:
        """Return the active handle, rotating first if it has gone stale.

        The staleness check and the rotation run in the same critical section
        and a rotation resets the shared timestamp. A burst of callers at the
        boundary therefore causes a single rotation.

        Raises:
            RuntimeError: If the pool has been closed
            Exception: Whatever the factory raises while building a handle
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("Transport pool is closed")
            elapsed = self._clock() - self._last_created_at
            if elapsed > self._config.rotation_interval:
                logger.debug(f"Active handle is {elapsed:.1f}s old, rotating")
                self.create_new()
            return self.active

    def create_new(self) -> TransportHandle:
        """Build a new handle, install it in the inactive slot and activate it."""
        with self._lock:
            client = self._factory(
                self._config.base_url,
                self._headers(),
                self._transport,
                self._config.timeout,
            )
            now = self._clock()
            self._generation += 1
            logger.debug(
                f"Created HTTP client for generation {self._generation} "
                f"(timeout={self._config.timeout!r}, auth={self._config.authorization is not None})"
            )
            handle = TransportHandle(client=client, created_at=now, generation=self._generation)
            self._last_created_at = now
            if self._active_is_a:
                self._handle_b = handle
                self._active_is_a = False
                slot = "B"
            else:
                self._handle_a = handle
                self._active_is_a = True
                slot = "A"
            logger.info(
                f"Installed transport handle generation {handle.generation} in slot {slot} "
                f"for {self._config.base_url}"
            )
            return handle

    async def aclose(self) -> None:
        """Close the HTTP clients in both slots. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            handles = [h for h in (self._handle_a, self._handle_b) if h is not None]
        for handle in handles:
            await handle.client.aclose()
        logger.debug(f"Closed {len(handles)} transport handle(s)")

    def _headers(self) -> dict[str, str]:
        if self._config.authorization:
            return {"Authorization": self._config.authorization}
        return {}
