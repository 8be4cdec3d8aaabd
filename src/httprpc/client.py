"""JSON-RPC over HTTP client.

`RpcClient` posts one JSON-RPC request per call to a fixed endpoint,
optionally under a per-call route, and maps the response:
- a JSON-RPC error object raises `RpcResponseError`, except code -32000
  which is treated as success with no result
- any failure while sending or decoding raises `RpcClientUnknownError`
  with the original exception attached

The HTTP client in use comes from a `TransportPool` that replaces it
every `rotation_interval` seconds without disturbing in-flight calls.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from httprpc.config import ROTATION_INTERVAL_SECONDS, ClientConfig
from httprpc.errors import BENIGN_ERROR_CODE, RpcClientUnknownError, RpcResponseError
from httprpc.messages import RpcRequest, RpcRequestMessage, RpcResponseMessage, new_request_id
from httprpc.pool import Clock, TransportFactory, TransportPool
from httprpc.serialization import SerializationPolicy, default_serialization_policy

logger = logging.getLogger(__name__)

__all__ = ["RpcClient"]

JSON_CONTENT_TYPE = "application/json"


class RpcClient:
    """Client for a single JSON-RPC endpoint.

    Safe to share between concurrent tasks. Use as an async context manager,
    or call `aclose()` when done, to release the pooled connections.

    Args:
        base_url: Endpoint URL. Routes passed per call are appended to it.
        authorization: Authorization header value sent with every request
        serializer: Envelope serialization policy (default: pydantic based)
        transport: Custom httpx transport, e.g. for proxies or TLS overrides
        rotation_interval: Seconds before the HTTP client is recreated
        timeout: Request timeout in seconds; None keeps httpx's default
        factory: Builds the HTTP client of each transport handle
        clock: Monotonic time source used for rotation

    Example:
        async with RpcClient("http://localhost:8545") as client:
            block = await client.call("eth_blockNumber")
    """

    def __init__(
        self,
        base_url: str,
        authorization: str | None = None,
        serializer: SerializationPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        *,
        rotation_interval: float = ROTATION_INTERVAL_SECONDS,
        timeout: float | None = None,
        factory: TransportFactory | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.config = ClientConfig(
            base_url=base_url,
            authorization=authorization,
            rotation_interval=rotation_interval,
            timeout=timeout,
        )
        self.serializer = serializer or default_serialization_policy()
        self._pool = TransportPool(self.config, transport=transport, factory=factory, clock=clock)

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> RpcClient:
        """Create a client from a `ClientConfig` (see `ClientConfig.from_env`)."""
        return cls(
            config.base_url,
            config.authorization,
            rotation_interval=config.rotation_interval,
            timeout=config.timeout,
            **kwargs,
        )

    @property
    def pool(self) -> TransportPool:
        return self._pool

    async def __aenter__(self) -> RpcClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._pool.aclose()

    async def call(
        self,
        method: str,
        *params: Any,
        route: str | None = None,
        result_type: Any = None,
    ) -> Any:
        """Call `method` and return its result.

        Args:
            method: Remote method name
            *params: Positional parameters
            route: Path appended to the base URL for this call only
            result_type: Type to convert the result into (None: raw JSON value)

        Returns:
            The converted result. None when the endpoint returned no result,
            including the suppressed -32000 error.

        Raises:
            RpcResponseError: If the endpoint returned an error object
            RpcClientUnknownError: If the call could not be completed
        """
        message = RpcRequestMessage(id=new_request_id(), method=method, params=params)
        return await self._call(message, route, result_type)

    async def call_request(
        self,
        request: RpcRequest,
        *,
        route: str | None = None,
        result_type: Any = None,
    ) -> Any:
        """Like `call`, for a request whose id was chosen by the caller."""
        return await self._call(request.to_message(), route, result_type)

    async def notify(self, method: str, *params: Any, route: str | None = None) -> None:
        """Call `method` and discard its result. Errors are mapped as in `call`."""
        message = RpcRequestMessage(id=new_request_id(), method=method, params=params)
        response = await self._send(message, route)
        self._handle_rpc_error(response, message)

    async def notify_request(self, request: RpcRequest, *, route: str | None = None) -> None:
        """Like `notify`, for a request whose id was chosen by the caller."""
        message = request.to_message()
        response = await self._send(message, route)
        self._handle_rpc_error(response, message)

    async def _call(
        self, message: RpcRequestMessage, route: str | None, result_type: Any
    ) -> Any:
        response = await self._send(message, route)
        self._handle_rpc_error(response, message)
        try:
            return response.get_result(result_type)
        except Exception as exc:
            logger.error(f"Could not convert result of {message.method} (id={message.id}): {exc}")
            raise RpcClientUnknownError(
                f"Could not convert result of {message.method} to {result_type!r}", exc
            ) from exc

    async def _send(self, message: RpcRequestMessage, route: str | None) -> RpcResponseMessage:
        """Post one envelope and decode the reply.

        Route handling follows httpx base-URL merging: the base path gets a
        trailing slash and the route's leading slash is dropped, so
        "http://host/" + "/custom" posts to "http://host/custom". Without a
        route, or with an empty one, the base URL is used exactly as configured.
        """
        try:
            handle = self._pool.get_or_refresh()
            payload = self.serializer.serialize(message)
            url = route if route else self.config.base_url
            logger.debug(
                f"Sending {message.method} (id={message.id}, route={route!r}, "
                f"generation={handle.generation})"
            )
            async with handle.client.stream(
                "POST",
                url,
                content=payload.encode("utf-8"),
                headers={"Content-Type": JSON_CONTENT_TYPE},
            ) as response:
                response.raise_for_status()
                body = await response.aread()
            return self.serializer.deserialize(body)
        except Exception as exc:
            logger.error(f"{message.method} (id={message.id}) failed: {exc!r}")
            raise RpcClientUnknownError(cause=exc) from exc

    def _handle_rpc_error(self, response: RpcResponseMessage, message: RpcRequestMessage) -> None:
        if response.error is None:
            return
        if response.error.code == BENIGN_ERROR_CODE:
            # Geth reports unknown transactions this way; the caller gets None.
            logger.warning(
                f"Ignoring error {response.error.code} for {message.method} "
                f"(id={message.id}): {response.error.message}"
            )
            return
        raise RpcResponseError(response.error)
