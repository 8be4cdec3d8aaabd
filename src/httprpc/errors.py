"""JSON-RPC error types for the client layer.

Every failure surfaced by `RpcClient` is an `RpcClientError`:
- `RpcResponseError`: the endpoint answered with a JSON-RPC error object
- `RpcClientUnknownError`: the call could not be completed (network,
  HTTP status, serialization); the original exception is attached
"""

from __future__ import annotations

from typing import Any

from httprpc.messages import RpcErrorObject

__all__ = [
    "BENIGN_ERROR_CODE",
    "METHOD_NOT_FOUND",
    "MethodNotFoundError",
    "RpcClientError",
    "RpcClientUnknownError",
    "RpcResponseError",
]

#: Reported by several Ethereum nodes for unknown transactions; not an error.
BENIGN_ERROR_CODE = -32000

METHOD_NOT_FOUND = -32601


class RpcClientError(Exception):
    """Base class for errors raised by the RPC client."""


class RpcResponseError(RpcClientError):
    """Raised when the response envelope carries a JSON-RPC error object.

    Attributes:
        error: The error object as received
        code: JSON-RPC error code
        message: Error message from the endpoint
        data: Optional extra data from the endpoint
    """

    def __init__(self, error: RpcErrorObject) -> None:
        super().__init__(f"{error.message} (code {error.code})")
        self.error = error

    @property
    def code(self) -> int:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def data(self) -> Any:
        return self.error.data


class RpcClientUnknownError(RpcClientError):
    """Raised for any failure while sending a request or reading its response."""

    def __init__(
        self,
        message: str = "Error occurred when trying to send rpc request(s)",
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.cause = cause


class MethodNotFoundError(RuntimeError):
    """Raised when a JSON-RPC method is not recognized.

    Maps to JSON-RPC error code -32601 (Method not found).
    """

    json_rpc_code: int = METHOD_NOT_FOUND
