"""JSON-RPC request and response envelopes.

Pydantic models for the wire format exchanged with the endpoint:
- RpcRequestMessage: outbound envelope, built fresh for every call
- RpcResponseMessage: inbound envelope, decoded once per call
- RpcErrorObject: the `error` member of a response
- RpcRequest: a caller-built request whose id is controlled by the caller
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter

__all__ = [
    "RpcErrorObject",
    "RpcRequest",
    "RpcRequestMessage",
    "RpcResponseMessage",
    "new_request_id",
]


def new_request_id() -> str:
    """Return a random request id used to correlate a response with its call."""
    return str(uuid.uuid4())


class RpcRequestMessage(BaseModel):
    """Outbound JSON-RPC request envelope.

    Attributes:
        id: Request id, echoed back by the endpoint
        method: Remote method name
        params: Positional parameters, in call order
        jsonrpc: Protocol version marker
    """

    model_config = ConfigDict(frozen=True)

    id: str
    method: str
    params: tuple[Any, ...] = ()
    jsonrpc: str = "2.0"


class RpcErrorObject(BaseModel):
    """JSON-RPC error object carried by a failed response."""

    model_config = ConfigDict(extra="ignore")

    code: int
    message: str
    data: Any | None = None


class RpcResponseMessage(BaseModel):
    """Inbound JSON-RPC response envelope.

    `result` is present only when `error` is absent. Unknown members are
    ignored so endpoints that add their own fields still decode.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | int | None = None
    result: Any | None = None
    error: RpcErrorObject | None = None
    jsonrpc: str | None = None

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def get_result(self, result_type: Any = None) -> Any:
        """Return `result`, converted to `result_type` when one is given.

        Args:
            result_type: Any type pydantic can validate into (models,
                dataclasses, `int`, `list[str]`, ...). None returns the raw
                decoded JSON value.

        Returns:
            The converted result, or None when the response has no result.

        Raises:
            pydantic.ValidationError: If the result does not fit `result_type`
        """
        if self.result is None or result_type is None:
            return self.result
        return TypeAdapter(result_type).validate_python(self.result)


@dataclass(frozen=True)
class RpcRequest:
    """A request built by the caller, used when the id must be controlled.

    Args:
        id: Request id to send as-is
        method: Remote method name
        raw_params: Positional parameters
    """

    id: str
    method: str
    raw_params: tuple[Any, ...] = field(default_factory=tuple)

    @classmethod
    def create(cls, method: str, *params: Any) -> RpcRequest:
        """Build a request with a freshly generated id."""
        return cls(id=new_request_id(), method=method, raw_params=tuple(params))

    def to_message(self) -> RpcRequestMessage:
        return RpcRequestMessage(id=self.id, method=self.method, params=self.raw_params)
