"""Serialization policy for request and response envelopes.

The client never touches JSON directly: it hands envelopes to a
`SerializationPolicy` and gets text (or an envelope) back. The default
policy is pydantic based; pass your own to change naming, null handling
or how custom parameter types are encoded.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from httprpc.messages import RpcRequestMessage, RpcResponseMessage

__all__ = [
    "PydanticSerializationPolicy",
    "SerializationPolicy",
    "default_serialization_policy",
]

#: Maps a parameter type to a callable returning a JSON-compatible value.
Converters = Mapping[type, Callable[[Any], Any]]


@runtime_checkable
class SerializationPolicy(Protocol):
    """Protocol for turning envelopes into wire text and back."""

    def serialize(self, message: RpcRequestMessage) -> str:
        """Encode a request envelope as JSON text."""
        ...

    def deserialize(self, payload: str | bytes) -> RpcResponseMessage:
        """Decode JSON text into a response envelope."""
        ...


class PydanticSerializationPolicy:
    """Default policy built on pydantic's JSON support.

    Args:
        exclude_none: Drop None-valued model fields when encoding
        converters: Per-type hooks applied to request parameters (recursing
            into lists, tuples and dicts) before encoding. The first entry
            whose type matches the value's MRO wins.
    """

    def __init__(
        self,
        exclude_none: bool = True,
        converters: Converters | None = None,
    ) -> None:
        self.exclude_none = exclude_none
        self.converters: dict[type, Callable[[Any], Any]] = dict(converters or {})

    def serialize(self, message: RpcRequestMessage) -> str:
        if self.converters:
            params = tuple(self._convert(value) for value in message.params)
            message = message.model_copy(update={"params": params})
        return message.model_dump_json(by_alias=True, exclude_none=self.exclude_none)

    def deserialize(self, payload: str | bytes) -> RpcResponseMessage:
        return RpcResponseMessage.model_validate_json(payload)

    def _convert(self, value: Any) -> Any:
        for klass in type(value).__mro__:
            converter = self.converters.get(klass)
            if converter is not None:
                return converter(value)
        if isinstance(value, (list, tuple)):
            return [self._convert(item) for item in value]
        if isinstance(value, dict):
            return {key: self._convert(item) for key, item in value.items()}
        return value


_DEFAULT_POLICY = PydanticSerializationPolicy()


def default_serialization_policy() -> PydanticSerializationPolicy:
    """Return the shared default policy (no converters, None fields dropped)."""
    return _DEFAULT_POLICY
