"""Tests for httprpc.messages: request/response envelopes."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, ValidationError

from httprpc.messages import (
    RpcErrorObject,
    RpcRequest,
    RpcRequestMessage,
    RpcResponseMessage,
    new_request_id,
)
from httprpc.serialization import default_serialization_policy


class Block(BaseModel):
    number: int
    hash: str


# ---------------------------------------------------------------------------
# Request envelope
# ---------------------------------------------------------------------------


def test_request_message_wire_shape():
    """Request serializes to the JSON-RPC object with positional params."""
    message = RpcRequestMessage(id="1", method="eth_call", params=({"to": "0x1"}, "latest"))
    assert message.model_dump(mode="json") == {
        "id": "1",
        "method": "eth_call",
        "params": [{"to": "0x1"}, "latest"],
        "jsonrpc": "2.0",
    }


def test_request_message_is_frozen():
    """Request envelopes are immutable after construction."""
    message = RpcRequestMessage(id="1", method="m")
    with pytest.raises(ValidationError):
        message.method = "other"  # type: ignore[misc]


def test_request_round_trip_preserves_fields():
    """id, method and params survive serialize -> parse."""
    policy = default_serialization_policy()
    message = RpcRequestMessage(id="abc", method="sum", params=(1, [2, 3], None, "x"))
    decoded = RpcRequestMessage.model_validate_json(policy.serialize(message))
    assert decoded.id == "abc"
    assert decoded.method == "sum"
    assert decoded.params == (1, [2, 3], None, "x")


def test_new_request_id_is_unique_string():
    """Generated ids are distinct strings."""
    ids = {new_request_id() for _ in range(100)}
    assert len(ids) == 100
    assert all(isinstance(i, str) for i in ids)


# ---------------------------------------------------------------------------
# Caller-built requests
# ---------------------------------------------------------------------------


def test_rpc_request_keeps_caller_id():
    """to_message() keeps the id chosen by the caller."""
    request = RpcRequest(id="fixed-7", method="eth_getTransactionByHash", raw_params=("0xab",))
    message = request.to_message()
    assert message.id == "fixed-7"
    assert message.method == "eth_getTransactionByHash"
    assert message.params == ("0xab",)


def test_rpc_request_create_generates_id():
    """create() draws a fresh id and collects params."""
    first = RpcRequest.create("net_version")
    second = RpcRequest.create("net_version", 1, 2)
    assert first.id != second.id
    assert second.raw_params == (1, 2)


# ---------------------------------------------------------------------------
# Response envelope
# ---------------------------------------------------------------------------


def test_response_with_result():
    """A successful response has a result and no error."""
    response = RpcResponseMessage.model_validate_json('{"jsonrpc": "2.0", "id": "1", "result": "0x10"}')
    assert response.has_error is False
    assert response.result == "0x10"


def test_response_with_error():
    """An error response exposes code, message and data."""
    response = RpcResponseMessage.model_validate_json(
        '{"id": "1", "error": {"code": -32601, "message": "method not found", "data": {"m": "x"}}}'
    )
    assert response.has_error is True
    assert response.error == RpcErrorObject(code=-32601, message="method not found", data={"m": "x"})
    assert response.result is None


def test_response_ignores_unknown_members():
    """Extra members added by some endpoints are ignored."""
    response = RpcResponseMessage.model_validate_json('{"id": 3, "result": true, "extra": 1}')
    assert response.id == 3
    assert response.result is True


def test_response_round_trip_preserves_fields():
    """Dumping and re-parsing a response keeps result and error."""
    original = RpcResponseMessage(
        id="9", error=RpcErrorObject(code=-32602, message="invalid params", data=[1])
    )
    decoded = RpcResponseMessage.model_validate_json(original.model_dump_json())
    assert decoded == original


def test_get_result_raw_value():
    """Without a result type the decoded JSON value is returned as is."""
    response = RpcResponseMessage(id="1", result={"number": 1, "hash": "0x"})
    assert response.get_result() == {"number": 1, "hash": "0x"}


def test_get_result_converts_to_model():
    """A pydantic model result type is validated from the raw result."""
    response = RpcResponseMessage(id="1", result={"number": 12, "hash": "0xff"})
    block = response.get_result(Block)
    assert block == Block(number=12, hash="0xff")


def test_get_result_converts_generic_types():
    """Generic aliases such as list[int] are supported."""
    response = RpcResponseMessage(id="1", result=["1", "2"])
    assert response.get_result(list[int]) == [1, 2]


def test_get_result_none_stays_none():
    """A missing result is None regardless of the requested type."""
    response = RpcResponseMessage(id="1")
    assert response.get_result(Block) is None


def test_get_result_mismatch_raises():
    """A result that does not fit the type raises ValidationError."""
    response = RpcResponseMessage(id="1", result="not a block")
    with pytest.raises(ValidationError):
        response.get_result(Block)
