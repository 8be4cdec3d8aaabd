"""httprpc: resilient JSON-RPC over HTTP client.

This package provides:
- RpcClient: async JSON-RPC client with a rotating pool of HTTP clients
- Envelope models and a pluggable serialization policy
- A typed error taxonomy (protocol errors vs. transport failures)
- Testing utilities (scripted endpoint, in-process server)
"""

from httprpc.client import RpcClient
from httprpc.config import ClientConfig
from httprpc.errors import (
    BENIGN_ERROR_CODE,
    RpcClientError,
    RpcClientUnknownError,
    RpcResponseError,
)
from httprpc.messages import RpcErrorObject, RpcRequest, RpcRequestMessage, RpcResponseMessage
from httprpc.pool import TransportHandle, TransportPool
from httprpc.serialization import (
    PydanticSerializationPolicy,
    SerializationPolicy,
    default_serialization_policy,
)

__all__ = [
    # Client
    "RpcClient",
    "ClientConfig",
    # Transport pool
    "TransportHandle",
    "TransportPool",
    # Messages
    "RpcErrorObject",
    "RpcRequest",
    "RpcRequestMessage",
    "RpcResponseMessage",
    # Serialization
    "PydanticSerializationPolicy",
    "SerializationPolicy",
    "default_serialization_policy",
    # Errors
    "BENIGN_ERROR_CODE",
    "RpcClientError",
    "RpcClientUnknownError",
    "RpcResponseError",
]
__version__ = "0.1.0"
