"""Construction-time configuration for the RPC client.

All tunables live here. Values resolve in priority order:
explicit argument > HTTPRPC_* environment variable > default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

__all__ = ["ClientConfig", "ROTATION_INTERVAL_SECONDS", "ENV_PREFIX"]

#: Age (seconds) after which the active transport handle is replaced.
ROTATION_INTERVAL_SECONDS = 60.0

ENV_PREFIX = "HTTPRPC_"


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for an `RpcClient`.

    Attributes:
        base_url: Endpoint every request is posted to (routes are appended).
        authorization: Value of the Authorization header, e.g. "Bearer abc".
        rotation_interval: Seconds before the transport handle is recreated.
        timeout: Request timeout in seconds. None keeps httpx's own default.
    """

    base_url: str
    authorization: str | None = None
    rotation_interval: float = ROTATION_INTERVAL_SECONDS
    timeout: float | None = None

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url is required")
        if self.rotation_interval < 0:
            raise ValueError(
                f"rotation_interval must be >= 0, got {self.rotation_interval}"
            )

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, **overrides: Any) -> ClientConfig:
        """Build a config from environment variables.

        Reads {prefix}URL, {prefix}AUTHORIZATION, {prefix}ROTATION_INTERVAL and
        {prefix}TIMEOUT. Keyword overrides that are not None take priority.

        Raises:
            ValueError: If no base URL is given either way
        """
        values: dict[str, Any] = {}
        url = os.getenv(f"{prefix}URL")
        if url:
            values["base_url"] = url.strip()
        authorization = os.getenv(f"{prefix}AUTHORIZATION")
        if authorization:
            values["authorization"] = authorization
        rotation = os.getenv(f"{prefix}ROTATION_INTERVAL")
        if rotation:
            values["rotation_interval"] = float(rotation)
        timeout = os.getenv(f"{prefix}TIMEOUT")
        if timeout:
            values["timeout"] = float(timeout)

        values.update({key: value for key, value in overrides.items() if value is not None})
        if "base_url" not in values:
            raise ValueError(f"No endpoint configured; set {prefix}URL or pass base_url")
        return cls(**values)
