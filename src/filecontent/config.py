"""Construction-time settings for the client and its transports."""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping

from .core.model import InvalidUsageError
from .core.protocol import STATUS_UP_TO_DATE

DEFAULT_API_ENDPOINT = "https://localhost/api/v1.2"
DEFAULT_CONNECT_TIMEOUT = 10.0   # seconds
DEFAULT_READ_TIMEOUT = 3.0       # seconds
DEFAULT_CHUNK_SIZE = 4096
DEFAULT_BUFFER_SIZE = 4096

ENV_PREFIX = "FILECONTENT_"


def _parse_verify(value: str) -> bool | str:
    lowered = value.strip().lower()
    if lowered in ("0", "false", "no", "off"):
        return False
    if lowered in ("1", "true", "yes", "on", ""):
        return True
    return value  # CA bundle path


@dataclass(slots=True, frozen=True)
class ClientConfig:
    """Endpoint, credentials and I/O tuning. None of it affects protocol semantics."""
    api_endpoint: str = DEFAULT_API_ENDPOINT
    auth_token: str | None = None
    verify: bool | str = True            # False disables certificate checks, a str is a CA bundle
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    chunk_size: int = DEFAULT_CHUNK_SIZE    # request body streaming piece
    buffer_size: int = DEFAULT_BUFFER_SIZE  # response body copy piece
    up_to_date_status: int = STATUS_UP_TO_DATE

    def __post_init__(self) -> None:
        if not self.api_endpoint:
            raise InvalidUsageError("api_endpoint must not be empty")
        for name in ("connect_timeout", "read_timeout", "chunk_size", "buffer_size"):
            if getattr(self, name) <= 0:
                raise InvalidUsageError(f"{name} must be positive")
        object.__setattr__(self, "api_endpoint", self.api_endpoint.rstrip("/"))

    @classmethod
    def for_host(cls, host: str, **overrides) -> "ClientConfig":
        """Config for the standard API path on `host`."""
        return cls(api_endpoint=f"https://{host}/api/v1.2", **overrides)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> "ClientConfig":
        """Read FILECONTENT_* variables; explicit keyword overrides win."""
        env = os.environ if environ is None else environ
        values: dict = {}
        if f"{ENV_PREFIX}API_ENDPOINT" in env:
            values["api_endpoint"] = env[f"{ENV_PREFIX}API_ENDPOINT"]
        if f"{ENV_PREFIX}TOKEN" in env:
            values["auth_token"] = env[f"{ENV_PREFIX}TOKEN"]
        if f"{ENV_PREFIX}VERIFY" in env:
            values["verify"] = _parse_verify(env[f"{ENV_PREFIX}VERIFY"])
        for key, convert in (("connect_timeout", float), ("read_timeout", float),
                             ("chunk_size", int), ("buffer_size", int),
                             ("up_to_date_status", int)):
            raw = env.get(f"{ENV_PREFIX}{key.upper()}")
            if raw is not None:
                try:
                    values[key] = convert(raw)
                except ValueError:
                    raise InvalidUsageError(f"Invalid value for {ENV_PREFIX}{key.upper()}: {raw!r}")
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

