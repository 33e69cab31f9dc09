"""Exceptions raised by the Shelly dimmer integration."""

from __future__ import annotations


class ShellyError(Exception):
    """Base error for the integration."""


class ShellyConfigError(ShellyError):
    """Raised when the instance configuration fails validation."""


class ShellyRpcError(ShellyError):
    """Raised when an RPC call against the dimmer fails."""

    def __init__(self, message: str, *, method: str, url: str) -> None:
        """Record the RPC method and target URL alongside the message."""

        super().__init__(message)
        self.method = method
        self.url = url


class RpcTransportError(ShellyRpcError):
    """Raised when the device is unreachable or refuses the connection."""


class RpcTimeoutError(ShellyRpcError):
    """Raised when the round trip exceeds the RPC timeout."""


class RpcHttpStatusError(ShellyRpcError):
    """Raised when the device answers with a non-2xx status code."""

    def __init__(self, status_code: int, *, method: str, url: str) -> None:
        """Store the offending HTTP status code."""

        super().__init__(f"HTTP {status_code}", method=method, url=url)
        self.status_code = status_code


class RpcParseError(ShellyRpcError):
    """Raised when the response body is not the JSON we expect."""
