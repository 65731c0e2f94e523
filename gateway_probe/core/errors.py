"""Exception hierarchy shared across gateway-probe modules.

Failure model:
    Per-endpoint `TransportError` / `ProtocolError` instances are caught by the
    orchestrator and turned into probe events. Only `ExhaustedError` and
    `ConfigurationError` are expected to reach callers of `ai_function`.
"""


class GatewayError(RuntimeError):
    """Base class for all gateway-probe failures."""


class ConfigurationError(GatewayError, ValueError):
    """Raised for invalid caller input or missing configuration."""


class TransportError(GatewayError):
    """Raised when an HTTP call fails before a response is received."""


class ProtocolError(GatewayError):
    """Raised for non-200 statuses and malformed JSON where JSON is required."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RPCError(ProtocolError):
    """Raised when a JSON-RPC envelope carries an error object."""

    def __init__(self, code: int, message: str, data=None):
        super().__init__(f"MCP error {code}: {message}")
        self.code = code
        self.data = data


class ResponseFormatError(GatewayError):
    """Raised when a well-formed response lacks an expected field."""


class SessionError(GatewayError):
    """Raised when no session token could be negotiated."""


class ExhaustedError(GatewayError):
    """Raised when every probing strategy failed."""


class DatabaseError(GatewayError):
    """Raised when the database connection cannot be opened or pinged."""
