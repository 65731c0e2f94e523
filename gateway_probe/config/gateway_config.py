"""Gateway/runtime configuration.

Architectural role:
    Centralizes gateway endpoint selection, per-call timeout, client identity,
    and database parameters for `gateway_probe.api` and `gateway_probe.db`.

Resolution:
    `.env` is loaded once at import via `load_dotenv()`. The `load_*` helpers
    read `os.environ` at call time so that tests and long-running processes see
    current values.

Relevant environment variables:
    - `GATEWAY_BASE_URL`
    - `GATEWAY_TIMEOUT_SECONDS`
    - `GATEWAY_CLIENT_NAME`, `GATEWAY_CLIENT_VERSION`
    - `GATEWAY_PROMPT`, `GATEWAY_MODEL`
    - `GATEWAY_USE_DATABASE`
    - `LOG_LEVEL`
    - `PG_HOST`, `PG_PORT`, `PG_USER`, `PG_PASS`, `PG_NAME`

Failure behavior:
    Malformed numeric values raise `ConfigurationError`. Missing database values
    are reported by `gateway_probe.db.connection`, not here.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

from gateway_probe.core.errors import ConfigurationError

load_dotenv()

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Handshake identity sent in `clientInfo`.
DEFAULT_CLIENT_NAME = "gateway-probe"
DEFAULT_CLIENT_VERSION = "1.0.0"

# Initialization handshake protocol revision.
PROTOCOL_VERSION = "2024-11-05"

# Entry-point defaults when no prompt/model is supplied on the command line.
DEFAULT_PROMPT = "What is the current weather in New York?"
DEFAULT_MODEL = "mistral"

DATABASE_ENV_VARS = ("PG_HOST", "PG_PORT", "PG_USER", "PG_PASS", "PG_NAME")


@dataclass(frozen=True)
class GatewaySettings:
    """Connection settings for one gateway client.

    Attributes:
        base_url: Gateway root without trailing slash. JSON-RPC envelopes are
            posted here; probe paths are appended to it.
        timeout_seconds: Per-request timeout. There is no overall deadline.
        client_name: `clientInfo.name` for the initialization handshake.
        client_version: `clientInfo.version` for the initialization handshake.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    client_name: str = DEFAULT_CLIENT_NAME
    client_version: str = DEFAULT_CLIENT_VERSION


@dataclass(frozen=True)
class DatabaseSettings:
    """The five PostgreSQL connection parameters. Empty string means unset."""

    host: str = ""
    port: str = ""
    user: str = ""
    password: str = ""
    name: str = ""

    def is_complete(self) -> bool:
        return all((self.host, self.port, self.user, self.password, self.name))


def _read_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def load_gateway_settings(base_url: str | None = None) -> GatewaySettings:
    """Build `GatewaySettings` from the environment.

    Args:
        base_url: Optional override taking precedence over `GATEWAY_BASE_URL`.

    Returns:
        Settings with the trailing slash stripped from the base URL.
    """
    url = base_url or os.getenv("GATEWAY_BASE_URL", "").strip() or DEFAULT_BASE_URL
    return GatewaySettings(
        base_url=url.rstrip("/"),
        timeout_seconds=_read_float("GATEWAY_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        client_name=os.getenv("GATEWAY_CLIENT_NAME", "").strip() or DEFAULT_CLIENT_NAME,
        client_version=os.getenv("GATEWAY_CLIENT_VERSION", "").strip() or DEFAULT_CLIENT_VERSION,
    )


def load_database_settings() -> DatabaseSettings:
    """Read `PG_*` variables. Values are not validated here."""
    host, port, user, password, name = (os.getenv(var, "") for var in DATABASE_ENV_VARS)
    return DatabaseSettings(host=host, port=port, user=user, password=password, name=name)


def database_enabled() -> bool:
    """Return True when `GATEWAY_USE_DATABASE` is set to a truthy value."""
    return os.getenv("GATEWAY_USE_DATABASE", "").strip().lower() in ("1", "true", "yes")


_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def log_level() -> str:
    """Return `LOG_LEVEL` as a standard logging level name.

    Raises:
        ConfigurationError: For names `logging` does not know.
    """
    level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if level not in _LOG_LEVELS:
        raise ConfigurationError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {level!r}")
    return level
