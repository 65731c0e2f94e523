"""gateway-probe package.

Architectural role:
    Adaptive client for AI gateways whose API shape is not known in advance.
    The client probes direct chat endpoints, a JSON-RPC tool protocol, and
    query-string GET endpoints in fixed order and returns the first answer.

Package split:
    - `config`: environment-driven gateway and database settings.
    - `rpc`: envelope codec, HTTP transport, session negotiation, gateway client.
    - `extraction`: response-text normalization.
    - `core`: strategy orchestration, result types, and errors.
    - `observability`: probe event emission.
    - `db`: PostgreSQL connection provider.
    - `api`: public service function and process entry point.
"""

__version__ = "1.0.0"

from gateway_probe.api.service import ai_function
from gateway_probe.core.errors import (
    ConfigurationError,
    ExhaustedError,
    GatewayError,
)

__all__ = [
    "__version__",
    "ai_function",
    "ConfigurationError",
    "ExhaustedError",
    "GatewayError",
]
