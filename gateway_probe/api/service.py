"""Prompt/model -> answer entrypoint.

Architectural role:
    Validates caller input, builds one `GatewayClient` per query, and delegates
    to `gateway_probe.core.orchestrator.gather_information`.

Lifecycle:
    A client is created per call and discarded afterwards. Session tokens and
    request ids never leak between calls.

Failure scenarios:
    - Empty prompt or model -> `ConfigurationError`, before any network call.
    - Every strategy exhausted -> `ExhaustedError`.
"""

from gateway_probe.config.gateway_config import GatewaySettings, load_gateway_settings
from gateway_probe.core.errors import ConfigurationError
from gateway_probe.core.orchestrator import gather_information
from gateway_probe.observability.events import EventSink
from gateway_probe.rpc.client import GatewayClient
from gateway_probe.rpc.transport import Transport


def ai_function(
    prompt: str,
    model: str,
    settings: GatewaySettings | None = None,
    transport: Transport | None = None,
    events: EventSink | None = None,
) -> str:
    """Return the gateway's answer for `prompt` using `model`.

    Args:
        prompt: User prompt. Must be non-empty.
        model: Model label. Must be non-empty.
        settings: Gateway settings; read from the environment when omitted.
        transport: Optional transport override (tests, custom sessions).
        events: Optional probe event sink; defaults to logging.

    Raises:
        ConfigurationError: Empty prompt or model.
        ExhaustedError: No strategy produced an answer.
    """
    if not prompt:
        raise ConfigurationError("prompt cannot be empty")
    if not model:
        raise ConfigurationError("model cannot be empty")

    client = GatewayClient(settings or load_gateway_settings(), transport=transport, events=events)
    return gather_information(client, prompt, model)
