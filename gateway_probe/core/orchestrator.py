"""Ordered strategy fallback for obtaining one answer from a gateway.

Control-flow model:
    `gather_information` runs the strategies in `STRATEGIES` order and returns the
    text of the first outcome that is not `Exhausted`:

    1. `try_direct_api`: POST the prompt to common chat/completion paths.
    2. `try_protocol_flow`: JSON-RPC handshake, tool discovery, first-tool call.
    3. `try_query_endpoints`: GET with prompt/model in the query string.

Error handling strategy:
    Transport and protocol failures inside a strategy are emitted as probe events
    and move the strategy on to its next endpoint. A strategy that runs out of
    endpoints returns `Exhausted`. When all strategies are exhausted,
    `ExhaustedError("all approaches failed")` is raised without aggregating
    the individual causes; those are only visible through emitted events.

Determinism:
    Endpoint order, request bodies, and query strings are fixed for given
    prompt/model inputs.
"""

import json
from typing import Callable
from urllib.parse import urlencode

from gateway_probe.core.errors import ExhaustedError, GatewayError, ResponseFormatError
from gateway_probe.core.strategy_types import Exhausted, RawText, StrategyOutcome, StructuredField
from gateway_probe.extraction.text_extractor import classify_payload, match
from gateway_probe.observability.events import ProbeEvent
from gateway_probe.rpc.client import GatewayClient

DIRECT_API_ENDPOINTS = (
    "/api/chat",
    "/chat",
    "/api/completion",
    "/completion",
    "/api/generate",
    "/generate",
)

QUERY_ENDPOINTS = ("/", "/api", "/query")

Strategy = Callable[[GatewayClient, str, str], StrategyOutcome]


def direct_api_body(prompt: str, model: str) -> bytes:
    """Request body carrying the prompt under every common field name."""
    payload = {
        "prompt": prompt,
        "model": model,
        "query": prompt,
        "input": prompt,
    }
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def query_string(prompt: str, model: str) -> str:
    """URL-encoded `model`, `prompt`, and `q` parameters, keys sorted."""
    return urlencode(sorted({"prompt": prompt, "model": model, "q": prompt}.items()))


# =========================================================
# STRATEGIES
# =========================================================

def try_direct_api(client: GatewayClient, prompt: str, model: str) -> StrategyOutcome:
    """POST to each direct chat endpoint; the first HTTP 200 wins."""
    body = direct_api_body(prompt, model)
    last_error = ""

    for endpoint in DIRECT_API_ENDPOINTS:
        url = client.url_for(endpoint)
        client.events.emit(ProbeEvent("direct_api_attempt", {"url": url}))
        try:
            response = client.send("POST", url, body)
        except GatewayError as err:
            last_error = str(err)
            client.events.emit(ProbeEvent("direct_api_failed", {"url": url, "error": last_error}))
            continue

        client.events.emit(ProbeEvent("direct_api_response_body", {"status": response.status_code, "body": response.text}))
        if response.status_code == 200:
            return classify_payload(response.body, source=url)
        last_error = f"HTTP {response.status_code}"
        client.events.emit(ProbeEvent("direct_api_rejected", {"url": url, "status": response.status_code}))

    return Exhausted("direct_api", last_error or "direct API calls failed")


def try_protocol_flow(client: GatewayClient, prompt: str, model: str) -> StrategyOutcome:
    """Handshake, list tools, and call the first tool with `{prompt, model}`."""
    try:
        client.initialize()
        tools = client.list_tools()
        if not tools:
            raise ResponseFormatError("no tools available")

        descriptor = tools[0]
        name = descriptor.get("name") if isinstance(descriptor, dict) else None
        if not isinstance(name, str) or not name:
            raise ResponseFormatError("first tool has no usable name")

        client.events.emit(ProbeEvent("tool_selected", {"name": name, "available": len(tools)}))
        result = client.call_tool(name, {"prompt": prompt, "model": model})
    except GatewayError as err:
        client.events.emit(ProbeEvent("protocol_flow_failed", {"error": str(err)}))
        return Exhausted("protocol_flow", str(err))

    found = match(result)
    return StructuredField(found.text, field=found.field, source=f"tools/call:{name}")


def try_query_endpoints(client: GatewayClient, prompt: str, model: str) -> StrategyOutcome:
    """GET each query endpoint; the first HTTP 200 body is returned verbatim."""
    params = query_string(prompt, model)
    last_error = ""

    for endpoint in QUERY_ENDPOINTS:
        url = f"{client.url_for(endpoint)}?{params}"
        client.events.emit(ProbeEvent("query_attempt", {"url": url}))
        try:
            response = client.send("GET", url)
        except GatewayError as err:
            last_error = str(err)
            client.events.emit(ProbeEvent("query_failed", {"url": url, "error": last_error}))
            continue

        client.events.emit(ProbeEvent("query_response_body", {"status": response.status_code, "body": response.text}))
        if response.status_code == 200:
            return RawText(response.text, source=url)
        last_error = f"HTTP {response.status_code}"
        client.events.emit(ProbeEvent("query_rejected", {"url": url, "status": response.status_code}))

    return Exhausted("query_endpoints", last_error or "query endpoints failed")


STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("direct_api", try_direct_api),
    ("protocol_flow", try_protocol_flow),
    ("query_endpoints", try_query_endpoints),
)


def gather_information(client: GatewayClient, prompt: str, model: str) -> str:
    """Return the first answer produced by any strategy.

    Args:
        client: Fresh client for this query; its state is mutated.
        prompt: User prompt.
        model: Model label forwarded to the gateway.

    Raises:
        ExhaustedError: When every strategy is exhausted.
    """
    for label, strategy in STRATEGIES:
        client.events.emit(ProbeEvent("strategy_started", {"strategy": label}))
        outcome = strategy(client, prompt, model)
        if isinstance(outcome, Exhausted):
            client.events.emit(
                ProbeEvent("strategy_failed", {"strategy": label, "reason": outcome.reason})
            )
            continue
        fields = {"strategy": label, "source": outcome.source}
        if isinstance(outcome, StructuredField):
            fields["field"] = outcome.field
        client.events.emit(ProbeEvent("strategy_succeeded", fields))
        return outcome.text

    raise ExhaustedError("all approaches failed")
