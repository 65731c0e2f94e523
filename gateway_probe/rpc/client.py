"""Stateful gateway client for the JSON-RPC tool protocol.

Architectural role:
    Owns the per-query client state (base URL, request-id counter, session
    token) and implements the handshake operations used by the protocol-flow
    strategy in `gateway_probe.core.orchestrator`.

Invocation flow:
    `initialize()` -> `list_tools()` -> `call_tool(name, arguments)`.
    Each envelope is POSTed to the base URL itself.

State rules:
    - Request ids start at 1 and increase by one per envelope, never reused.
    - The session token is negotiated at most once and then attached to every
      request made through `send`.
    - Instances are not safe for concurrent use; build one client per query.

Failure handling:
    - Transport failures -> `TransportError`.
    - Non-200 status or undecodable envelope -> `ProtocolError`.
    - Envelope error object -> `RPCError`.
    - Missing `tools` list -> `ResponseFormatError`.
"""

from dataclasses import dataclass
from typing import Any

from gateway_probe.config.gateway_config import PROTOCOL_VERSION, GatewaySettings
from gateway_probe.core.errors import ProtocolError, ResponseFormatError, SessionError
from gateway_probe.observability.events import EventSink, ProbeEvent, default_sink
from gateway_probe.rpc.envelope import EnvelopeResponse, decode_response, encode_request
from gateway_probe.rpc.session import SessionNegotiator, SessionToken
from gateway_probe.rpc.transport import HttpTransport, Transport, TransportResponse


@dataclass
class ClientState:
    """Mutable state owned by exactly one `GatewayClient`."""

    base_url: str
    next_id: int = 1
    session_token: str = ""
    session_attempted: bool = False


def build_init_params(settings: GatewaySettings) -> dict[str, Any]:
    """Return the fixed initialization parameters for this client identity."""
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {}},
        "clientInfo": {
            "name": settings.client_name,
            "version": settings.client_version,
        },
    }


class GatewayClient:
    """Client for one logical query against one gateway."""

    def __init__(
        self,
        settings: GatewaySettings,
        transport: Transport | None = None,
        events: EventSink | None = None,
    ) -> None:
        self.settings = settings
        self.state = ClientState(base_url=settings.base_url.rstrip("/"))
        self.transport = transport or HttpTransport(timeout=settings.timeout_seconds)
        self.events = events or default_sink()

    @property
    def base_url(self) -> str:
        return self.state.base_url

    @property
    def session_token(self) -> str:
        return self.state.session_token

    def url_for(self, path: str) -> str:
        return self.state.base_url + path

    def next_id(self) -> int:
        request_id = self.state.next_id
        self.state.next_id += 1
        return request_id

    # =========================================================
    # TRANSPORT
    # =========================================================

    def send(self, method: str, url: str, body: bytes | None = None) -> TransportResponse:
        """Send through the transport with the current session token attached."""
        return self.transport.send(method, url, body, session_token=self.state.session_token)

    def send_envelope(self, method: str, params: Any) -> EnvelopeResponse:
        """POST one JSON-RPC envelope to the base URL and decode the reply.

        Raises:
            TransportError: No HTTP response.
            ProtocolError: Non-200 status or malformed envelope.
        """
        request_id = self.next_id()
        payload = encode_request(method, params, request_id)
        self.events.emit(ProbeEvent("rpc_request_body", {"id": request_id, "body": payload.decode("utf-8")}))

        response = self.send("POST", self.state.base_url, payload)
        self.events.emit(ProbeEvent("rpc_response_body", {"status": response.status_code, "body": response.text}))

        if response.status_code != 200:
            raise ProtocolError(f"HTTP error {response.status_code}: {response.text}", response.status_code)

        envelope = decode_response(response.body)
        if envelope.id is not None and envelope.id != request_id:
            self.events.emit(
                ProbeEvent("response_id_mismatch", {"method": method, "expected": request_id, "received": envelope.id})
            )
        return envelope

    # =========================================================
    # SESSION
    # =========================================================

    def negotiate_session(self) -> SessionToken | None:
        """Negotiate a session token once per client.

        Returns:
            The negotiated token, or None if this client already attempted
            negotiation (successfully or not).

        Raises:
            SessionError: When negotiation was attempted and failed.
        """
        if self.state.session_attempted:
            return None
        self.state.session_attempted = True
        negotiator = SessionNegotiator(
            self.state.base_url,
            self.transport,
            build_init_params(self.settings),
            events=self.events,
        )
        token = negotiator.negotiate()
        self.state.session_token = token.value
        return token

    # =========================================================
    # HANDSHAKE / TOOLS
    # =========================================================

    def initialize(self) -> Any:
        """Best-effort session negotiation followed by the `initialize` call."""
        try:
            self.negotiate_session()
        except SessionError as err:
            self.events.emit(ProbeEvent("session_negotiation_failed", {"error": str(err)}))

        result = self.send_envelope("initialize", build_init_params(self.settings)).unwrap()
        self.events.emit(ProbeEvent("rpc_initialized", {"url": self.state.base_url}))
        return result

    def list_tools(self) -> list[Any]:
        result = self.send_envelope("tools/list", {}).unwrap()
        tools = result.get("tools") if isinstance(result, dict) else None
        if not isinstance(tools, list):
            raise ResponseFormatError("unexpected response format: missing 'tools' list")
        return tools

    def call_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        return self.send_envelope("tools/call", {"name": name, "arguments": arguments}).unwrap()
