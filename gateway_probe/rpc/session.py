"""Session-token negotiation.

Negotiation flow:
    1. POST `{}` to each session endpoint in `SESSION_ENDPOINTS` order. Transport
       failures move on to the next endpoint.
    2. On HTTP 200/201, look for a token in the body (`sessionId`), then the
       `X-Session-ID` header, then a `session_id`/`sessionId` cookie.
    3. If no endpoint yields a token, POST the initialization payload to
       `/initialize` and check that single response's header and cookies,
       whatever its status.

Failure handling:
    `SessionError` is raised only after both phases are exhausted. Callers treat
    it as non-fatal because some gateways need no session at all.
"""

import json
from dataclasses import dataclass
from typing import Any

from gateway_probe.core.errors import SessionError, TransportError
from gateway_probe.observability.events import EventSink, ProbeEvent, default_sink
from gateway_probe.rpc.transport import Transport, TransportResponse

SESSION_ENDPOINTS = ("/session", "/api/session", "/sessions", "/create-session")
INITIALIZE_ENDPOINT = "/initialize"

SESSION_ID_FIELD = "sessionId"
SESSION_ID_HEADER = "X-Session-ID"
SESSION_COOKIE_NAMES = ("session_id", "sessionId")

_ACCEPTED_STATUSES = (200, 201)


@dataclass(frozen=True)
class SessionToken:
    """Negotiated token and where it was found (`body`, `header`, `cookie`)."""

    value: str
    source: str


def token_from_body(body: bytes) -> SessionToken | None:
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None
    value = data.get(SESSION_ID_FIELD)
    if isinstance(value, str) and value:
        return SessionToken(value, "body")
    return None


def token_from_header(response: TransportResponse) -> SessionToken | None:
    value = response.headers.get(SESSION_ID_HEADER)
    if value:
        return SessionToken(value, "header")
    return None


def token_from_cookies(response: TransportResponse) -> SessionToken | None:
    for name, value in response.cookies.items():
        if name in SESSION_COOKIE_NAMES and value:
            return SessionToken(value, "cookie")
    return None


class SessionNegotiator:
    """Obtain a session token from a gateway with unknown session conventions."""

    def __init__(
        self,
        base_url: str,
        transport: Transport,
        init_params: dict[str, Any],
        events: EventSink | None = None,
    ) -> None:
        self.base_url = base_url
        self.transport = transport
        self.init_params = init_params
        self.events = events or default_sink()

    def negotiate(self) -> SessionToken:
        """Try every session endpoint, then the initialization fallback.

        Raises:
            SessionError: If neither phase produced a token.
        """
        for endpoint in SESSION_ENDPOINTS:
            url = self.base_url + endpoint
            self.events.emit(ProbeEvent("session_attempt", {"url": url}))
            try:
                response = self.transport.send("POST", url, b"{}")
            except TransportError as err:
                self.events.emit(ProbeEvent("session_attempt_failed", {"url": url, "error": str(err)}))
                continue

            self.events.emit(
                ProbeEvent("session_response_body", {"status": response.status_code, "body": response.text})
            )
            if response.status_code not in _ACCEPTED_STATUSES:
                continue

            token = (
                token_from_body(response.body)
                or token_from_header(response)
                or token_from_cookies(response)
            )
            if token is not None:
                self.events.emit(ProbeEvent("session_established", {"url": url, "source": token.source}))
                return token

        return self.initialize_with_session()

    def initialize_with_session(self) -> SessionToken:
        """Extract a session token from the initialization handshake response."""
        url = self.base_url + INITIALIZE_ENDPOINT
        body = json.dumps(self.init_params, separators=(",", ":")).encode("utf-8")
        try:
            response = self.transport.send("POST", url, body)
        except TransportError as err:
            raise SessionError(f"failed to send initialization request: {err}") from err

        self.events.emit(
            ProbeEvent("initialize_response_body", {"status": response.status_code, "body": response.text})
        )
        token = token_from_header(response) or token_from_cookies(response)
        if token is None:
            raise SessionError("could not establish session")
        self.events.emit(ProbeEvent("session_established", {"url": url, "source": token.source}))
        return token
