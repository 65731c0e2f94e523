import pytest

from conftest import BASE_URL, make_response
from gateway_probe.core.errors import SessionError
from gateway_probe.rpc.session import SESSION_ENDPOINTS, SessionNegotiator, SessionToken

INIT_PARAMS = {
    "protocolVersion": "2024-11-05",
    "capabilities": {"tools": {}},
    "clientInfo": {"name": "gateway-probe", "version": "1.0.0"},
}


@pytest.fixture
def negotiator(transport, sink):
    return SessionNegotiator(BASE_URL, transport, INIT_PARAMS, events=sink)


def test_negotiate_reads_session_id_from_body(negotiator, transport, sink):
    transport.route("POST", "/session", make_response(200, {"sessionId": "s-1", "status": "created"}))

    assert negotiator.negotiate() == SessionToken("s-1", "body")
    assert transport.paths() == [("POST", "/session")]
    assert transport.calls[0]["body"] == {}
    assert "session_established" in sink.names()


def test_negotiate_continues_after_transport_error(negotiator, transport, unreachable):
    transport.route("POST", "/session", unreachable)
    transport.route("POST", "/api/session", make_response(201, "", headers={"X-Session-ID": "h-1"}))

    assert negotiator.negotiate() == SessionToken("h-1", "header")
    assert transport.paths() == [("POST", "/session"), ("POST", "/api/session")]


def test_negotiate_ignores_tokens_on_rejected_status(negotiator, transport):
    transport.route("POST", "/session", make_response(403, {"sessionId": "nope"}))
    transport.route("POST", "/sessions", make_response(200, "", cookies={"sessionId": "c-1"}))

    assert negotiator.negotiate() == SessionToken("c-1", "cookie")


def test_negotiate_falls_through_empty_body_field_to_header(negotiator, transport):
    transport.route(
        "POST",
        "/session",
        make_response(200, {"sessionId": "", "status": "ok"}, headers={"X-Session-ID": "h-2"}),
    )
    assert negotiator.negotiate() == SessionToken("h-2", "header")


def test_negotiate_ignores_unrelated_cookies(negotiator, transport):
    transport.route("POST", "/create-session", make_response(200, "{}", cookies={"other": "x", "session_id": "c-2"}))
    assert negotiator.negotiate() == SessionToken("c-2", "cookie")


def test_negotiate_falls_back_to_initialize(negotiator, transport):
    for endpoint in SESSION_ENDPOINTS:
        transport.route("POST", endpoint, make_response(200, {"status": "ok"}))
    transport.route("POST", "/initialize", make_response(404, "", headers={"X-Session-ID": "init-1"}))

    assert negotiator.negotiate() == SessionToken("init-1", "header")
    assert transport.paths()[-1] == ("POST", "/initialize")
    assert transport.calls[-1]["body"] == INIT_PARAMS


def test_initialize_fallback_does_not_read_body(negotiator, transport):
    transport.route("POST", "/initialize", make_response(200, {"sessionId": "body-only"}))
    with pytest.raises(SessionError, match="could not establish session"):
        negotiator.negotiate()


def test_negotiate_raises_after_all_sources_exhausted(negotiator, transport):
    with pytest.raises(SessionError):
        negotiator.negotiate()
    assert [path for _, path in transport.paths()] == list(SESSION_ENDPOINTS) + ["/initialize"]


def test_initialize_transport_error_raises_session_error(negotiator, transport, unreachable):
    transport.route("POST", "/initialize", unreachable)
    with pytest.raises(SessionError, match="failed to send initialization request"):
        negotiator.initialize_with_session()


def test_deeply_nested_session_body_is_not_a_token(negotiator, transport):
    transport.route(
        "POST",
        "/session",
        make_response(200, b"[" * 200000 + b"]" * 200000, headers={"X-Session-ID": "h-3"}),
    )
    assert negotiator.negotiate() == SessionToken("h-3", "header")
