import json
from typing import Any, Callable

import pytest
from requests.structures import CaseInsensitiveDict

from gateway_probe.config.gateway_config import GatewaySettings
from gateway_probe.core.errors import TransportError
from gateway_probe.rpc.client import GatewayClient
from gateway_probe.rpc.transport import TransportResponse

BASE_URL = "http://gateway.test"


def make_response(
    status: int = 200,
    body: Any = b"",
    headers: dict[str, str] | None = None,
    cookies: dict[str, str] | None = None,
) -> TransportResponse:
    if isinstance(body, (dict, list)):
        body = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        body = body.encode("utf-8")
    return TransportResponse(
        status_code=status,
        body=body,
        headers=CaseInsensitiveDict(headers or {}),
        cookies=cookies or {},
    )


def rpc_result(request_id: int, result: Any) -> TransportResponse:
    return make_response(200, {"jsonrpc": "2.0", "id": request_id, "result": result})


class FakeTransport:
    """Scripted transport keyed by (method, path). Unrouted requests get a 404."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[dict[str, Any]] = []

    def route(self, method: str, path: str, handler: TransportResponse | Exception | Callable) -> None:
        self.routes[(method, path)] = handler

    def send(self, method, url, body=None, session_token=""):
        assert url.startswith(BASE_URL)
        path = url[len(BASE_URL):].split("?", 1)[0]
        decoded = json.loads(body) if body else None
        self.calls.append(
            {"method": method, "url": url, "path": path, "body": decoded, "session_token": session_token}
        )
        handler = self.routes.get((method, path))
        if handler is None:
            return make_response(404, "not found")
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler(decoded)
        return handler

    def paths(self) -> list[tuple[str, str]]:
        return [(call["method"], call["path"]) for call in self.calls]

    def rpc_methods(self) -> list[str]:
        return [call["body"]["method"] for call in self.calls if call["path"] == "" and call["body"]]


class RecordingSink:
    def __init__(self) -> None:
        self.events = []

    def emit(self, event) -> None:
        self.events.append(event)

    def names(self) -> list[str]:
        return [event.name for event in self.events]


def rpc_handler(results: dict[str, Any]) -> Callable:
    """JSON-RPC endpoint answering each method from `results` (value or callable)."""

    def handle(request):
        method = request["method"]
        if method not in results:
            return make_response(
                200,
                {"jsonrpc": "2.0", "id": request["id"], "error": {"code": -32601, "message": "Method not found"}},
            )
        value = results[method]
        if isinstance(value, TransportResponse):
            return value
        if callable(value):
            value = value(request)
        return rpc_result(request["id"], value)

    return handle


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def settings() -> GatewaySettings:
    return GatewaySettings(base_url=BASE_URL, timeout_seconds=5)


@pytest.fixture
def client(settings, transport, sink) -> GatewayClient:
    return GatewayClient(settings, transport=transport, events=sink)


@pytest.fixture
def unreachable() -> TransportError:
    return TransportError("connection refused")
