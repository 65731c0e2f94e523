"""JSON-RPC envelope shapes and codec.

Wire format:
    Request:  {"jsonrpc": "2.0", "id": <int>, "method": <str>, "params": <any>}
    Response: {"jsonrpc": "2.0", "id": <int>, "result": <any>} or
              {"jsonrpc": "2.0", "id": <int>, "error": {"code", "message", "data"?}}

Failure behavior:
    Decoding never partially trusts a payload. Invalid JSON, a non-object
    top level, a non-object `error` member, or a wrong-typed `id`, `jsonrpc`,
    `error.code`, or `error.message` raise `ProtocolError`; the calling
    strategy decides whether to move on to another endpoint.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable

from gateway_probe.core.errors import ProtocolError, RPCError

JSONRPC_VERSION = "2.0"


@dataclass(frozen=True)
class EnvelopeRequest:
    id: int
    method: str
    params: Any = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "method": self.method,
            "params": self.params,
        }


@dataclass(frozen=True)
class EnvelopeError:
    code: int
    message: str
    data: Any = None

    def to_exception(self) -> RPCError:
        return RPCError(self.code, self.message, self.data)


@dataclass(frozen=True)
class EnvelopeResponse:
    """Decoded response envelope.

    `id` is None when the server omitted it. `error` is None on success.
    """

    id: int | None
    result: Any = None
    error: EnvelopeError | None = None
    jsonrpc: str = JSONRPC_VERSION

    def unwrap(self) -> Any:
        """Return `result`, or raise the envelope's error as `RPCError`."""
        if self.error is not None:
            raise self.error.to_exception()
        return self.result


def encode_request(method: str, params: Any, request_id: int) -> bytes:
    """Serialize one request envelope to UTF-8 JSON bytes."""
    request = EnvelopeRequest(id=request_id, method=method, params=params)
    return json.dumps(request.to_dict(), separators=(",", ":")).encode("utf-8")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _typed_member(container: dict, key: str, check: Callable[[Any], bool], expected: str) -> Any:
    """Return `container[key]`, or None when absent/null; reject other types."""
    value = container.get(key)
    if value is not None and not check(value):
        raise ProtocolError(f"failed to unmarshal response: {key!r} must be {expected}, got {value!r}")
    return value


def _decode_error(raw: Any) -> EnvelopeError | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ProtocolError(f"malformed error member in response: {raw!r}")
    code = _typed_member(raw, "code", _is_int, "an integer")
    message = _typed_member(raw, "message", lambda value: isinstance(value, str), "a string")
    return EnvelopeError(
        code=code if code is not None else 0,
        message=message or "",
        data=raw.get("data"),
    )


def decode_response(payload: bytes) -> EnvelopeResponse:
    """Parse a response envelope.

    Args:
        payload: Raw HTTP body.

    Returns:
        `EnvelopeResponse` with `result` and `error` as sent by the server.

    Raises:
        ProtocolError: On invalid JSON, a non-object envelope, or a member of
            the wrong type (`id`, `jsonrpc`, `error.code`, `error.message`).
            Absent or null members are accepted.
    """
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        raise ProtocolError(f"failed to unmarshal response: {exc}") from exc

    if not isinstance(data, dict):
        raise ProtocolError(f"response envelope must be a JSON object, got {type(data).__name__}")

    response_id = _typed_member(data, "id", _is_int, "an integer")
    jsonrpc = _typed_member(data, "jsonrpc", lambda value: isinstance(value, str), "a string")
    return EnvelopeResponse(
        id=response_id,
        result=data.get("result"),
        error=_decode_error(data.get("error")),
        jsonrpc=jsonrpc or JSONRPC_VERSION,
    )
