"""HTTP transport for gateway probing.

Architectural role:
    Issues one HTTP request per call and materializes the full response so the
    higher layers can inspect status, body, headers, and cookies without holding
    a live connection.

Retry behavior:
    No retry loop is implemented. Retry is expressed only as "try the next
    endpoint" in `gateway_probe.core.orchestrator`.

Timeout:
    `requests` applies `timeout` to each socket operation. The body is
    streamed in chunks and checked against a whole-call deadline of the same
    length, so a server trickling bytes cannot hold a call open indefinitely.

Resource handling:
    The body is always read in full and the response closed before `send`
    returns, regardless of status code. A single `requests.Session` is shared
    process-wide so sequential clients reuse pooled connections. Its cookie
    jar rejects every cookie: session cookies are reported per response and
    never replayed to later clients.

Failure handling model:
    Any `requests.exceptions.RequestException` (DNS, connect, timeout, ...)
    and an exceeded call deadline become `TransportError`. HTTP error statuses
    are returned, not raised.
"""

import time
from dataclasses import dataclass, field
from http.cookiejar import DefaultCookiePolicy
from typing import Callable, Protocol

import requests
from requests.structures import CaseInsensitiveDict

from gateway_probe.config.gateway_config import DEFAULT_TIMEOUT_SECONDS
from gateway_probe.core.errors import TransportError

SESSION_HEADER_NAMES = ("X-Session-ID", "Session-ID")

_CHUNK_SIZE = 64 * 1024

_SHARED_SESSION: requests.Session | None = None
@dataclass(frozen=True)
class TransportResponse:
    """Fully drained HTTP response."""

    status_code: int
    body: bytes = b""
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    cookies: dict[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport(Protocol):
    """Interface consumed by the session negotiator and gateway client."""

    def send(
        self,
        method: str,
        url: str,
        body: bytes | None = None,
        session_token: str = "",
    ) -> TransportResponse:
        ...


def build_headers(session_token: str = "") -> dict[str, str]:
    """Return request headers, including both session aliases when a token exists."""
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    if session_token:
        for name in SESSION_HEADER_NAMES:
            headers[name] = session_token
    return headers


def shared_session() -> requests.Session:
    """Return the lazily created process-wide `requests.Session`."""
    global _SHARED_SESSION
    if _SHARED_SESSION is None:
        session = requests.Session()
        session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        _SHARED_SESSION = session
    return _SHARED_SESSION


class HttpTransport:
    """`requests`-backed transport with a fixed per-call timeout."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout = timeout
        self._session = session
        self._clock = clock

    @property
    def session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        return shared_session()

    def send(
        self,
        method: str,
        url: str,
        body: bytes | None = None,
        session_token: str = "",
    ) -> TransportResponse:
        """Send one request and return the drained response.

        Args:
            method: `GET` or `POST`.
            url: Absolute request URL.
            body: Optional raw JSON body.
            session_token: Negotiated session token, or empty.

        Raises:
            TransportError: When no complete HTTP response was received
                within the timeout.
        """
        deadline = self._clock() + self.timeout
        try:
            with self.session.request(
                method,
                url,
                data=body,
                headers=build_headers(session_token),
                timeout=self.timeout,
                stream=True,
            ) as response:
                chunks = []
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if self._clock() > deadline:
                        raise TransportError(f"{method} {url} failed: timed out after {self.timeout}s")
                    chunks.append(chunk)
                return TransportResponse(
                    status_code=response.status_code,
                    body=b"".join(chunks),
                    headers=CaseInsensitiveDict(response.headers),
                    cookies={cookie.name: cookie.value for cookie in response.cookies},
                )
        except requests.exceptions.RequestException as err:
            raise TransportError(f"{method} {url} failed: {err}") from err
