"""Heuristic answer extraction from decoded JSON values.

Matching order:
    1. First non-empty string under `TEXT_FIELDS`, in list order.
    2. `content[0].text` when `content` is a non-empty list whose first element
       is an object with a string `text`.
    3. Pretty-printed JSON of the whole value.

Totality:
    `extract_text` never raises for JSON-compatible input and is deterministic.
    Unrecognized shapes degrade to the pretty-printed value.
"""

import json
from typing import Any, Callable

from gateway_probe.core.strategy_types import RawText, StructuredField

TEXT_FIELDS = ("text", "response", "answer", "result", "output", "message", "content")

Matcher = Callable[[Any], StructuredField | None]


def _match_text_field(value: Any) -> StructuredField | None:
    if not isinstance(value, dict):
        return None
    for key in TEXT_FIELDS:
        candidate = value.get(key)
        if isinstance(candidate, str) and candidate:
            return StructuredField(candidate, field=key)
    return None


def _match_nested_content(value: Any) -> StructuredField | None:
    if not isinstance(value, dict):
        return None
    content = value.get("content")
    if not isinstance(content, list) or not content:
        return None
    first = content[0]
    if isinstance(first, dict) and isinstance(first.get("text"), str):
        return StructuredField(first["text"], field="content[0].text")
    return None


MATCHERS: tuple[Matcher, ...] = (_match_text_field, _match_nested_content)


def pretty_json(value: Any) -> str:
    return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False, default=str)


def match(value: Any) -> StructuredField:
    """Run the matcher chain, falling back to the pretty-printed value."""
    for matcher in MATCHERS:
        found = matcher(value)
        if found is not None:
            return found
    return StructuredField(pretty_json(value))


def extract_text(value: Any) -> str:
    """Return the most plausible answer text contained in `value`."""
    return match(value).text


def classify_payload(body: bytes, source: str = "") -> RawText | StructuredField:
    """Classify a raw HTTP body from a direct chat endpoint.

    JSON object bodies go through the matcher chain. Anything else (invalid
    JSON, arrays, scalars) or an object whose match is an empty string is
    returned verbatim as `RawText`.
    """
    raw = body.decode("utf-8", errors="replace")
    try:
        decoded = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        return RawText(raw, source=source)
    if not isinstance(decoded, dict):
        return RawText(raw, source=source)

    found = match(decoded)
    if not found.text:
        return RawText(raw, source=source)
    return StructuredField(found.text, field=found.field, source=source)
