"""Tagged result variants produced by probing strategies.

Control-flow interaction:
    Strategies return `RawText` or `StructuredField` on success and `Exhausted`
    when every endpoint they own has been tried. `gather_information` stops at the
    first non-`Exhausted` outcome and returns its `text`.

Determinism:
    Purely structural, no behavior beyond field access.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RawText:
    """Body returned verbatim because no recognizable structure was found."""

    text: str
    source: str = ""


@dataclass(frozen=True)
class StructuredField:
    """Text located inside a decoded JSON value.

    Attributes:
        text: Extracted answer.
        field: Matched key, `content[0].text` for nested content, or `""` when
            the whole value was pretty-printed.
        source: URL or strategy label that produced the value.
    """

    text: str
    field: str = ""
    source: str = ""


@dataclass(frozen=True)
class Exhausted:
    """A strategy ran out of endpoints. `reason` is the last failure seen."""

    strategy: str
    reason: str = ""


StrategyOutcome = RawText | StructuredField | Exhausted
