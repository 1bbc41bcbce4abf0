"""Input Sanitizer — whitelist filtering and numeric parsing for untrusted query text.

Invariants:
    - Only [A-Za-z0-9 '-] survive sanitize_text(); every other run becomes one space
    - sanitize_text() is idempotent: sanitize_text(sanitize_text(x)) == sanitize_text(x)
    - clamp() never raises; parse_int() raises ValueError on anything but a whole number
    - No function here knows about HTTP, pydantic or the store

Design Decisions:
    - Strip, don't escape: downstream matching never sees a character that
      could mean something to a query language (LIKE wildcards still get
      escaped by the predicate layer for correctness)
    - Replace-with-space over delete: "O'Brien<script>" reads as "O'Brien script",
      not "O'Brienscript"
"""

import re
from collections.abc import Iterable

_DISALLOWED = re.compile(r"[^A-Za-z0-9 '\-]+")
_WHITESPACE = re.compile(r" {2,}")
_INTEGER = re.compile(r"[+-]?[0-9]+")


def sanitize_text(value: str) -> str:
    """Whitelist-filter free text. Pure, deterministic, idempotent."""
    cleaned = _DISALLOWED.sub(" ", value)
    return _WHITESPACE.sub(" ", cleaned).strip()


def sanitize_values(values: Iterable[str]) -> list[str]:
    """Sanitize each value, dropping the ones that end up empty."""
    return [s for s in (sanitize_text(v) for v in values) if s]


def split_multi_value(values: Iterable[str]) -> list[str]:
    """Flatten repeated and comma-separated parameter values."""
    parts: list[str] = []
    for value in values:
        parts.extend(p for p in value.split(",") if p.strip())
    return parts


def parse_int(value: str) -> int:
    """Parse a whole number, tolerating surrounding whitespace."""
    text = value.strip()
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"not an integer: {value!r}")
    return int(text)


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))
