# patterns/fields.py
import ipaddress
import string
from enum import Enum

from dateutil import parser as dtp


class FieldKind(str, Enum):
    """
    Closed vocabulary of typed extractors.

    Every kind knows how far it may greedily consume from a position and which
    constraint keys it accepts. There is no registry: adding a kind means
    adding a member here and a branch in `scan` / `is_valid`.
    """

    NUMBER = "NUMBER"
    STRING = "STRING"
    IPV4 = "IPv4"
    IPV6 = "IPv6"
    TIMESTAMP = "TIMESTAMP"
    ANY = "ANY"

    @property
    def constraint_keys(self) -> frozenset[str]:
        return _CONSTRAINT_KEYS[self]


_LENGTH_KEYS = frozenset({"min_len", "max_len"})

_CONSTRAINT_KEYS: dict[FieldKind, frozenset[str]] = {
    FieldKind.NUMBER: frozenset({"min", "max"}),
    FieldKind.STRING: _LENGTH_KEYS,
    FieldKind.IPV4: frozenset(),
    FieldKind.IPV6: frozenset(),
    FieldKind.TIMESTAMP: frozenset(),
    FieldKind.ANY: _LENGTH_KEYS,
}

_DIGITS = frozenset(string.digits)
_IPV4_CHARS = _DIGITS | {"."}
_IPV6_CHARS = frozenset(string.hexdigits) | {":", "."}
_TIMESTAMP_CHARS = _DIGITS | frozenset("-:.+TZ")
_STRING_EXTRA = frozenset("_-.")


def _run(text: str, pos: int, allowed) -> int:
    end = pos
    while end < len(text) and text[end] in allowed:
        end += 1
    return end


def _string_run(text: str, pos: int) -> int:
    end = pos
    while end < len(text) and (text[end].isalnum() or text[end] in _STRING_EXTRA):
        end += 1
    return end


def scan(kind: FieldKind, text: str, pos: int, stop: str | None = None) -> int:
    """
    Return the end index of the maximal run `kind` accepts starting at `pos`.

    `stop` is the first character of the literal that follows the extractor;
    only ANY looks at it. A return value equal to `pos` means nothing matched.
    """
    if kind is FieldKind.NUMBER:
        start = pos + 1 if text.startswith("-", pos) else pos
        end = _run(text, start, _DIGITS)
        return end if end > start else pos
    if kind is FieldKind.STRING:
        return _string_run(text, pos)
    if kind is FieldKind.IPV4:
        return _run(text, pos, _IPV4_CHARS)
    if kind is FieldKind.IPV6:
        return _run(text, pos, _IPV6_CHARS)
    if kind is FieldKind.TIMESTAMP:
        return _run(text, pos, _TIMESTAMP_CHARS)
    if kind is FieldKind.ANY:
        if stop is None:
            return len(text)
        end = text.find(stop, pos)
        return len(text) if end == -1 else end
    raise ValueError(f"Unhandled field kind: {kind!r}")


def is_valid(kind: FieldKind, value: str) -> bool:
    """Kind-level validity of a consumed run (independent of constraints)."""
    if kind is FieldKind.IPV4:
        try:
            ipaddress.IPv4Address(value)
        except ValueError:
            return False
        return True
    if kind is FieldKind.IPV6:
        try:
            ipaddress.IPv6Address(value)
        except ValueError:
            return False
        return True
    if kind is FieldKind.TIMESTAMP:
        try:
            dtp.isoparse(value)
        except (ValueError, OverflowError):
            return False
        return True
    return True


def _compare_number(value: str, bound: int) -> int:
    """Sign of value - bound, without int() on arbitrarily long digit runs."""
    negative = value.startswith("-")
    digits = value.lstrip("-").lstrip("0")
    bound_digits = str(abs(bound))
    if digits and len(digits) > len(bound_digits):
        # more digits than the bound: magnitude alone decides
        return -1 if negative else 1
    number = -int(digits or "0") if negative else int(digits or "0")
    return (number > bound) - (number < bound)


def satisfies(kind: FieldKind, value: str, constraints: dict[str, int]) -> bool:
    """Check declared constraints (numeric range or length bounds)."""
    if not constraints:
        return True
    if kind is FieldKind.NUMBER:
        lo = constraints.get("min")
        hi = constraints.get("max")
        return (lo is None or _compare_number(value, lo) >= 0) and (
            hi is None or _compare_number(value, hi) <= 0
        )
    lo = constraints.get("min_len")
    hi = constraints.get("max_len")
    return (lo is None or len(value) >= lo) and (hi is None or len(value) <= hi)
