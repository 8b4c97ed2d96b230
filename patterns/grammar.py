# patterns/grammar.py
"""
Pattern template compiler.

A template is literal text with typed extractors delimited by ``@``::

    user @STRING:user@ logged in from @IPv4:ip@
    port @NUMBER(min=1,max=65535):port@ closed
    mail @@ @STRING:host@

``@@`` stands for a literal ``@``. Compilation produces an ordered tuple of
`Literal` and `Extractor` tokens; adjacent literal runs are merged.
"""

import re
from dataclasses import dataclass, field
from typing import Union

from .errors import CompileError, CompileErrorKind
from .fields import FieldKind

DELIMITER = "@"

_FIELD_RE = re.compile(
    r"^(?P<kind>[A-Za-z0-9]+)(?:\((?P<args>[^()]*)\))?:(?P<name>[A-Za-z_][A-Za-z0-9_.\-]*)$"
)
_KINDS = {kind.value: kind for kind in FieldKind}


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Extractor:
    kind: FieldKind
    name: str
    constraints: tuple[tuple[str, int], ...] = ()

    @property
    def bounds(self) -> dict[str, int]:
        return dict(self.constraints)


FieldToken = Union[Literal, Extractor]


@dataclass(frozen=True)
class CompiledPattern:
    """Immutable matcher program derived from one template."""

    source: str
    tokens: tuple[FieldToken, ...]
    literal_length: int = field(init=False)

    def __post_init__(self):
        total = sum(len(t.text) for t in self.tokens if isinstance(t, Literal))
        object.__setattr__(self, "literal_length", total)

    @property
    def leading_literal(self) -> str | None:
        if self.tokens and isinstance(self.tokens[0], Literal):
            return self.tokens[0].text
        return None

    @property
    def field_names(self) -> list[str]:
        return [t.name for t in self.tokens if isinstance(t, Extractor)]


def _parse_constraints(kind: FieldKind, args: str | None, position: int) -> tuple[tuple[str, int], ...]:
    if args is None or not args.strip():
        return ()

    parsed: dict[str, int] = {}
    for item in args.split(","):
        key, sep, raw = item.partition("=")
        key, raw = key.strip(), raw.strip()
        if not sep or not key:
            raise CompileError(CompileErrorKind.SYNTAX, f"malformed constraint {item.strip()!r}", position)
        if key not in kind.constraint_keys:
            raise CompileError(
                CompileErrorKind.SYNTAX,
                f"constraint {key!r} not supported by {kind.value}",
                position,
            )
        if key in parsed:
            raise CompileError(CompileErrorKind.SYNTAX, f"constraint {key!r} given twice", position)
        try:
            parsed[key] = int(raw)
        except ValueError:
            raise CompileError(
                CompileErrorKind.SYNTAX, f"constraint {key!r} needs an integer, got {raw!r}", position
            ) from None

    for lo_key, hi_key in (("min", "max"), ("min_len", "max_len")):
        if lo_key in parsed and hi_key in parsed and parsed[lo_key] > parsed[hi_key]:
            raise CompileError(CompileErrorKind.SYNTAX, f"{lo_key} is greater than {hi_key}", position)

    return tuple(sorted(parsed.items()))


def _parse_extractor(body: str, position: int) -> Extractor:
    m = _FIELD_RE.match(body)
    if not m:
        raise CompileError(CompileErrorKind.SYNTAX, f"malformed field {body!r}", position)
    kind = _KINDS.get(m.group("kind"))
    if kind is None:
        raise CompileError(CompileErrorKind.SYNTAX, f"unknown field kind {m.group('kind')!r}", position)
    return Extractor(
        kind=kind,
        name=m.group("name"),
        constraints=_parse_constraints(kind, m.group("args"), position),
    )


def compile_pattern(template: str) -> CompiledPattern:
    """
    Compile `template` into a CompiledPattern.

    Raises CompileError (SYNTAX or DUPLICATE_FIELD).
    """
    if not template:
        raise CompileError(CompileErrorKind.SYNTAX, "empty pattern", 0)

    tokens: list[FieldToken] = []
    literal: list[str] = []
    seen: set[str] = set()
    pos = 0

    def flush():
        text = "".join(literal)
        if text:
            tokens.append(Literal(text))
        literal.clear()

    while pos < len(template):
        at = template.find(DELIMITER, pos)
        if at == -1:
            literal.append(template[pos:])
            break

        literal.append(template[pos:at])
        if template.startswith(DELIMITER * 2, at):
            literal.append(DELIMITER)
            pos = at + 2
            continue

        close = template.find(DELIMITER, at + 1)
        if close == -1:
            raise CompileError(CompileErrorKind.SYNTAX, "unterminated field", at)

        extractor = _parse_extractor(template[at + 1 : close], at)
        if extractor.name in seen:
            raise CompileError(
                CompileErrorKind.DUPLICATE_FIELD, f"field {extractor.name!r} bound twice", at
            )
        seen.add(extractor.name)

        flush()
        tokens.append(extractor)
        pos = close + 1

    flush()
    return CompiledPattern(source=template, tokens=tuple(tokens))
