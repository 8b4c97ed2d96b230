# patterns/loader.py
"""
Build a PatternRepository from weakly-typed records (dicts decoded from a
pattern file).

Each record is checked against a small per-field schema. A failing required
field drops only that record; a malformed optional field is reported and
replaced by its empty default. Nothing here raises for bad input: every
anomaly comes back as a Diagnostic next to the repository.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any
from uuid import UUID

from .errors import CompileError, CompileErrorKind, LoadError
from .grammar import compile_pattern
from .model import Pattern, PatternRepository, TestMessage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    record_index: int
    error: LoadError
    field: str
    message: str
    name: str | None = None
    uuid: str | None = None
    compile_error: CompileErrorKind | None = None
    skipped: bool = True

    def __str__(self) -> str:
        who = self.name or self.uuid or f"record #{self.record_index}"
        return f"{who}: {self.error.value}({self.field}): {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_index": self.record_index,
            "error": self.error.value,
            "field": self.field,
            "message": self.message,
            "name": self.name,
            "uuid": self.uuid,
            "compile_error": self.compile_error.value if self.compile_error else None,
            "skipped": self.skipped,
        }


class FieldFailure(Exception):
    """Raised by a field converter; turned into a Diagnostic by the fold."""

    def __init__(self, error: LoadError, message: str, compile_error: CompileErrorKind | None = None):
        super().__init__(message)
        self.error = error
        self.message = message
        self.compile_error = compile_error


@dataclass(frozen=True)
class FieldSpec:
    key: str
    convert: Callable[[Any], Any]
    required: bool = False
    default: Callable[[], Any] | None = None


# ----- converters -----


def _to_name(value: Any) -> str:
    if not isinstance(value, str):
        raise FieldFailure(LoadError.TYPE_MISMATCH, f"expected a string, got {type(value).__name__}")
    if not value.strip():
        raise FieldFailure(LoadError.MISSING_FIELD, "name is empty")
    return value


def _to_uuid(value: Any) -> UUID:
    # unparsable uuids are reported exactly like absent ones
    if not isinstance(value, str):
        raise FieldFailure(LoadError.MISSING_FIELD, f"invalid uuid {value!r}: not a string")
    try:
        parsed = UUID(value)
    except ValueError as e:
        raise FieldFailure(LoadError.MISSING_FIELD, f"invalid uuid {value!r}: {e}") from None
    if str(parsed) != value.lower():
        raise FieldFailure(LoadError.MISSING_FIELD, f"invalid uuid {value!r}: not in canonical form")
    return parsed


def _to_program(value: Any):
    if not isinstance(value, str):
        raise FieldFailure(LoadError.MISSING_FIELD, f"invalid pattern {value!r}: not a string")
    try:
        return compile_pattern(value)
    except CompileError as e:
        raise FieldFailure(LoadError.MISSING_FIELD, f"invalid pattern {value!r}: {e}", e.kind) from None


def _to_string_map(value: Any) -> Mapping[str, str]:
    if not isinstance(value, Mapping):
        raise FieldFailure(LoadError.TYPE_MISMATCH, f"expected a mapping, got {type(value).__name__}")
    for k, v in value.items():
        if not isinstance(k, str) or not isinstance(v, str):
            raise FieldFailure(LoadError.TYPE_MISMATCH, f"entry {k!r}: {v!r} is not string to string")
    return MappingProxyType(dict(value))


def _to_tags(value: Any) -> frozenset[str]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise FieldFailure(LoadError.TYPE_MISMATCH, f"expected a list of strings, got {type(value).__name__}")
    tags = list(value)
    for tag in tags:
        if not isinstance(tag, str):
            raise FieldFailure(LoadError.TYPE_MISMATCH, f"tag {tag!r} is not a string")
    return frozenset(tags)


def _to_test_message(value: Any, index: int) -> TestMessage:
    if not isinstance(value, Mapping):
        raise FieldFailure(LoadError.TYPE_MISMATCH, f"test message #{index} is not a mapping")
    text = value.get("message", value.get("text"))
    if not isinstance(text, str):
        raise FieldFailure(LoadError.TYPE_MISMATCH, f"test message #{index} has no message text")
    try:
        expected = _to_string_map(value.get("values", {}))
        tags = _to_tags(value["tags"]) if value.get("tags") is not None else None
    except FieldFailure as e:
        raise FieldFailure(e.error, f"test message #{index}: {e.message}") from None
    return TestMessage(raw_text=text, expected_values=expected, expected_tags=tags)


def _to_test_messages(value: Any) -> tuple[TestMessage, ...]:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise FieldFailure(LoadError.TYPE_MISMATCH, f"expected a list, got {type(value).__name__}")
    return tuple(_to_test_message(item, i) for i, item in enumerate(value))


PATTERN_SCHEMA: tuple[FieldSpec, ...] = (
    FieldSpec("name", _to_name, required=True),
    FieldSpec("uuid", _to_uuid, required=True),
    FieldSpec("pattern", _to_program, required=True),
    FieldSpec("values", _to_string_map, default=lambda: MappingProxyType({})),
    FieldSpec("tags", _to_tags, default=frozenset),
    FieldSpec("test_messages", _to_test_messages, default=tuple),
)


# ----- fold -----


def _label(record: Mapping[str, Any], key: str) -> str | None:
    value = record.get(key)
    return value if isinstance(value, str) else None


def build_pattern(record: Any, index: int = 0) -> tuple[Pattern | None, list[Diagnostic]]:
    """
    Run the schema over one record.

    Returns the Pattern (or None when a required field failed) together with
    every diagnostic collected on the way; all fields are checked even after
    the first failure.
    """
    if not isinstance(record, Mapping):
        return None, [
            Diagnostic(
                record_index=index,
                error=LoadError.TYPE_MISMATCH,
                field="record",
                message=f"expected a mapping, got {type(record).__name__}",
            )
        ]

    name, uuid = _label(record, "name"), _label(record, "uuid")
    values: dict[str, Any] = {}
    diagnostics: list[Diagnostic] = []
    rejected = False

    for spec in PATTERN_SCHEMA:
        raw = record.get(spec.key)
        if raw is None:
            if spec.required:
                rejected = True
                diagnostics.append(
                    Diagnostic(
                        index, LoadError.MISSING_FIELD, spec.key, f"missing field {spec.key!r}", name, uuid
                    )
                )
            else:
                values[spec.key] = spec.default()
            continue

        try:
            values[spec.key] = spec.convert(raw)
        except FieldFailure as failure:
            rejected = rejected or spec.required
            diagnostics.append(
                Diagnostic(
                    record_index=index,
                    error=failure.error,
                    field=spec.key,
                    message=failure.message,
                    name=name,
                    uuid=uuid,
                    compile_error=failure.compile_error,
                    skipped=spec.required,
                )
            )
            if not spec.required:
                values[spec.key] = spec.default()

    if rejected:
        # optional-field diagnostics of a dropped record are moot: mark them skipped too
        return None, [d if d.skipped else replace(d, skipped=True) for d in diagnostics]

    pattern = Pattern(
        name=values["name"],
        uuid=values["uuid"],
        compiled=values["pattern"],
        default_values=values["values"],
        tags=values["tags"],
        test_messages=values["test_messages"],
    )
    return pattern, diagnostics


def load_patterns(records: Iterable[Any]) -> tuple[PatternRepository, list[Diagnostic]]:
    """
    Build a repository from raw records.

    Bad records are left out and reported; the load itself never fails.
    A uuid seen twice keeps the first pattern.
    """
    patterns: dict[UUID, Pattern] = {}
    diagnostics: list[Diagnostic] = []
    total = 0

    for index, record in enumerate(records):
        total += 1
        pattern, problems = build_pattern(record, index)
        diagnostics.extend(problems)
        if pattern is None:
            continue
        if pattern.uuid in patterns:
            diagnostics.append(
                Diagnostic(
                    record_index=index,
                    error=LoadError.DUPLICATE_UUID,
                    field="uuid",
                    message=f"uuid already used by pattern {patterns[pattern.uuid].name!r}",
                    name=pattern.name,
                    uuid=str(pattern.uuid),
                )
            )
            continue
        patterns[pattern.uuid] = pattern

    logger.debug(
        "Loaded %d of %d pattern records (%d diagnostics)", len(patterns), total, len(diagnostics)
    )
    return PatternRepository(patterns.values()), diagnostics
