# patterns/errors.py
from enum import Enum


class CompileErrorKind(str, Enum):
    SYNTAX = "syntax"
    DUPLICATE_FIELD = "duplicate_field"


class LoadError(str, Enum):
    """Kinds of per-record problems reported by the loader."""

    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"
    DUPLICATE_UUID = "duplicate_uuid"


class CompileError(ValueError):
    """A pattern template could not be compiled."""

    def __init__(self, kind: CompileErrorKind, message: str, position: int | None = None):
        self.kind = kind
        self.message = message
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"{kind.value}: {message}{where}")
