# Explicit re-exports for library users.
from .errors import (
    CompileError as CompileError,
)
from .errors import (
    CompileErrorKind as CompileErrorKind,
)
from .errors import (
    LoadError as LoadError,
)
from .fields import (
    FieldKind as FieldKind,
)
from .grammar import (
    CompiledPattern as CompiledPattern,
)
from .grammar import (
    Extractor as Extractor,
)
from .grammar import (
    Literal as Literal,
)
from .grammar import (
    compile_pattern as compile_pattern,
)
from .loader import (
    Diagnostic as Diagnostic,
)
from .loader import (
    load_patterns as load_patterns,
)
from .matcher import (
    Matcher as Matcher,
)
from .matcher import (
    MatchResult as MatchResult,
)
from .matcher import (
    match_line as match_line,
)
from .matcher import (
    match_lines as match_lines,
)
from .model import (
    Pattern as Pattern,
)
from .model import (
    PatternRepository as PatternRepository,
)
from .model import (
    TestMessage as TestMessage,
)
from .validator import (
    Outcome as Outcome,
)
from .validator import (
    TestOutcome as TestOutcome,
)
from .validator import (
    ValidationReport as ValidationReport,
)
from .validator import (
    validate as validate,
)

__all__ = [
    "CompileError",
    "CompileErrorKind",
    "CompiledPattern",
    "Diagnostic",
    "Extractor",
    "FieldKind",
    "Literal",
    "LoadError",
    "MatchResult",
    "Matcher",
    "Outcome",
    "Pattern",
    "PatternRepository",
    "TestMessage",
    "TestOutcome",
    "ValidationReport",
    "compile_pattern",
    "load_patterns",
    "match_line",
    "match_lines",
    "validate",
]
