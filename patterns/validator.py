# patterns/validator.py
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import UUID

from .loader import Diagnostic
from .matcher import run_program
from .model import Pattern, PatternRepository


class Outcome(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    NO_MATCH = "no_match"


@dataclass(frozen=True)
class TestOutcome:
    __test__ = False

    pattern_uuid: UUID
    test_index: int
    outcome: Outcome
    expected: Mapping[str, str] = field(default_factory=dict)
    actual: Mapping[str, str] | None = None
    missing_tags: frozenset[str] = frozenset()

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.PASS

    def to_dict(self) -> dict[str, Any]:
        return {
            "pattern_uuid": str(self.pattern_uuid),
            "test_index": self.test_index,
            "outcome": self.outcome.value,
            "expected": dict(self.expected),
            "actual": dict(self.actual) if self.actual is not None else None,
            "missing_tags": sorted(self.missing_tags),
        }


def validate_pattern(pattern: Pattern) -> list[TestOutcome]:
    """
    Run every test message of `pattern` against that pattern alone.

    Compares only the extracted fields; the pattern's default values are not
    part of the comparison.
    """
    outcomes: list[TestOutcome] = []
    for index, test in enumerate(pattern.test_messages):
        expected = dict(test.expected_values)
        actual = run_program(pattern.compiled, test.raw_text)
        if actual is None:
            outcomes.append(TestOutcome(pattern.uuid, index, Outcome.NO_MATCH, expected))
            continue

        missing_tags = frozenset(test.expected_tags or ()) - pattern.tags
        outcome = Outcome.PASS if actual == expected and not missing_tags else Outcome.FAIL
        outcomes.append(TestOutcome(pattern.uuid, index, outcome, expected, actual, missing_tags))
    return outcomes


def validate_repository(repository: PatternRepository) -> list[TestOutcome]:
    outcomes: list[TestOutcome] = []
    for pattern in repository.values():
        outcomes.extend(validate_pattern(pattern))
    return outcomes


@dataclass(frozen=True)
class ValidationReport:
    diagnostics: Sequence[Diagnostic]
    outcomes: Sequence[TestOutcome]

    @property
    def failures(self) -> list[TestOutcome]:
        return [o for o in self.outcomes if not o.passed]

    @property
    def ok(self) -> bool:
        return not self.diagnostics and not self.failures


def validate(repository: PatternRepository, diagnostics: Sequence[Diagnostic] = ()) -> ValidationReport:
    """Self-test a loaded repository; `ok` needs zero load diagnostics and all tests passing."""
    return ValidationReport(diagnostics=tuple(diagnostics), outcomes=tuple(validate_repository(repository)))
