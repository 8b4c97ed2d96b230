# patterns/model.py
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from uuid import UUID

from .grammar import CompiledPattern


@dataclass(frozen=True)
class TestMessage:
    """Worked example attached to a pattern: input line + expected fields."""

    __test__ = False  # keep pytest from collecting this class

    raw_text: str
    expected_values: Mapping[str, str] = field(default_factory=dict)
    expected_tags: frozenset[str] | None = None


@dataclass(frozen=True)
class Pattern:
    name: str
    uuid: UUID
    compiled: CompiledPattern
    default_values: Mapping[str, str] = field(default_factory=dict)
    tags: frozenset[str] = frozenset()
    test_messages: tuple[TestMessage, ...] = ()

    @property
    def template(self) -> str:
        return self.compiled.source


class PatternRepository(Mapping[UUID, Pattern]):
    """
    Read-only mapping uuid -> Pattern, in load order.

    Built once by the loader; never mutated afterwards, so it can be shared
    between threads without locking.
    """

    def __init__(self, patterns: Iterable[Pattern] = ()):
        items: dict[UUID, Pattern] = {}
        for pattern in patterns:
            if pattern.uuid in items:
                raise ValueError(f"Duplicate pattern uuid: {pattern.uuid}")
            items[pattern.uuid] = pattern
        self._items = MappingProxyType(items)

    def __getitem__(self, key: UUID) -> Pattern:
        return self._items[key]

    def __iter__(self) -> Iterator[UUID]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"PatternRepository({len(self)} patterns)"
