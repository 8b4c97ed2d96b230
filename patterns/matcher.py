# patterns/matcher.py
"""
Line matching against a loaded PatternRepository.

Each pattern is executed left to right over the line without backtracking:
literals must match exactly, extractors consume the longest run their kind
accepts. A pattern matches only if the whole line is consumed. When several
patterns match, the one with the most literal characters wins, then the
smallest uuid.
"""

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from types import MappingProxyType
from uuid import UUID

from .fields import is_valid, satisfies, scan
from .grammar import CompiledPattern, Literal
from .model import Pattern, PatternRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    uuid: UUID
    name: str
    values: Mapping[str, str] = field(default_factory=dict)
    tags: frozenset[str] = frozenset()


def run_program(program: CompiledPattern, line: str) -> dict[str, str] | None:
    """
    Execute one compiled pattern against `line`.

    Returns the extracted values, or None unless every token matched and the
    line was consumed completely.
    """
    tokens = program.tokens
    values: dict[str, str] = {}
    pos = 0

    for i, token in enumerate(tokens):
        if isinstance(token, Literal):
            if not line.startswith(token.text, pos):
                return None
            pos += len(token.text)
            continue

        following = tokens[i + 1] if i + 1 < len(tokens) else None
        stop = following.text[0] if isinstance(following, Literal) else None
        end = scan(token.kind, line, pos, stop)
        if end == pos:
            return None

        value = line[pos:end]
        if not is_valid(token.kind, value) or not satisfies(token.kind, value, token.bounds):
            return None
        values[token.name] = value
        pos = end

    return values if pos == len(line) else None


class Matcher:
    """
    Literal-prefix index over a repository.

    Patterns whose program begins with a literal are bucketed by that
    literal's first character and only tried when the line starts with the
    whole literal; the rest are tried for every line. Holds no mutable state
    after construction, so one instance can serve many threads.
    """

    def __init__(self, repository: PatternRepository):
        self.repository = repository
        by_first_char: dict[str, list[Pattern]] = {}
        unanchored: list[Pattern] = []
        for pattern in repository.values():
            prefix = pattern.compiled.leading_literal
            if prefix is None:
                unanchored.append(pattern)
            else:
                by_first_char.setdefault(prefix[0], []).append(pattern)
        self._by_first_char = {k: tuple(v) for k, v in by_first_char.items()}
        self._unanchored = tuple(unanchored)

    def candidates(self, line: str) -> list[Pattern]:
        anchored = self._by_first_char.get(line[:1], ()) if line else ()
        found = [p for p in anchored if line.startswith(p.compiled.leading_literal)]
        found.extend(self._unanchored)
        return found

    def match(self, line: str) -> MatchResult | None:
        best: tuple[tuple[int, str], Pattern, dict[str, str]] | None = None

        for pattern in self.candidates(line):
            extracted = run_program(pattern.compiled, line)
            if extracted is None:
                continue
            rank = (-pattern.compiled.literal_length, str(pattern.uuid))
            if best is None or rank < best[0]:
                best = (rank, pattern, extracted)

        if best is None:
            return None

        _, pattern, extracted = best
        merged = dict(pattern.default_values)
        merged.update(extracted)
        return MatchResult(
            uuid=pattern.uuid,
            name=pattern.name,
            values=MappingProxyType(merged),
            tags=pattern.tags,
        )

    def match_lines(self, lines: Iterable[str], workers: int = 1) -> list[MatchResult | None]:
        """Match many lines, optionally on a thread pool; results keep input order."""
        if workers <= 1:
            return [self.match(line) for line in lines]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(self.match, lines))


def match_line(repository: PatternRepository, line: str) -> MatchResult | None:
    """Match a single line; builds a throwaway index, use Matcher for bulk work."""
    return Matcher(repository).match(line)


def match_lines(
    repository: PatternRepository, lines: Iterable[str], workers: int = 1
) -> list[MatchResult | None]:
    matcher = Matcher(repository)
    logger.debug("Matching with %d patterns, workers=%d", len(repository), workers)
    return matcher.match_lines(lines, workers=workers)
