import logging
import threading
from pathlib import Path
from typing import Any

from ingestor.sniffer import sniff_file
from patterns import Diagnostic, Matcher, PatternRepository, load_patterns

logger = logging.getLogger(__name__)


def read_pattern_file(path: Path) -> list[Any]:
    """Decode a pattern file into raw records. Raises PatternFileError."""
    handler = sniff_file(path)
    return handler.read_records(str(path))


def load_pattern_file(path: Path) -> tuple[PatternRepository, list[Diagnostic]]:
    """Read + load a pattern file. Per-record problems come back as diagnostics."""
    records = read_pattern_file(path)
    repository, diagnostics = load_patterns(records)
    logger.info(
        "Loaded %d patterns from %s (%d diagnostics)", len(repository), path.name, len(diagnostics)
    )
    return repository, diagnostics


class PatternStore:
    """
    Holds the current repository for long-running processes.

    A reload builds a complete new repository and matcher first and then
    swaps them in together, so readers never see a half-loaded library.
    """

    def __init__(self, path: Path | None = None):
        self.path = path
        self._lock = threading.Lock()
        self._state: tuple[PatternRepository, list[Diagnostic], Matcher] = self._build(
            PatternRepository(), []
        )

    @staticmethod
    def _build(repository: PatternRepository, diagnostics: list[Diagnostic]):
        return repository, diagnostics, Matcher(repository)

    def snapshot(self) -> tuple[PatternRepository, list[Diagnostic], Matcher]:
        """Repository, diagnostics and matcher from one and the same load."""
        return self._state

    @property
    def repository(self) -> PatternRepository:
        return self._state[0]

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._state[1]

    @property
    def matcher(self) -> Matcher:
        return self._state[2]

    def reload(self) -> None:
        """Reload from `path`. On PatternFileError the previous library stays active."""
        if self.path is None:
            raise ValueError("PatternStore has no pattern file configured")
        with self._lock:
            repository, diagnostics = load_pattern_file(self.path)
            self._state = self._build(repository, diagnostics)
        for d in diagnostics:
            logger.warning("Pattern diagnostic: %s", d)
