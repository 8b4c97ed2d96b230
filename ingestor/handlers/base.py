# ingestor/handlers/base.py
from abc import ABC, abstractmethod
from typing import Any


class PatternFileError(Exception):
    """The pattern file could not be turned into raw records."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class PatternFileReadError(PatternFileError):
    """The file is missing or unreadable."""


class PatternFileDecodeError(PatternFileError):
    """The file was read but its content is not a valid pattern document."""


class PatternFileHandler(ABC):
    @abstractmethod
    def sniff(self, sample: str, filename: str) -> float:
        """
        Return confidence (0.0–1.0) that this handler can decode the file.
        Called with the first few lines + filename.
        """

    @abstractmethod
    def decode(self, text: str, filename: str) -> list[Any]:
        """
        Turn file content into a list of raw pattern records.
        Raise PatternFileDecodeError if the document as a whole is unusable.
        """

    def read_records(self, file_path: str) -> list[Any]:
        try:
            with open(file_path, encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise PatternFileReadError(file_path, str(exc)) from exc
        return self.decode(text, file_path)


def unwrap_records(document: Any, filename: str) -> list[Any]:
    """Accept either a bare list of records or {"patterns": [...]}."""
    if isinstance(document, dict) and "patterns" in document:
        document = document["patterns"]
    if not isinstance(document, list):
        raise PatternFileDecodeError(
            filename, f"expected a list of patterns, got {type(document).__name__}"
        )
    return document
