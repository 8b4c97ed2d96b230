# ingestor/handlers/json_file.py
import json
import logging
from typing import Any

from .base import PatternFileDecodeError, PatternFileHandler, unwrap_records
from .registry import register

logger = logging.getLogger(__name__)


@register("json")
class JsonPatternHandler(PatternFileHandler):
    """
    Pattern files written as one JSON document.

    Either a top-level array of pattern records or an object with a
    `patterns` array.
    """

    def sniff(self, sample: str, filename: str) -> float:
        s = sample.lstrip()
        if s.startswith("["):
            return 0.9
        if s.startswith("{"):
            # a complete object on the first line is more likely JSON Lines
            first = s.splitlines()[0]
            try:
                json.loads(first)
                return 0.4
            except ValueError:
                return 0.8
        return 0.0

    def decode(self, text: str, filename: str) -> list[Any]:
        try:
            document = json.loads(text)
        except ValueError as exc:
            logger.error("Invalid JSON in %s: %s", filename, exc)
            raise PatternFileDecodeError(filename, f"invalid JSON: {exc}") from exc
        records = unwrap_records(document, filename)
        logger.info("Decoded %d pattern records from %s", len(records), filename)
        return records
