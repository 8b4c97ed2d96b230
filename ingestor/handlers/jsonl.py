# ingestor/handlers/jsonl.py
import json
import logging
from typing import Any

from .base import PatternFileHandler
from .registry import register

logger = logging.getLogger(__name__)


@register("jsonl", "ndjson")
class JsonLinesPatternHandler(PatternFileHandler):
    """One pattern record per line; blank lines are ignored."""

    def sniff(self, sample: str, filename: str) -> float:
        lines = [line.strip() for line in sample.splitlines() if line.strip()]
        if not lines:
            return 0.0
        hits = 0
        for line in lines:
            try:
                if isinstance(json.loads(line), dict):
                    hits += 1
            except ValueError:
                continue
        return 0.9 * hits / len(lines)

    def decode(self, text: str, filename: str) -> list[Any]:
        records: list[Any] = []
        for i, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except ValueError as exc:
                # keep the raw line so the loader reports it as a bad record
                logger.warning("Undecodable line %d in %s: %s", i, filename, exc)
                records.append(line)
        logger.info("Decoded %d pattern records from %s", len(records), filename)
        return records
