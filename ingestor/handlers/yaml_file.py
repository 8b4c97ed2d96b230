# ingestor/handlers/yaml_file.py
import logging
from typing import Any

import yaml

from .base import PatternFileDecodeError, PatternFileHandler, unwrap_records
from .registry import register

logger = logging.getLogger(__name__)


@register("yaml", "yml")
class YamlPatternHandler(PatternFileHandler):
    """Same document shapes as the JSON handler, written as YAML."""

    def sniff(self, sample: str, filename: str) -> float:
        s = sample.lstrip()
        if s.startswith(("---", "- ", "patterns:")):
            return 0.7
        return 0.0

    def decode(self, text: str, filename: str) -> list[Any]:
        try:
            # BaseLoader keeps every scalar a string (values and tags are string-typed)
            document = yaml.load(text, Loader=yaml.BaseLoader)
        except yaml.YAMLError as exc:
            logger.error("Invalid YAML in %s: %s", filename, exc)
            raise PatternFileDecodeError(filename, f"invalid YAML: {exc}") from exc
        records = unwrap_records(document, filename)
        logger.info("Decoded %d pattern records from %s", len(records), filename)
        return records
