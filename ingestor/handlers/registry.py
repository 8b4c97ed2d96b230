"""
Pattern file handler registry.

Handlers decode one on-disk format into raw pattern records. To add a new
format:

1. Create a new file in ingestor/handlers/, e.g. `toml_file.py`.
2. Subclass `PatternFileHandler` from base.py and implement:
      - sniff(self, sample: str, filename: str) -> float
      - decode(self, text: str, filename: str) -> list
3. Decorate the class with @register("<ext>", ...) for each file extension.
4. Import the module in ingestor/handlers/__init__.py.

Example:

    from .base import PatternFileHandler
    from .registry import register

    @register("toml")
    class TomlPatternHandler(PatternFileHandler):
        def sniff(self, sample: str, filename: str) -> float:
            return 0.8 if sample.startswith("[[patterns]]") else 0.0

        def decode(self, text: str, filename: str) -> list:
            return tomllib.loads(text)["patterns"]
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Global handler registry: maps extension name → handler class
REGISTRY: dict[str, type] = {}


def register(*names: str):
    """
    Decorator to register a handler class under one or more extensions.

    Args:
        names (str): File extensions handled by the class
                     (e.g. "json", "yaml", "yml").
    """

    def decorator(cls):
        for name in names:
            REGISTRY[name.lower()] = cls
        return cls

    return decorator


def get_handler_for(path: Path):
    """
    Look up a handler for the given pattern file by extension.
    Returns None for unknown extensions (caller should sniff the content).
    """
    ext = path.suffix.lower().lstrip(".")
    handler_cls = REGISTRY.get(ext)
    return handler_cls() if handler_cls else None


def sniff_best_handler(sample: str, filename: str) -> object | None:
    """
    Iterate all registered handlers, ask each for a confidence score,
    and return the handler instance with the highest score (None if all 0).
    """
    best_score = 0.0
    best_handler: object | None = None

    for name, handler_cls in REGISTRY.items():
        handler = handler_cls()
        try:
            score = handler.sniff(sample, filename)
        except Exception as e:
            logger.debug("Sniff failed for %s: %s", name, e)
            continue
        if score > best_score:
            best_score, best_handler = score, handler

    return best_handler
