import logging
from pathlib import Path

from ingestor.handlers.base import PatternFileDecodeError, PatternFileReadError
from ingestor.handlers.registry import get_handler_for, sniff_best_handler

logger = logging.getLogger(__name__)


def sniff_file(path: Path, sample_size: int = 5):
    """
    Pick the handler for the given pattern file.
    - Known extensions go straight to their registered handler.
    - Otherwise reads the first `sample_size` lines and lets handlers sniff.
    Raises PatternFileDecodeError if no handler recognizes the content.
    """
    handler = get_handler_for(path)
    if handler is not None:
        return handler

    sample_lines = []
    try:
        with path.open("r", encoding="utf-8", errors="ignore") as f:
            for _ in range(sample_size):
                line = f.readline()
                if not line:
                    break
                sample_lines.append(line.rstrip("\n"))
    except OSError as e:
        logger.error("Sniffer could not read %s: %s", path, e)
        raise PatternFileReadError(str(path), str(e)) from e

    sample_text = "\n".join(sample_lines)
    handler = sniff_best_handler(sample_text, str(path))
    if handler is None:
        logger.warning("No pattern file handler recognized %s", path.name)
        raise PatternFileDecodeError(str(path), "unrecognized pattern file format")

    logger.debug("Sniffer selected %s for %s", type(handler).__name__, path.name)
    return handler
