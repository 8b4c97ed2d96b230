import logging
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


class RawHandler:
    """
    Reader for the text being parsed.
    Reads the file as plain text, line by line; every line counts, blank ones included.
    """

    def iter_lines(self, file_path: str) -> Iterator[tuple[int, str]]:
        path = Path(file_path)
        try:
            with path.open("r", encoding="utf-8", errors="replace") as f:
                for i, line in enumerate(f, start=1):
                    yield i, line.rstrip("\r\n")
        except OSError as exc:
            logger.error("RawHandler failed on %s: %s", file_path, exc, exc_info=True)
            raise

    def read_lines(self, file_path: str) -> list[str]:
        lines = [line for _, line in self.iter_lines(file_path)]
        logger.info("Read %d lines from %s", len(lines), Path(file_path).name)
        return lines
