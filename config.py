import os
from pathlib import Path

# Pattern library used by the API and as the CLI default
PATTERN_FILE = Path(os.getenv("PATTERN_FILE", "patterns.json"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Thread pool size for bulk line matching (1 = match inline)
PARSE_WORKERS = int(os.getenv("PARSE_WORKERS", "1"))

# Reload the pattern file when it changes on disk (API only)
WATCH_PATTERNS = os.getenv("WATCH_PATTERNS", "1").lower() in ("1", "true", "yes")
# Polling is more reliable on Docker/Windows bind mounts
WATCH_USE_POLLING = os.getenv("WATCH_USE_POLLING", "1").lower() in ("1", "true", "yes")

# SQLite sink table for parse results
RESULTS_TABLE = os.getenv("RESULTS_TABLE", "parse_results")
