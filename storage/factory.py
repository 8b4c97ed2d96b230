from pathlib import Path

from .jsonl_backend import JSONLBackend
from .sqlite_backend import SQLiteBackend

SQLITE_SUFFIXES = {".db", ".sqlite", ".sqlite3"}


def get_storage_backend(db_type="jsonl", **kwargs):
    if db_type == "jsonl":
        return JSONLBackend(**kwargs)
    elif db_type == "sqlite":
        return SQLiteBackend(**kwargs)
    else:
        raise ValueError(f"Unsupported DB type: {db_type}")


def backend_for_path(path: str, **kwargs):
    """
    Output sink for `path`: SQLite for database-looking suffixes, JSON Lines
    for everything else. Both start empty, like a freshly written file.
    """
    if Path(path).suffix.lower() in SQLITE_SUFFIXES:
        kwargs.setdefault("truncate", True)
        return get_storage_backend("sqlite", db_path=path, **kwargs)
    return get_storage_backend("jsonl", path=path)
