# normalize.py
from __future__ import annotations

import hashlib
import json
from typing import Any

from patterns import MatchResult


def to_record(line_number: int, line: str, result: MatchResult | None) -> dict[str, Any]:
    """One output record per input line, matched or not."""
    record: dict[str, Any] = {
        "line_number": line_number,
        "line": line,
        "matched": result is not None,
        "uuid": str(result.uuid) if result else None,
        "name": result.name if result else None,
        "values": dict(result.values) if result else {},
        "tags": sorted(result.tags) if result else [],
    }
    record["content_hash"] = content_hash(record)
    return record


def content_hash(rec: dict[str, Any]) -> str:
    """Stable hash for idempotency."""
    key = {
        "line_number": rec.get("line_number"),
        "line": rec.get("line"),
        "uuid": rec.get("uuid"),
        "values": rec.get("values"),
    }
    return hashlib.sha256(json.dumps(key, sort_keys=True, default=str).encode("utf-8")).hexdigest()
