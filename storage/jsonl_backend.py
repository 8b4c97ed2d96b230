import json
from pathlib import Path
from typing import Any

from .base import StorageBackend


class JSONLBackend(StorageBackend):
    def __init__(self, path="results.jsonl"):
        """
        JSON Lines sink: one output record per line.
        :param path: Output file; truncated on connect.
        """
        self.path = Path(path)
        self.fh = None

    def connect(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.fh = self.path.open("w", encoding="utf-8")

    def write_batch(self, records: list[dict[str, Any]]) -> None:
        for rec in records:
            self.fh.write(json.dumps(rec, ensure_ascii=False) + "\n")
        self.fh.flush()

    def query_results(self, filters: dict[str, Any]) -> list[dict[str, Any]]:
        rows = []
        with self.path.open("r", encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                rec = json.loads(line)
                if "uuid" in filters and rec.get("uuid") != filters["uuid"]:
                    continue
                if "matched" in filters and rec.get("matched") != filters["matched"]:
                    continue
                rows.append(rec)
        return rows

    def close(self):
        if self.fh:
            self.fh.close()
            self.fh = None
