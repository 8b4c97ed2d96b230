import json
import sqlite3
from typing import Any

from config import RESULTS_TABLE

from .base import StorageBackend

COLUMNS = ["line_number", "line", "matched", "uuid", "name", "values", "tags", "content_hash"]


class SQLiteBackend(StorageBackend):
    def __init__(self, db_path="results.db", table=RESULTS_TABLE, truncate=False):
        """
        SQLite sink for parse results.
        :param db_path: Path to sqlite db file.
        :param table: Table receiving one row per input line.
        :param truncate: Empty the table on connect, so it holds a single run.
        """
        if not table.isidentifier():
            raise ValueError(f"Invalid table name: {table!r}")
        self.db_path = db_path
        self.table = table
        self.truncate = truncate
        self.conn = None

    def connect(self):
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._create_schema()
        if self.truncate:
            self.conn.execute(f"DELETE FROM {self.table}")
            self.conn.commit()

    def _create_schema(self):
        cur = self.conn.cursor()
        cur.execute(f"""
        CREATE TABLE IF NOT EXISTS {self.table} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            line_number INTEGER,
            line TEXT,
            matched INTEGER,
            uuid TEXT,
            name TEXT,
            "values" TEXT,
            tags TEXT,
            content_hash TEXT UNIQUE
        )
        """)
        cur.execute(f"CREATE INDEX IF NOT EXISTS idx_{self.table}_uuid ON {self.table} (uuid)")
        self.conn.commit()

    def write_batch(self, records: list[dict[str, Any]]) -> None:
        """Insert records; a line already stored with the same content hash is skipped."""
        rows = [
            {
                **rec,
                "matched": int(rec["matched"]),
                "values": json.dumps(rec["values"], ensure_ascii=False, sort_keys=True),
                "tags": json.dumps(rec["tags"]),
            }
            for rec in records
        ]
        cur = self.conn.cursor()
        cur.executemany(
            f"""
        INSERT OR IGNORE INTO {self.table}
            (line_number, line, matched, uuid, name, "values", tags, content_hash)
        VALUES (:line_number, :line, :matched, :uuid, :name, :values, :tags, :content_hash)
        """,
            rows,
        )
        self.conn.commit()

    def query_results(self, filters: dict[str, Any]) -> list[dict[str, Any]]:
        cur = self.conn.cursor()
        query = f'SELECT line_number, line, matched, uuid, name, "values", tags, content_hash FROM {self.table} WHERE 1=1'
        params = []

        if "uuid" in filters:
            query += " AND uuid = ?"
            params.append(filters["uuid"])
        if "matched" in filters:
            query += " AND matched = ?"
            params.append(int(filters["matched"]))
        query += " ORDER BY line_number ASC"

        cur.execute(query, params)
        results = []
        for row in cur.fetchall():
            rec = dict(zip(COLUMNS, row, strict=False))
            rec["matched"] = bool(rec["matched"])
            rec["values"] = json.loads(rec["values"])
            rec["tags"] = json.loads(rec["tags"])
            results.append(rec)
        return results

    def close(self):
        if self.conn:
            self.conn.close()
            self.conn = None
