"""SQLite storage. Un archivo, muchas almas: snapshots y trazas."""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Callable

from soulforge.models import Trace

logger = logging.getLogger(__name__)


class Storage:
    """SQLite backend for Soul.export() snapshots. Zero config. Portable."""

    def __init__(self, path: str | Path,
                 clock: Callable[[], float] = time.time) -> None:
        self.path = Path(path)
        self._clock = clock
        self.conn = sqlite3.connect(str(self.path))
        self.conn.execute("PRAGMA journal_mode=WAL")
        self._init_schema()

    def _init_schema(self) -> None:
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS souls (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL DEFAULT '',
                snapshot TEXT NOT NULL,
                updated_at REAL NOT NULL
            );

            CREATE TABLE IF NOT EXISTS traces (
                id TEXT PRIMARY KEY,
                soul_id TEXT NOT NULL,
                operation TEXT NOT NULL,
                input_text TEXT NOT NULL DEFAULT '',
                output_text TEXT NOT NULL DEFAULT '',
                source TEXT NOT NULL DEFAULT '',
                duration_ms REAL,
                metadata TEXT NOT NULL DEFAULT '{}',
                created_at REAL NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_traces_soul
                ON traces(soul_id, created_at DESC);
            CREATE INDEX IF NOT EXISTS idx_traces_operation
                ON traces(operation);
        """)
        self.conn.commit()

    # ── Snapshots ──────────────────────────────────────────────────────

    def save_soul(self, snapshot: dict) -> None:
        self.conn.execute(
            """INSERT OR REPLACE INTO souls (id, name, snapshot, updated_at)
               VALUES (?, ?, ?, ?)""",
            (
                snapshot["id"],
                snapshot.get("identity", {}).get("name", ""),
                json.dumps(snapshot),
                self._clock(),
            ),
        )
        self.conn.commit()
        logger.info("saved soul %s (%d memories)", snapshot["id"],
                    len(snapshot.get("memories", [])))

    def load_soul(self, soul_id: str) -> dict | None:
        row = self.conn.execute(
            "SELECT snapshot FROM souls WHERE id = ?", (soul_id,)
        ).fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    def list_souls(self) -> list[tuple[str, str]]:
        """(id, name) pairs, most recently saved first."""
        rows = self.conn.execute(
            "SELECT id, name FROM souls ORDER BY updated_at DESC"
        ).fetchall()
        return [(r[0], r[1]) for r in rows]

    def delete_soul(self, soul_id: str) -> bool:
        cursor = self.conn.execute("DELETE FROM souls WHERE id = ?", (soul_id,))
        self.conn.execute("DELETE FROM traces WHERE soul_id = ?", (soul_id,))
        self.conn.commit()
        return cursor.rowcount > 0

    def count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM souls").fetchone()[0]

    # ── Traces ─────────────────────────────────────────────────────────

    def save_traces(self, soul_id: str, traces: list[Trace]) -> None:
        self.conn.executemany(
            """INSERT OR REPLACE INTO traces
               (id, soul_id, operation, input_text, output_text, source,
                duration_ms, metadata, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            [
                (
                    t.id, soul_id, t.operation, t.input_text, t.output_text,
                    t.source, t.duration_ms, json.dumps(t.metadata), t.created_at,
                )
                for t in traces
            ],
        )
        self.conn.commit()

    def load_traces(self, soul_id: str, operation: str | None = None,
                    limit: int = 100) -> list[Trace]:
        query = "SELECT * FROM traces WHERE soul_id = ?"
        params: list = [soul_id]
        if operation is not None:
            query += " AND operation = ?"
            params.append(operation)
        query += " ORDER BY created_at DESC LIMIT ?"
        params.append(limit)
        rows = self.conn.execute(query, params).fetchall()
        return [self._row_to_trace(r) for r in rows]

    # ── Close ──────────────────────────────────────────────────────────

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> Storage:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # ── Row mappers ────────────────────────────────────────────────────

    @staticmethod
    def _row_to_trace(row: tuple) -> Trace:
        return Trace(
            id=row[0],
            operation=row[2],
            input_text=row[3],
            output_text=row[4],
            source=row[5],
            duration_ms=row[6],
            metadata=json.loads(row[7]),
            created_at=row[8],
        )
