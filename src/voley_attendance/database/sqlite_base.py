from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional


def fetchone(cur: sqlite3.Cursor) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return dict(row) if row else None


def fetchall(cur: sqlite3.Cursor) -> List[Dict[str, Any]]:
    return [dict(r) for r in cur.fetchall() or []]


def table_columns(cur: sqlite3.Cursor, table: str) -> set[str]:
    rows = cur.execute(f"PRAGMA table_info({table});").fetchall()
    return {r["name"] for r in rows}


def has_column(cur: sqlite3.Cursor, table: str, column: str) -> bool:
    return column in table_columns(cur, table)


def as_db_bool(value: Optional[bool]) -> Optional[int]:
    if value is None:
        return None
    return 1 if value else 0
