"""
db.py
SQLite helpers + the key/value table that holds named storage slots.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager

from config import load_settings

DB_FILE = load_settings().db_file


@contextmanager
def get_conn():
    conn = sqlite3.connect(DB_FILE, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def execute(sql: str, params: tuple = ()) -> int:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.lastrowid


def fetch_one(sql: str, params: tuple = ()):
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.fetchone()


def init_db() -> None:
    """
    Create the slot table if needed. Safe to call on every run.
    """
    execute(
        """
        CREATE TABLE IF NOT EXISTS storage_slots (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        """
    )


def get_slot(key: str) -> str | None:
    init_db()
    row = fetch_one("SELECT value FROM storage_slots WHERE key = ?", (key,))
    if row:
        return str(row["value"])
    return None


def set_slot(key: str, value: str) -> None:
    init_db()
    execute(
        """
        INSERT INTO storage_slots(key, value) VALUES(?, ?)
        ON CONFLICT(key) DO UPDATE SET value=excluded.value
        """,
        (key, value),
    )


def clear_slot(key: str) -> None:
    init_db()
    execute("DELETE FROM storage_slots WHERE key = ?", (key,))
