"""
config.py
Environment-driven settings (storage file, slot name, simulated latency, logging).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DB_FILE = Path(__file__).with_name("ledger.db")


@dataclass(frozen=True)
class Settings:
    db_file: Path
    storage_key: str
    fetch_delay_ms: int
    mutate_delay_ms: int
    log_level: str


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_int(name: str, default: int) -> int:
    try:
        return max(0, int(_getenv(name, str(default))))
    except ValueError:
        return default


def load_settings() -> Settings:
    return Settings(
        db_file=Path(_getenv("LEDGER_DB_FILE", str(DEFAULT_DB_FILE))),
        storage_key=_getenv("LEDGER_STORAGE_KEY", "customer-payment-dashboard"),
        fetch_delay_ms=_getenv_int("LEDGER_FETCH_DELAY_MS", 300),
        mutate_delay_ms=_getenv_int("LEDGER_MUTATE_DELAY_MS", 200),
        log_level=_getenv("LEDGER_LOG_LEVEL", "INFO").upper(),
    )
