import pytest

import customer_api
import db


@pytest.fixture(autouse=True)
def storage(tmp_path, monkeypatch):
    """Point the storage slot at a throwaway SQLite file and drop the latency."""
    monkeypatch.setattr(db, "DB_FILE", tmp_path / "ledger-test.db")
    monkeypatch.setattr(customer_api, "FETCH_DELAY_MS", 0)
    monkeypatch.setattr(customer_api, "MUTATE_DELAY_MS", 0)
    db.init_db()
    return tmp_path
