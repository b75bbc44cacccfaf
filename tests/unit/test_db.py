"""
Unit tests for the database client.
It asserts expected behavior and guards against regressions in the corresponding component.
These tests run against an in-memory SQLite engine and should remain deterministic.
"""

import pytest
from sqlalchemy.pool import StaticPool

from squid_manager.common.db import DatabaseClient


@pytest.fixture
def db(monkeypatch: pytest.MonkeyPatch) -> DatabaseClient:
    from squid_manager.common import db as db_module

    original = db_module.create_engine

    def shared_memory_engine(url: str, **kwargs: object):
        return original(url, poolclass=StaticPool, connect_args={"check_same_thread": False})

    monkeypatch.setattr(db_module, "create_engine", shared_memory_engine)
    client = DatabaseClient(database_url="sqlite://")
    with client.transaction() as tx:
        tx.execute("CREATE TABLE squids (name TEXT PRIMARY KEY, schema TEXT)")
        tx.execute("INSERT INTO squids VALUES (:name, :schema)", {"name": "marketplace", "schema": "squid_a"})
    return client


def test_can_connect_and_fetch_one(db: DatabaseClient) -> None:
    assert db.can_connect()
    assert db.fetch_one("SELECT schema FROM squids WHERE name = :name", {"name": "marketplace"}) == {
        "schema": "squid_a"
    }
    assert db.fetch_one("SELECT schema FROM squids WHERE name = :name", {"name": "missing"}) is None


def test_transaction_rolls_back_on_error(db: DatabaseClient) -> None:
    with pytest.raises(RuntimeError):
        with db.transaction() as tx:
            tx.execute(
                "UPDATE squids SET schema = :schema WHERE name = :name",
                {"schema": "squid_b", "name": "marketplace"},
            )
            assert tx.fetch_one("SELECT schema FROM squids") == {"schema": "squid_b"}
            raise RuntimeError("abort")

    assert db.fetch_one("SELECT schema FROM squids") == {"schema": "squid_a"}
