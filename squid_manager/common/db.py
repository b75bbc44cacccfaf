"""
Database connection utilities.
It wraps SQLAlchemy engines so registry lookups run parameterized SQL and promotions run in one transaction.
Keeping this layer small makes query behavior easier to audit and troubleshoot.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import TextClause

Statement = str | TextClause


def _as_text(query: Statement) -> TextClause:
    return query if isinstance(query, TextClause) else text(query)


class Transaction:
    """Statement runner bound to one open transaction."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def fetch_one(self, query: Statement, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        row = self._connection.execute(_as_text(query), dict(params or {})).mappings().first()
        return dict(row) if row is not None else None

    def execute(self, query: Statement, params: Mapping[str, Any] | None = None) -> None:
        self._connection.execute(_as_text(query), dict(params or {}))


class DatabaseClient:
    """Minimal SQLAlchemy wrapper for registry reads and transactional writes."""

    def __init__(self, *, database_url: str) -> None:
        self._engine: Engine = create_engine(database_url, pool_pre_ping=True, future=True)

    def can_connect(self) -> bool:
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def fetch_one(self, query: Statement, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        with self._engine.connect() as connection:
            row = connection.execute(_as_text(query), dict(params or {})).mappings().first()
        return dict(row) if row is not None else None

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Yield a statement runner; commit on clean exit, roll back on any exception."""

        with self._engine.begin() as connection:
            yield Transaction(connection)
