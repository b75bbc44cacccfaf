"""
Schema registry queries.
The `public.indexers` table records every schema a deployment created (with its owning role) and
`public.squids` records which of those schemas is active for each project.
All values are bound parameters; only table names are fixed in the SQL text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Protocol

from squid_manager.common.db import DatabaseClient, Transaction

INDEXER_BY_SERVICE_QUERY: Final[str] = """
SELECT schema, db_user
FROM public.indexers
WHERE service = :service_name
ORDER BY created_at DESC
LIMIT 1
"""

ROLE_BY_SCHEMA_QUERY: Final[str] = """
SELECT db_user
FROM public.indexers
WHERE schema = :schema_name
ORDER BY created_at DESC
LIMIT 1
"""

ACTIVE_SCHEMA_QUERY: Final[str] = """
SELECT schema
FROM public.squids
WHERE name = :project_name
"""

# Row lock serializes concurrent promotions of the same project.
ACTIVE_SCHEMA_FOR_UPDATE_QUERY: Final[str] = ACTIVE_SCHEMA_QUERY + "FOR UPDATE\n"

UPDATE_ACTIVE_SCHEMA_STATEMENT: Final[str] = """
UPDATE public.squids
SET schema = :schema_name
WHERE name = :project_name
"""

CREDITS_PROJECT: Final[str] = "credits"


class QueryRunner(Protocol):
    def fetch_one(self, query: str, params: dict[str, object] | None = None) -> dict[str, object] | None: ...


@dataclass(frozen=True)
class IndexerRecord:
    schema: str
    db_user: str | None


def _string_or_none(row: dict[str, object] | None, column: str) -> str | None:
    if row is None or row.get(column) is None:
        return None
    return str(row[column])


class SchemaRegistry:
    """Read/write access to the service -> schema and project -> active schema mappings."""

    def __init__(self, *, dapps_db: DatabaseClient, credits_db: DatabaseClient | None = None) -> None:
        self.dapps_db = dapps_db
        self.credits_db = credits_db

    def database_for_project(self, project_name: str) -> DatabaseClient:
        if project_name == CREDITS_PROJECT and self.credits_db is not None:
            return self.credits_db
        return self.dapps_db

    def schema_for_service(self, service_name: str, project_name: str) -> str | None:
        record = self.indexer_for_service(self.database_for_project(project_name), service_name)
        return record.schema if record else None

    def active_schema_for_project(self, project_name: str) -> str | None:
        return self.active_schema(self.database_for_project(project_name), project_name)

    @staticmethod
    def indexer_for_service(runner: QueryRunner, service_name: str) -> IndexerRecord | None:
        row = runner.fetch_one(INDEXER_BY_SERVICE_QUERY, {"service_name": service_name})
        schema = _string_or_none(row, "schema")
        if schema is None:
            return None
        return IndexerRecord(schema=schema, db_user=_string_or_none(row, "db_user"))

    @staticmethod
    def active_schema(runner: QueryRunner, project_name: str, *, for_update: bool = False) -> str | None:
        query = ACTIVE_SCHEMA_FOR_UPDATE_QUERY if for_update else ACTIVE_SCHEMA_QUERY
        return _string_or_none(runner.fetch_one(query, {"project_name": project_name}), "schema")

    @staticmethod
    def role_for_schema(runner: QueryRunner, schema_name: str) -> str | None:
        return _string_or_none(runner.fetch_one(ROLE_BY_SCHEMA_QUERY, {"schema_name": schema_name}), "db_user")

    @staticmethod
    def set_active_schema(tx: Transaction, project_name: str, schema_name: str) -> None:
        tx.execute(UPDATE_ACTIVE_SCHEMA_STATEMENT, {"schema_name": schema_name, "project_name": project_name})
