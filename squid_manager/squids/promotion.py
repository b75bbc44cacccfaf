# This module swaps which schema serves live reads for a project.
# The new deployment's schema takes the canonical `squid_<project>` name and the previously active schema
# goes back to the name it was created with, so it stays available as a backup.
# All DDL and the registry update run in one transaction; the downstream refresh call happens only after commit.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

import requests
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import TextClause

from squid_manager.common.db import Transaction
from squid_manager.squids.errors import PromotionError
from squid_manager.squids.networks import canonical_schema_name, project_name_from_service
from squid_manager.squids.registry import IndexerRecord, SchemaRegistry
from squid_manager.squids.sql_builder import (
    UnsafeIdentifierError,
    rename_schema_statement,
    safe_identifier,
    set_search_path_statement,
)

LOGGER = logging.getLogger("squids.promotion")

# Projects whose data is exposed through a cached view that must be rebuilt after a swap.
MATERIALIZED_VIEW_PROJECTS: Final[frozenset[str]] = frozenset({"marketplace"})


@dataclass(frozen=True)
class PromotionResult:
    service_name: str
    project_name: str
    canonical_schema: str
    promoted_schema: str
    previous_schema: str
    downstream_refreshed: bool | None = None


@dataclass(frozen=True)
class _SwapPlan:
    canonical_schema: str
    new: IndexerRecord
    previous_schema: str
    previous_role: str | None

    def statements(self) -> list[TextClause]:
        # Order matters: the canonical name must be vacated before the new schema can take it.
        statements = [
            rename_schema_statement(self.canonical_schema, self.previous_schema),
            rename_schema_statement(self.new.schema, self.canonical_schema),
            set_search_path_statement(str(self.new.db_user), self.canonical_schema),
        ]
        if self.previous_role and self.previous_role != self.new.db_user:
            statements.append(set_search_path_statement(self.previous_role, self.previous_schema))
        return statements


class PromotionEngine:
    """Runs the schema swap for one service and notifies the downstream cache."""

    def __init__(
        self,
        *,
        registry: SchemaRegistry,
        refresh_url: str | None = None,
        refresh_token: str | None = None,
        timeout_seconds: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.registry = registry
        self.refresh_url = refresh_url
        self.refresh_token = refresh_token
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def promote(self, service_name: str) -> PromotionResult:
        project_name = project_name_from_service(service_name)
        canonical = canonical_schema_name(project_name)
        try:
            safe_identifier(canonical)
        except UnsafeIdentifierError as exc:
            raise PromotionError(str(exc), service_name=service_name) from exc

        database = self.registry.database_for_project(project_name)
        try:
            with database.transaction() as tx:
                plan = self._plan(tx, service_name=service_name, project_name=project_name, canonical=canonical)
                for statement in plan.statements():
                    tx.execute(statement)
                self.registry.set_active_schema(tx, project_name, plan.new.schema)
        except UnsafeIdentifierError as exc:
            raise PromotionError(str(exc), service_name=service_name) from exc
        except SQLAlchemyError as exc:
            raise PromotionError(
                f"Promotion of {service_name} was rolled back: {exc}", service_name=service_name
            ) from exc

        LOGGER.info(
            "promoted service=%s schema=%s -> %s previous=%s",
            service_name,
            plan.new.schema,
            canonical,
            plan.previous_schema,
        )
        refreshed = self._refresh_downstream(project_name=project_name, schema_name=plan.new.schema)
        return PromotionResult(
            service_name=service_name,
            project_name=project_name,
            canonical_schema=canonical,
            promoted_schema=plan.new.schema,
            previous_schema=plan.previous_schema,
            downstream_refreshed=refreshed,
        )

    def _plan(self, tx: Transaction, *, service_name: str, project_name: str, canonical: str) -> _SwapPlan:
        new = self.registry.indexer_for_service(tx, service_name)
        if new is None:
            raise PromotionError(f"No schema registered for service {service_name}", service_name=service_name)
        if not new.db_user:
            raise PromotionError(f"No database role registered for schema {new.schema}", service_name=service_name)

        previous_schema = self.registry.active_schema(tx, project_name, for_update=True)
        if previous_schema is None:
            raise PromotionError(f"No active schema recorded for project {project_name}", service_name=service_name)
        if previous_schema == new.schema:
            raise PromotionError(f"Schema {new.schema} is already active for {project_name}", service_name=service_name)

        previous_role = self.registry.role_for_schema(tx, previous_schema)
        if previous_role is None:
            LOGGER.warning("no role found for previous schema=%s; its search_path is left unchanged", previous_schema)
        return _SwapPlan(
            canonical_schema=canonical,
            new=new,
            previous_schema=previous_schema,
            previous_role=previous_role,
        )

    def _refresh_downstream(self, *, project_name: str, schema_name: str) -> bool | None:
        if project_name not in MATERIALIZED_VIEW_PROJECTS or not self.refresh_url:
            return None

        headers = {"Authorization": f"Bearer {self.refresh_token}"} if self.refresh_token else {}
        try:
            response = self.session.post(
                self.refresh_url,
                json={"project": project_name, "schema": schema_name},
                headers=headers,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            LOGGER.warning("downstream refresh failed project=%s url=%s: %s", project_name, self.refresh_url, exc)
            return False
        LOGGER.info("downstream refresh requested project=%s status=%s", project_name, response.status_code)
        return True
