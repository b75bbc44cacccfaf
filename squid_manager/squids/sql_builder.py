"""
Statement builder for the DDL issued during schema promotion.

Postgres cannot bind identifiers as parameters, so schema and role names are
interpolated into ALTER statements. Every identifier goes through
`quote_identifier`, which rejects anything outside a strict lowercase pattern
before double-quoting it. Literal values never pass through this module: they
are always sent as bound parameters by the registry queries.
"""

from __future__ import annotations

import re
from typing import Final

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

_IDENTIFIER_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z_][a-z0-9_]*$")
MAX_IDENTIFIER_LENGTH: Final[int] = 63


class UnsafeIdentifierError(ValueError):
    """Raised when a schema or role name falls outside the allowed identifier pattern."""


def safe_identifier(identifier: str) -> str:
    if not isinstance(identifier, str) or not _IDENTIFIER_RE.match(identifier):
        raise UnsafeIdentifierError(f"Unsafe SQL identifier: {identifier!r}")
    if len(identifier) > MAX_IDENTIFIER_LENGTH:
        raise UnsafeIdentifierError(
            f"SQL identifier longer than {MAX_IDENTIFIER_LENGTH} characters: {identifier!r}"
        )
    return identifier


def quote_identifier(identifier: str) -> str:
    return f'"{safe_identifier(identifier)}"'


def rename_schema_statement(current_name: str, new_name: str) -> TextClause:
    return text(f"ALTER SCHEMA {quote_identifier(current_name)} RENAME TO {quote_identifier(new_name)}")


def set_search_path_statement(role_name: str, schema_name: str) -> TextClause:
    return text(f"ALTER ROLE {quote_identifier(role_name)} SET search_path TO {quote_identifier(schema_name)}")
