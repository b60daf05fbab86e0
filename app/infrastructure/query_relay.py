"""Execution of pre-compiled queries sent by trusted clients."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from app.config import get_settings

logger = logging.getLogger(__name__)

_EXPLAIN_SKIPPED_PREFIXES = ("SHOW", "DESCRIBE", "EXPLAIN")


@dataclass(frozen=True)
class CompiledQuery:
    """SQL text in the driver paramstyle plus its positional parameters."""

    sql: str
    parameters: tuple[Any, ...] = field(default_factory=tuple)


def parse_compiled_query(raw: Any) -> CompiledQuery | None:
    """Decode a serialized compiled query, ``None`` when it is malformed."""

    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if not isinstance(raw, str):
        logger.error("Compiled query body was not a string")
        return None
    try:
        document = json.loads(raw)
    except json.JSONDecodeError:
        logger.exception("Compiled query could not be parsed: %r", raw[:200])
        return None

    if not isinstance(document, dict):
        return None
    sql = document.get("sql")
    parameters = document.get("parameters", [])
    if not isinstance(sql, str) or not sql.strip() or not isinstance(parameters, list):
        logger.error("Compiled query is missing its sql or parameters")
        return None
    return CompiledQuery(sql=sql, parameters=tuple(parameters))


def execute_compiled_query(session: Session, query: CompiledQuery) -> dict[str, Any]:
    """Execute ``query`` and return its rows together with write statistics."""

    if get_settings().debug_explain_queries:
        _log_explain(session, query)

    connection = session.connection()
    result = connection.exec_driver_sql(query.sql, query.parameters)
    rows: list[dict[str, Any]] = []
    if result.returns_rows:
        rows = [dict(row._mapping) for row in result]
    affected = result.rowcount if result.rowcount is not None and result.rowcount >= 0 else None
    insert_id = getattr(result, "lastrowid", None) if not result.returns_rows else None
    session.commit()
    return {"rows": rows, "numAffectedRows": affected, "insertId": insert_id}


def _log_explain(session: Session, query: CompiledQuery) -> None:
    logger.info("Compiled query: %s", query.sql)
    if query.sql.lstrip().upper().startswith(_EXPLAIN_SKIPPED_PREFIXES):
        return
    try:
        plan = session.connection().exec_driver_sql(
            "EXPLAIN " + query.sql, query.parameters
        )
        logger.info("Query plan: %s", [tuple(row) for row in plan])
    except Exception:
        logger.exception("Could not explain compiled query")
        session.rollback()


__all__ = ["CompiledQuery", "execute_compiled_query", "parse_compiled_query"]
