"""Relay of pre-compiled queries to the database."""

from __future__ import annotations

import logging
from typing import Any

import anyio
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.infrastructure.database import get_db
from app.infrastructure.query_relay import execute_compiled_query, parse_compiled_query

logger = logging.getLogger(__name__)

router = APIRouter(tags=["queries"])


def _execute(raw: Any, db: Session) -> dict[str, Any]:
    compiled_query = parse_compiled_query(raw)
    if compiled_query is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bad Request")
    try:
        return execute_compiled_query(db, compiled_query)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Relayed query failed")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Bad Request"
        ) from exc


@router.get("/")
def run_query_from_querystring(
    q: str = Query(..., description="Serialized compiled query"),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Execute the compiled query passed in ``q``."""

    return _execute(q, db)


@router.post("/")
async def run_query_from_body(request: Request, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Execute the compiled query sent as the raw request body."""

    body = await request.body()
    return await anyio.to_thread.run_sync(_execute, body, db)


__all__ = ["router"]
