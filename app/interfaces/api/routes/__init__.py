from fastapi import FastAPI

from .notifications import router as notifications_router
from .queries import router as queries_router
from .storage import router as storage_router


def register_routes(app: FastAPI) -> None:
    """Register every API router of the relay."""

    app.include_router(queries_router)
    app.include_router(storage_router)
    app.include_router(notifications_router)
