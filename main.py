import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.application.use_cases.notifications import delivery_pass_tracker
from app.infrastructure.database import engine, initialize_database
from app.infrastructure.notifications import shutdown_firebase_app
from app.interfaces.api.dependencies import shared_secret_matches
from app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema on startup; on shutdown wait for running deliveries, then release clients."""

    initialize_database()
    yield
    await delivery_pass_tracker.drain()
    shutdown_firebase_app()
    engine.dispose()


async def _require_shared_secret(request: Request, call_next):
    """Answer 401 before routing, and so before any body is parsed."""

    if not shared_secret_matches(request.headers.get("authorization")):
        logger.warning("Rejected unauthenticated request to %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Unauthorized"},
        )
    return await call_next(request)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Bad Request"},
    )


def create_app() -> FastAPI:
    """Create and configure the relay application."""

    app = FastAPI(lifespan=lifespan)

    # Added first so CORS stays outermost and answers preflights without a secret.
    app.middleware("http")(_require_shared_secret)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    register_routes(app)
    return app


app = create_app()
