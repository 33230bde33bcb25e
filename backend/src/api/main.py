"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from api.middleware import AccessLogMiddleware, JSONContentTypeMiddleware
from api.routers import health, kudos
from core.config import get_settings
from db.session import create_tables, engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    if get_settings().create_tables:
        await create_tables()
        logger.info("Database tables ready")

    yield

    await engine.dispose()


app_settings = get_settings()

app = FastAPI(
    title="Kudos API",
    description="Give kudos to (bookmark) GitHub repositories.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request, exc: SQLAlchemyError,
) -> JSONResponse:
    """Turn database failures into a bare 500."""
    logger.exception(
        "Database error handling %s %s", request.method, request.url.path, exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request, exc: Exception,
) -> JSONResponse:
    """
    Turn any other failure into a bare JSON 500.

    Covers errors the database driver raises unwrapped, such as connect
    timeouts and refused connections.
    """
    logger.exception(
        "Unhandled error handling %s %s", request.method, request.url.path, exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Middleware added last runs first: access log -> content type -> CORS -> routes

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

app.add_middleware(JSONContentTypeMiddleware)

app.add_middleware(AccessLogMiddleware)

app.include_router(health.router)
app.include_router(kudos.router)
