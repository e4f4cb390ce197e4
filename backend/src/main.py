"""FastAPI application entry point."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from rich.logging import RichHandler

from src.config import settings
from src.database import StoreState, engine, set_lifecycle_state
from src.errors import register_exception_handlers
from src.models.orm import Base
from src.routers.auth import router as auth_router
from src.routers.health import router as health_router
from src.routers.patients import router as patients_router

logging.basicConfig(
    level=logging.INFO,
    format="%(name)s - %(message)s",
    datefmt="%H:%M:%S",
    handlers=[RichHandler(rich_tracebacks=True, markup=False)],
    force=True,
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
# Our app loggers: show DEBUG when debug=True, keep third-party libs at INFO
if settings.debug:
    for name in ("src.services", "src.routers", "src.client"):
        logging.getLogger(name).setLevel(logging.DEBUG)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    set_lifecycle_state(StoreState.CONNECTING)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Connected to record store")
    except Exception:
        logger.exception("Record store connection error")
    set_lifecycle_state(None)
    yield
    # uvicorn has stopped accepting connections and drained requests by now.
    set_lifecycle_state(StoreState.DISCONNECTING)
    await engine.dispose()
    set_lifecycle_state(StoreState.DISCONNECTED)
    logger.info("Record store connection closed")


app = FastAPI(
    title="Patient Registry",
    description="ASHA worker patient registration API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(patients_router)
app.include_router(health_router)


def run() -> None:
    """Serve the API with uvicorn; SIGTERM triggers a graceful shutdown."""
    logger.info("Demo credentials: %s / <configured password>", settings.auth_username)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
