"""SQLAlchemy async database setup and store status tracking."""

from __future__ import annotations

import enum
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(settings.database_url, echo=settings.debug)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class StoreState(str, enum.Enum):
    CONNECTED = "Connected"
    CONNECTING = "Connecting"
    DISCONNECTING = "Disconnecting"
    DISCONNECTED = "Disconnected"


# Lifecycle phase set by the app lifespan; None while the store is in steady use.
_lifecycle_state: StoreState | None = None


def set_lifecycle_state(state: StoreState | None) -> None:
    global _lifecycle_state
    _lifecycle_state = state


async def get_session() -> AsyncSession:
    """Dependency for FastAPI routes to get a database session."""
    async with async_session() as session:
        yield session


def get_engine() -> AsyncEngine:
    """Dependency for routes that talk to the engine directly (health probe)."""
    return engine


async def probe_store(db_engine: AsyncEngine) -> bool:
    """Run a trivial query. Returns False if the store cannot be reached."""
    try:
        async with db_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.warning("Record store probe failed", exc_info=True)
        return False
    return True


async def get_store_state(db_engine: AsyncEngine) -> StoreState:
    """Report the store state, probing it unless startup/shutdown is in progress."""
    if _lifecycle_state is not None:
        return _lifecycle_state
    if await probe_store(db_engine):
        return StoreState.CONNECTED
    return StoreState.DISCONNECTED
