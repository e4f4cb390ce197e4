"""Health check endpoint."""

from __future__ import annotations

import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncEngine

from src.database import StoreState, get_engine, get_store_state
from src.models.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(db_engine: AsyncEngine = Depends(get_engine)) -> HealthResponse:
    """Report API liveness and record store reachability. Never requires auth."""
    state = await get_store_state(db_engine)
    if state is StoreState.CONNECTED:
        status, message = "OK", "Patient Management API is running"
    else:
        status, message = "Degraded", "Patient Management API is running without a record store"
    return HealthResponse(
        status=status,
        message=message,
        database=state.value,
        timestamp=datetime.datetime.now(datetime.UTC),
    )
