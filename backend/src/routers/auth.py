"""Login endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from src.config import Settings, get_settings
from src.models.schemas import LoginRequest, LoginResponse
from src.services.auth_service import authenticate, issue_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    logger.info("Login attempt: %r", body.username)
    user = authenticate(body.username, body.password, settings)
    return LoginResponse(token=issue_token(user, settings), user=user)
