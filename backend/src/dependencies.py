"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.config import Settings, get_settings
from src.services.auth_service import TokenClaims, verify_token

bearer_scheme = HTTPBearer(auto_error=False)


async def require_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> TokenClaims:
    """Verify the bearer token on a protected route and expose its claims."""
    token = credentials.credentials if credentials is not None else None
    return verify_token(token, settings)
