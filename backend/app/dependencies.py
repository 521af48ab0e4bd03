"""
Letter Writer Backend — Request Authentication Dependencies
=============================================================

What:  FastAPI dependencies that turn `Authorization: Bearer <token>` into a
       SessionIdentity.
How:   HTTPBearer(auto_error=False) extracts the credential; SessionService
       verifies it. Both run before any route touches the database.

    get_current_identity   protected routes; 401 without a token, 403 if invalid
    get_optional_identity  /api/auth/reset; None without a usable token
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.exceptions import InvalidTokenError, MissingTokenError
from app.schemas.auth import SessionIdentity
from app.services.session_service import session_service

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="Session token from the OAuth callback")


async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> SessionIdentity:
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    identity = session_service.verify_token(credentials.credentials)
    request.state.identity = identity
    return identity


async def get_optional_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[SessionIdentity]:
    """
    Identity when a usable session token is present, else None.

    Expired or invalid tokens are treated like no token: the endpoints that
    use this are recovery paths a stale client must still be able to reach.
    """
    if credentials is None or not credentials.credentials:
        return None
    try:
        identity = session_service.verify_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.info("Ignoring unusable session token: %s", e.context.get("reason"))
        return None
    request.state.identity = identity
    return identity
