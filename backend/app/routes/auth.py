"""
Letter Writer Backend — Authentication Route Handlers
=======================================================

What:  Google sign-in, the current user, and OAuth reset.
Who:   The SPA's login button, Google's redirect, and the SPA header.

Sign-in sequence:
    SPA ──POST /api/auth/google──▶ { url } ──▶ Google consent screen
    Google ──GET /api/auth/google/callback?code=…──▶ upsert user, issue token
        Accept: application/json → { message, user, token }
        otherwise                → 307 {FRONTEND_URL}/auth/google/callback?token=…
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx
import pydantic
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.dependencies import get_current_identity, get_optional_identity
from app.exceptions import AuthProviderError
from app.schemas.auth import (
    AuthSuccessResponse,
    AuthUrlResponse,
    CallbackRequest,
    SessionIdentity,
    UserResponse,
)
from app.schemas.common import ErrorResponse, MessageResponse
from app.services.google_auth_service import google_auth_service
from app.services.session_service import session_service
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _wants_json(request: Request) -> bool:
    return "application/json" in request.headers.get("accept", "").lower()


async def _code_from_body(request: Request) -> Optional[str]:
    if request.method != "POST":
        return None
    if "application/json" not in request.headers.get("content-type", ""):
        return None
    try:
        body = CallbackRequest.model_validate_json(await request.body())
    except pydantic.ValidationError:
        raise AuthProviderError("Request body is not a valid callback payload", status_code=400)
    return body.code


@router.post(
    "/google",
    response_model=AuthUrlResponse,
    summary="Start Google sign-in",
)
async def start_google_auth() -> AuthUrlResponse:
    """Returns the Google consent URL the SPA should navigate to."""
    return AuthUrlResponse(url=google_auth_service.get_authorization_url())


async def _complete_google_auth(
    request: Request,
    code: Optional[str],
    error: Optional[str],
    db: AsyncSession,
):
    if error:
        raise AuthProviderError(
            f"Google sign-in was not completed: {error}",
            context={"provider_error": error},
        )

    code = code or await _code_from_body(request)
    profile, tokens = await google_auth_service.exchange_code(code)

    user = await user_service.upsert_from_google(db, profile, tokens)
    token = session_service.issue_token(user.id, user.email)

    if _wants_json(request):
        body = AuthSuccessResponse(user=UserResponse.model_validate(user), token=token)
        return JSONResponse(content=body.model_dump(mode="json", by_alias=True))

    target = (
        f"{settings.frontend_url.rstrip('/')}/auth/google/callback?"
        f"{urlencode({'token': token})}"
    )
    return RedirectResponse(url=target, status_code=307)


@router.api_route(
    "/google/callback",
    methods=["GET", "POST"],
    response_model=AuthSuccessResponse,
    responses={
        307: {"description": "Redirect to the SPA with ?token="},
        400: {"description": "Missing authorization code", "model": ErrorResponse},
        401: {"description": "Google rejected the code", "model": ErrorResponse},
    },
    summary="Google OAuth callback",
)
async def google_callback(
    request: Request,
    code: Optional[str] = Query(default=None),
    error: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
):
    return await _complete_google_auth(request, code, error, db)


@router.get(
    "/",
    response_model=AuthSuccessResponse,
    summary="Google OAuth callback (alternate redirect URI)",
    include_in_schema=False,
)
async def google_callback_alias(
    request: Request,
    code: Optional[str] = Query(default=None),
    error: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
):
    return await _complete_google_auth(request, code, error, db)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={
        401: {"description": "No session token", "model": ErrorResponse},
        403: {"description": "Invalid or expired session token", "model": ErrorResponse},
    },
    summary="Current user",
)
async def get_me(
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.get_user(db, identity.user_id)
    return UserResponse.model_validate(user)


@router.get(
    "/reset",
    response_model=MessageResponse,
    summary="Clear stored Google credentials",
)
async def reset_oauth(
    return_to: Optional[str] = Query(default=None, alias="returnTo"),
    identity: Optional[SessionIdentity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Forget the caller's Google tokens so the next sign-in starts clean.

    With a valid session token, the stored access token is revoked at
    Google (failure is logged, not returned) and the tokens are cleared.
    Without one, or with an expired or invalid one, nothing is cleared and
    the call still succeeds. `?returnTo=login` redirects straight to a
    fresh consent screen.
    """
    if identity is not None:
        user = await user_service.find_user(db, identity.user_id)
        if user is not None and (user.access_token or user.refresh_token):
            revoke = user.access_token or user.refresh_token
            try:
                await google_auth_service.revoke_token(revoke)
            except httpx.HTTPError as e:
                logger.warning("Token revocation for user %s failed: %s", user.id, str(e))
            await user_service.clear_google_tokens(db, user)

    if return_to == "login":
        return RedirectResponse(url=google_auth_service.get_authorization_url(), status_code=307)

    return MessageResponse(message="OAuth state reset successfully")
