"""
Letter Writer Backend — Authentication Schemas
================================================

What:  Models exchanged with the Google identity provider and the SPA.

    GoogleProfile / GoogleTokens:  what GoogleAuthService returns after a
                                   successful code exchange
    SessionIdentity:               what a verified session token carries
    UserResponse / AuthUrlResponse / AuthSuccessResponse:  API bodies
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.common import CamelModel


class GoogleProfile(BaseModel):
    """Subset of the Google userinfo (v2) response the app stores."""

    id: str = Field(default="", description="Google account id")
    email: str
    name: Optional[str] = None


class GoogleTokens(BaseModel):
    """OAuth tokens issued by Google for one sign-in."""

    access_token: str
    refresh_token: Optional[str] = None
    expiry: Optional[datetime] = Field(default=None, description="Access token expiry (UTC)")


class SessionIdentity(BaseModel):
    """Identity injected into protected requests from a verified session token."""

    user_id: uuid.UUID
    email: str


class UserResponse(CamelModel):
    id: uuid.UUID
    email: str
    name: str


class AuthUrlResponse(BaseModel):
    url: str = Field(description="Google consent screen URL")


class CallbackRequest(BaseModel):
    """Optional JSON body of POST /api/auth/google/callback."""

    code: Optional[str] = None


class AuthSuccessResponse(BaseModel):
    message: str = "Google authentication successful"
    user: UserResponse
    token: str = Field(description="Session bearer token")
