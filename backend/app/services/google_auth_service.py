"""
Letter Writer Backend — Google Identity Provider Integration
==============================================================

What:  Builds the Google consent URL, exchanges authorization codes for
       tokens and a profile, builds API credentials from stored tokens,
       and revokes tokens.
How:   google-auth-oauthlib `Flow` objects are created per call from the
       read-only client configuration in settings; nothing holding tokens
       lives at module scope. Blocking SDK calls run in Starlette's
       threadpool so the event loop is never blocked.
Who:   Auth routes (consent URL, callback, reset) and CredentialService
       (build_credentials).

Scopes:
    openid, userinfo.email, userinfo.profile  sign-in and profile
    drive.file                                files the app creates
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import httpx
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.exceptions import AuthProviderError
from app.schemas.auth import GoogleProfile, GoogleTokens

logger = logging.getLogger(__name__)

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"
REVOKE_URI = "https://oauth2.googleapis.com/revoke"


class GoogleAuthService:
    """OAuth 2.0 web-server flow against Google."""

    SCOPES = [
        "openid",
        "https://www.googleapis.com/auth/userinfo.email",
        "https://www.googleapis.com/auth/userinfo.profile",
        "https://www.googleapis.com/auth/drive.file",
    ]

    def _client_config(self) -> Dict[str, Any]:
        return {
            "web": {
                "client_id": settings.google_client_id,
                "client_secret": settings.google_client_secret,
                "redirect_uris": [settings.google_callback_url],
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
            }
        }

    def _build_flow(self) -> Flow:
        # Flows are not shared between the consent and callback requests,
        # so no PKCE verifier can be carried across them.
        return Flow.from_client_config(
            self._client_config(),
            scopes=self.SCOPES,
            redirect_uri=settings.google_callback_url,
            autogenerate_code_verifier=False,
        )

    def get_authorization_url(self) -> str:
        """Consent URL with offline access and forced consent, so a refresh token is issued."""
        flow = self._build_flow()
        url, _state = flow.authorization_url(
            access_type="offline",
            include_granted_scopes="true",
            prompt="consent",
        )
        return url

    async def exchange_code(self, code: Optional[str]) -> Tuple[GoogleProfile, GoogleTokens]:
        """
        Exchange an authorization code for tokens and the user's profile.

        Raises:
            AuthProviderError(400): code missing, or profile has no email
            AuthProviderError(401): Google rejected the code or the profile call failed
        """
        if not code or not code.strip():
            raise AuthProviderError("Authorization code is required", status_code=400)

        flow = self._build_flow()
        try:
            await run_in_threadpool(flow.fetch_token, code=code)
        except Exception as e:
            logger.warning("Google rejected authorization code: %s", str(e))
            raise AuthProviderError(
                "Google authentication failed",
                context={"error": str(e)},
            )

        credentials = flow.credentials
        try:
            profile_data = await run_in_threadpool(self._fetch_profile, credentials)
        except Exception as e:
            logger.warning("Failed to fetch Google profile: %s", str(e))
            raise AuthProviderError(
                "Failed to fetch Google profile",
                context={"error": str(e)},
            )

        email = profile_data.get("email")
        if not email:
            raise AuthProviderError("Google profile has no email address", status_code=400)

        profile = GoogleProfile(
            id=str(profile_data.get("id") or ""),
            email=email,
            name=profile_data.get("name"),
        )
        tokens = GoogleTokens(
            access_token=credentials.token,
            refresh_token=credentials.refresh_token,
            expiry=credentials.expiry,
        )
        logger.info("Google sign-in completed for %s", email)
        return profile, tokens

    def _fetch_profile(self, credentials: Credentials) -> Dict[str, Any]:
        service = build("oauth2", "v2", credentials=credentials, cache_discovery=False)
        return service.userinfo().get().execute()

    def build_credentials(
        self,
        access_token: str,
        refresh_token: Optional[str],
        expiry: Optional[datetime] = None,
    ) -> Credentials:
        """
        Credentials for Google API clients, bound to this app's OAuth client.

        The stored expiry is handed to google-auth as naive UTC, the form it
        compares against, so the SDK and CredentialService agree on when the
        token is stale.
        """
        if expiry is not None and expiry.tzinfo is not None:
            expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)
        return Credentials(
            token=access_token,
            refresh_token=refresh_token,
            token_uri=TOKEN_URI,
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            scopes=self.SCOPES,
            expiry=expiry,
        )

    async def revoke_token(self, token: str) -> None:
        """Revoke a token at Google. Raises httpx.HTTPError on failure."""
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.post(
                REVOKE_URI,
                params={"token": token},
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            response.raise_for_status()


google_auth_service = GoogleAuthService()
