"""
Letter Writer Backend — Google Auth Service Tests
===================================================

What:  Consent URL and code exchange with google-auth-oauthlib and the
       discovery client mocked out.

What we test:
    ✅ Consent URL requests offline access, forced consent, and drive.file
    ✅ Missing code → 400; rejected code → 401; profile without email → 400
    ✅ Successful exchange returns the profile and tokens
    ✅ build_credentials binds the app's OAuth client and the stored expiry (naive UTC)
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from app.config import settings
from app.exceptions import AuthProviderError
from app.services.google_auth_service import GoogleAuthService


def _flow_with_credentials(token="access-1", refresh_token="refresh-1", expiry=None):
    flow = MagicMock()
    flow.credentials = MagicMock(token=token, refresh_token=refresh_token, expiry=expiry)
    return flow


class TestAuthorizationUrl:

    def test_requests_offline_access_with_consent(self):
        service = GoogleAuthService()
        with patch("app.services.google_auth_service.Flow") as mock_flow_cls:
            flow = mock_flow_cls.from_client_config.return_value
            flow.authorization_url.return_value = ("https://accounts.google.com/o/oauth2/auth?x=1", "state")

            url = service.get_authorization_url()

        assert url.startswith("https://accounts.google.com/")
        _, kwargs = flow.authorization_url.call_args
        assert kwargs["access_type"] == "offline"
        assert kwargs["prompt"] == "consent"

        config_arg = mock_flow_cls.from_client_config.call_args.args[0]
        flow_kwargs = mock_flow_cls.from_client_config.call_args.kwargs
        assert config_arg["web"]["client_id"] == settings.google_client_id
        assert "https://www.googleapis.com/auth/drive.file" in flow_kwargs["scopes"]
        assert flow_kwargs["redirect_uri"] == settings.google_callback_url


class TestExchangeCode:

    def setup_method(self):
        self.service = GoogleAuthService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", [None, "", "   "])
    async def test_missing_code_is_bad_request(self, code):
        with pytest.raises(AuthProviderError) as exc_info:
            await self.service.exchange_code(code)

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_rejected_code_is_unauthorized(self):
        with patch("app.services.google_auth_service.Flow") as mock_flow_cls:
            flow = mock_flow_cls.from_client_config.return_value
            flow.fetch_token.side_effect = Exception("invalid_grant: Bad Request")

            with pytest.raises(AuthProviderError) as exc_info:
                await self.service.exchange_code("bad-code")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_profile_without_email(self):
        with patch("app.services.google_auth_service.Flow") as mock_flow_cls, \
             patch("app.services.google_auth_service.build") as mock_build:
            mock_flow_cls.from_client_config.return_value = _flow_with_credentials()
            userinfo = mock_build.return_value.userinfo.return_value
            userinfo.get.return_value.execute.return_value = {"id": "123", "name": "No Mail"}

            with pytest.raises(AuthProviderError) as exc_info:
                await self.service.exchange_code("good-code")

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_success_returns_profile_and_tokens(self):
        expiry = datetime(2030, 1, 1, 12, 0, 0)
        with patch("app.services.google_auth_service.Flow") as mock_flow_cls, \
             patch("app.services.google_auth_service.build") as mock_build:
            flow = _flow_with_credentials(expiry=expiry)
            mock_flow_cls.from_client_config.return_value = flow
            userinfo = mock_build.return_value.userinfo.return_value
            userinfo.get.return_value.execute.return_value = {
                "id": "123",
                "email": "ann@example.com",
                "name": "Ann",
            }

            profile, tokens = await self.service.exchange_code("good-code")

        flow.fetch_token.assert_called_once_with(code="good-code")
        assert profile.email == "ann@example.com"
        assert profile.id == "123"
        assert tokens.access_token == "access-1"
        assert tokens.refresh_token == "refresh-1"
        assert tokens.expiry == expiry


class TestBuildCredentials:

    def test_binds_client_and_tokens(self):
        credentials = GoogleAuthService().build_credentials("access", "refresh")

        assert credentials.token == "access"
        assert credentials.refresh_token == "refresh"
        assert credentials.client_id == settings.google_client_id
        assert credentials.client_secret == settings.google_client_secret
        assert credentials.expiry is None

    def test_stored_expiry_is_passed_as_naive_utc(self):
        stored = datetime(2030, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))

        credentials = GoogleAuthService().build_credentials("access", "refresh", expiry=stored)

        assert credentials.expiry == datetime(2030, 1, 1, 12, 0)
        assert credentials.expired is False

    def test_past_expiry_marks_credentials_expired(self):
        stored = datetime.now(timezone.utc) - timedelta(hours=1)

        credentials = GoogleAuthService().build_credentials("access", "refresh", expiry=stored)

        assert credentials.expired is True
