"""
Letter Writer Backend — Session Token Tests
=============================================

What we test:
    ✅ Issued tokens verify back to the same identity
    ✅ Expired, tampered, foreign-secret and malformed tokens are rejected
    ✅ Tokens without sub/email claims are rejected
"""

import uuid
from datetime import timedelta

import pytest
from jose import jwt

from app.config import settings
from app.exceptions import InvalidTokenError
from app.services.session_service import SessionService


class TestIssueAndVerify:

    def setup_method(self):
        self.service = SessionService()
        self.user_id = uuid.uuid4()

    def test_round_trip(self):
        token = self.service.issue_token(self.user_id, "ann@example.com")

        identity = self.service.verify_token(token)

        assert identity.user_id == self.user_id
        assert identity.email == "ann@example.com"

    def test_default_lifetime_is_configured_minutes(self):
        token = self.service.issue_token(self.user_id, "ann@example.com")
        claims = jwt.get_unverified_claims(token)

        assert claims["exp"] - claims["iat"] == settings.jwt_expires_minutes * 60
        assert claims["sub"] == str(self.user_id)

    def test_expired_token_rejected(self):
        token = self.service.issue_token(
            self.user_id, "ann@example.com", expires_delta=timedelta(minutes=-5)
        )

        with pytest.raises(InvalidTokenError) as exc_info:
            self.service.verify_token(token)

        assert exc_info.value.status_code == 403
        assert exc_info.value.context["reason"] == "expired"


class TestRejectedTokens:

    def setup_method(self):
        self.service = SessionService()
        self.user_id = uuid.uuid4()

    def test_wrong_secret(self):
        token = jwt.encode(
            {"sub": str(self.user_id), "email": "ann@example.com"},
            "some-other-secret",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token)

    def test_tampered_payload(self):
        genuine = self.service.issue_token(self.user_id, "ann@example.com")
        forged = self.service.issue_token(uuid.uuid4(), "mallory@example.com")
        header, _, signature = genuine.split(".")
        _, forged_payload, _ = forged.split(".")

        with pytest.raises(InvalidTokenError):
            self.service.verify_token(f"{header}.{forged_payload}.{signature}")

    def test_malformed(self):
        with pytest.raises(InvalidTokenError):
            self.service.verify_token("not-a-token")

    def test_missing_email_claim(self):
        token = jwt.encode(
            {"sub": str(self.user_id)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(InvalidTokenError) as exc_info:
            self.service.verify_token(token)

        assert exc_info.value.context["reason"] == "missing_claims"

    def test_subject_not_a_uuid(self):
        token = jwt.encode(
            {"sub": "42", "email": "ann@example.com"},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token)
