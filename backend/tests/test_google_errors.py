"""
Letter Writer Backend — Google Error Classification Tests
===========================================================
"""

import json

import httplib2
import pytest
from googleapiclient.errors import HttpError

from app.config import settings
from app.exceptions import ExpiredCredentialError, RemoteError, ServiceUnavailableError
from app.services.google_errors import classify_google_error


def _http_error(status: int, message: str) -> HttpError:
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(httplib2.Response({"status": status}), content)


class TestClassifyGoogleError:

    @pytest.mark.parametrize(
        "message",
        [
            "Google Docs API has not been used in project 42 before",
            "Google Drive API is disabled: it is disabled for this project",
        ],
    )
    def test_api_not_enabled(self, message):
        error = classify_google_error(_http_error(403, message))

        assert isinstance(error, ServiceUnavailableError)
        assert error.status_code == 503
        assert error.error_code == "api_not_enabled"

    def test_invalid_grant_means_expired_credentials(self):
        error = classify_google_error(Exception("invalid_grant: Token has been expired or revoked."))

        assert isinstance(error, ExpiredCredentialError)
        assert error.redirect_url == settings.reauth_url

    def test_anything_else_is_remote_error(self):
        error = classify_google_error(_http_error(500, "Internal error encountered."))

        assert isinstance(error, RemoteError)
        assert error.status_code == 500
        assert error.message == "Error creating Google Doc"
        assert "Internal error encountered." in error.context["error"]

    def test_custom_default_message(self):
        error = classify_google_error(
            Exception("quota exceeded"),
            default_message="Error listing Google Drive files",
        )

        assert error.message == "Error listing Google Drive files"
