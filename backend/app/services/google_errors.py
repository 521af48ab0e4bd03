"""
Letter Writer Backend — Google API Error Classification
=========================================================

What:  Maps a failure raised by a Google API call onto the application
       exception the client should see.

    "has not been used" / "it is disabled"  → ServiceUnavailableError (503)
    "invalid_grant"                         → ExpiredCredentialError  (401)
    anything else                           → RemoteError             (500)
"""

import logging

from googleapiclient.errors import HttpError

from app.config import settings
from app.exceptions import (
    ExpiredCredentialError,
    LetterWriterError,
    RemoteError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)

API_DISABLED_MARKERS = ("has not been used", "it is disabled")


def _error_text(error: Exception) -> str:
    if isinstance(error, HttpError):
        content = error.content
        if isinstance(content, bytes):
            content = content.decode("utf-8", errors="replace")
        return f"{error.reason or ''} {content or ''} {error}"
    return str(error)


def classify_google_error(
    error: Exception,
    default_message: str = "Error creating Google Doc",
) -> LetterWriterError:
    """Return (not raise) the application exception for a Google API failure."""
    text = _error_text(error)

    if any(marker in text for marker in API_DISABLED_MARKERS):
        logger.error("Google API not enabled for this project: %s", text)
        return ServiceUnavailableError(
            message=(
                "Google Docs API is not enabled. Enable the Google Docs and "
                "Drive APIs for this project and try again."
            ),
            context={"error": text},
        )

    if "invalid_grant" in text:
        logger.warning("Google rejected stored credentials: %s", text)
        return ExpiredCredentialError(
            redirect_url=settings.reauth_url,
            context={"error": text},
        )

    logger.error("Google API call failed: %s", text)
    return RemoteError(message=default_message, context={"error": text})
