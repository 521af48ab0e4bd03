"""
Letter Writer Backend — Drive Service Tests
=============================================

What:  Drive v3 calls with the discovery client mocked.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.exceptions import ExpiredCredentialError, RemoteError
from app.models import User
from app.services.drive_service import GOOGLE_DOC_MIME_TYPE, DriveService


def _user() -> User:
    return User(id=uuid.uuid4(), email="ann@example.com", name="Ann", access_token="at")


class TestBlockingCalls:

    def setup_method(self):
        self.service = DriveService()

    def test_upload_converts_html_to_google_doc(self):
        with patch("app.services.drive_service.build") as mock_build:
            files = mock_build.return_value.files.return_value
            files.create.return_value.execute.return_value = {"id": "f1", "name": "Dear Ann"}

            result = self.service._upload_html(MagicMock(), "Dear Ann", "<p>Hi</p>")

        assert result["id"] == "f1"
        _, kwargs = files.create.call_args
        assert kwargs["body"] == {"name": "Dear Ann", "mimeType": GOOGLE_DOC_MIME_TYPE}
        assert kwargs["media_body"].mimetype() == "text/html"
        assert kwargs["fields"] == "id, name, webViewLink"

    def test_list_only_documents_newest_first(self):
        with patch("app.services.drive_service.build") as mock_build:
            files = mock_build.return_value.files.return_value
            files.list.return_value.execute.return_value = {"files": [{"id": "f2"}, {"id": "f1"}]}

            result = self.service._list_docs(MagicMock())

        assert [item["id"] for item in result] == ["f2", "f1"]
        _, kwargs = files.list.call_args
        assert GOOGLE_DOC_MIME_TYPE in kwargs["q"]
        assert "trashed=false" in kwargs["q"]
        assert kwargs["orderBy"] == "createdTime desc"

    def test_list_without_files_key(self):
        with patch("app.services.drive_service.build") as mock_build:
            mock_build.return_value.files.return_value.list.return_value.execute.return_value = {}

            assert self.service._list_docs(MagicMock()) == []

    def test_export_decodes_bytes(self):
        with patch("app.services.drive_service.build") as mock_build:
            files = mock_build.return_value.files.return_value
            files.export.return_value.execute.return_value = "Dear Ann,\nHi".encode("utf-8")

            text = self.service._export_text(MagicMock(), "f1")

        assert text == "Dear Ann,\nHi"
        files.export.assert_called_once_with(fileId="f1", mimeType="text/plain")


class TestErrorMapping:

    def setup_method(self):
        self.service = DriveService()

    @pytest.mark.asyncio
    async def test_remote_failure_is_classified(self, mock_db_session):
        with patch("app.services.drive_service.credential_service") as mock_creds, \
             patch.object(DriveService, "_list_docs", side_effect=Exception("backend error")):
            mock_creds.get_valid_credentials = AsyncMock(return_value=MagicMock())

            with pytest.raises(RemoteError) as exc_info:
                await self.service.list_documents(mock_db_session, _user())

        assert exc_info.value.message == "Error listing Google Drive files"

    @pytest.mark.asyncio
    async def test_invalid_grant_during_call(self, mock_db_session):
        with patch("app.services.drive_service.credential_service") as mock_creds, \
             patch.object(DriveService, "_export_text", side_effect=Exception("invalid_grant")):
            mock_creds.get_valid_credentials = AsyncMock(return_value=MagicMock())

            with pytest.raises(ExpiredCredentialError):
                await self.service.get_document_text(mock_db_session, _user(), "f1")

    @pytest.mark.asyncio
    async def test_credential_errors_pass_through(self, mock_db_session):
        with patch("app.services.drive_service.credential_service") as mock_creds, \
             patch.object(DriveService, "_upload_html") as mock_upload:
            mock_creds.get_valid_credentials = AsyncMock(side_effect=ExpiredCredentialError())

            with pytest.raises(ExpiredCredentialError):
                await self.service.save_document(mock_db_session, _user(), "t", "c")

        mock_upload.assert_not_called()


class TestTokenPersistence:

    @pytest.mark.asyncio
    async def test_credentials_handed_back_after_successful_call(self, mock_db_session):
        user = _user()
        credentials = MagicMock()

        with patch("app.services.drive_service.credential_service") as mock_creds, \
             patch.object(DriveService, "_export_text", return_value="Hi") as mock_export:
            mock_creds.get_valid_credentials = AsyncMock(return_value=credentials)
            mock_creds.save_refreshed_token = AsyncMock()

            text = await DriveService().get_document_text(mock_db_session, user, "f1")

        assert text == "Hi"
        mock_export.assert_called_once_with(credentials, "f1")
        mock_creds.save_refreshed_token.assert_awaited_once_with(mock_db_session, user, credentials)

    @pytest.mark.asyncio
    async def test_nothing_saved_when_call_fails(self, mock_db_session):
        with patch("app.services.drive_service.credential_service") as mock_creds, \
             patch.object(DriveService, "_list_docs", side_effect=Exception("backend error")):
            mock_creds.get_valid_credentials = AsyncMock(return_value=MagicMock())
            mock_creds.save_refreshed_token = AsyncMock()

            with pytest.raises(RemoteError):
                await DriveService().list_documents(mock_db_session, _user())

        mock_creds.save_refreshed_token.assert_not_awaited()
