"""
Letter Writer Backend — Google Drive Operations
=================================================

What:  Upload HTML as a new Google Doc, list the Docs this app created,
       and export a Doc as plain text.
How:   Drive v3 with the user's credentials (CredentialService). The app
       holds only the drive.file scope, so listings contain files the app
       created or the user opened with it.
Who:   /api/drive routes.
"""

import io
import logging
from typing import Any, Dict, List

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.exceptions import LetterWriterError
from app.models.user import User
from app.services.credential_service import credential_service
from app.services.google_errors import classify_google_error

logger = logging.getLogger(__name__)

GOOGLE_DOC_MIME_TYPE = "application/vnd.google-apps.document"


class DriveService:

    async def save_document(
        self,
        db: AsyncSession,
        user: User,
        title: str,
        content: str,
    ) -> Dict[str, Any]:
        """Returns {id, name, webViewLink} of the created Doc."""
        result = await self._call(
            db,
            user,
            self._upload_html,
            title,
            content,
            default_message="Error saving to Google Drive",
        )
        logger.info("User %s saved Google Doc %s", user.id, result.get("id"))
        return result

    async def list_documents(self, db: AsyncSession, user: User) -> List[Dict[str, Any]]:
        return await self._call(
            db,
            user,
            self._list_docs,
            default_message="Error listing Google Drive files",
        )

    async def get_document_text(self, db: AsyncSession, user: User, file_id: str) -> str:
        return await self._call(
            db,
            user,
            self._export_text,
            file_id,
            default_message="Error reading Google Doc",
        )

    async def _call(self, db: AsyncSession, user: User, func, *args, default_message: str):
        credentials = await credential_service.get_valid_credentials(db, user)
        try:
            result = await run_in_threadpool(func, credentials, *args)
        except LetterWriterError:
            raise
        except Exception as e:
            raise classify_google_error(e, default_message=default_message)

        await credential_service.save_refreshed_token(db, user, credentials)
        return result

    # ── Blocking Drive calls (run in the threadpool) ──────────────────────

    def _drive(self, credentials: Credentials):
        return build("drive", "v3", credentials=credentials, cache_discovery=False)

    def _upload_html(self, credentials: Credentials, title: str, content: str) -> Dict[str, Any]:
        media = MediaIoBaseUpload(
            io.BytesIO((content or "").encode("utf-8")),
            mimetype="text/html",
            resumable=False,
        )
        return self._drive(credentials).files().create(
            body={"name": title, "mimeType": GOOGLE_DOC_MIME_TYPE},
            media_body=media,
            fields="id, name, webViewLink",
        ).execute()

    def _list_docs(self, credentials: Credentials) -> List[Dict[str, Any]]:
        response = self._drive(credentials).files().list(
            q=f"mimeType='{GOOGLE_DOC_MIME_TYPE}' and trashed=false",
            fields="files(id, name, mimeType, webViewLink, createdTime)",
            orderBy="createdTime desc",
        ).execute()
        return response.get("files", [])

    def _export_text(self, credentials: Credentials, file_id: str) -> str:
        data = self._drive(credentials).files().export(
            fileId=file_id,
            mimeType="text/plain",
        ).execute()
        if isinstance(data, bytes):
            return data.decode("utf-8")
        return data or ""


drive_service = DriveService()
