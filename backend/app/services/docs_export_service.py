"""
Letter Writer Backend — Google Docs Export
============================================

What:  Exports a letter to a new Google Doc owned by the letter's author.
How:   ownership check → valid credentials (refresh once if expired) →
       documents.create → documents.batchUpdate(insertText) → record the
       document id on the letter.
Who:   POST /api/letters/{id}/save-to-drive

Export Flow:
    ┌──────────┐    ┌─────────────┐    ┌─────────────┐    ┌──────────────┐
    │  Letter  │───▶│ Credentials │───▶│  Docs API   │───▶│ google_doc_id│
    │ (owner)  │    │  (refresh)  │    │ create+text │    │   (store)    │
    └──────────┘    └─────────────┘    └─────────────┘    └──────────────┘

On any failure the letter's google_doc_id is left unchanged. Every export
creates a new document; an earlier export is never overwritten.
"""

import logging
import uuid

from bs4 import BeautifulSoup
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.exceptions import LetterWriterError
from app.services.credential_service import credential_service
from app.services.google_errors import classify_google_error
from app.services.letter_service import letter_service
from app.services.user_service import user_service

logger = logging.getLogger(__name__)


BLOCK_TAGS = (
    "p", "div", "h1", "h2", "h3", "h4", "h5", "h6",
    "li", "blockquote", "pre", "tr",
)

# Marks a line the author left empty, so it survives whitespace cleanup
_EMPTY_LINE = "\ue000"


def html_to_text(html: str) -> str:
    """
    Plain text of the editor's HTML: one line per block element or <br>,
    inline markup (<b>, <em>, <a>) kept on its line.

    An empty paragraph (`<p><br></p>`, `<p></p>`) or a repeated <br> is a
    blank line the author typed and is kept. Whitespace-only lines that
    come from source formatting between tags are dropped, as are leading
    and trailing blank lines.
    """
    if not html or not html.strip():
        return ""
    soup = BeautifulSoup(html, "lxml")
    for block in soup.find_all(BLOCK_TAGS):
        is_leaf = block.find(BLOCK_TAGS) is None
        if is_leaf and not block.get_text().strip() and block.find("br") is None:
            block.append(_EMPTY_LINE)
    for br in soup.find_all("br"):
        br.replace_with(_EMPTY_LINE + "\n")
    for block in soup.find_all(BLOCK_TAGS):
        block.append("\n")

    lines = []
    for line in soup.get_text().splitlines():
        if _EMPTY_LINE in line or line.strip():
            lines.append(line.replace(_EMPTY_LINE, "").strip())
    return "\n".join(lines).strip("\n")


class DocsExportService:

    async def export_letter(
        self,
        db: AsyncSession,
        letter_id: uuid.UUID,
        owner_id: uuid.UUID,
    ) -> str:
        """
        Export one letter and return the new Google Doc id.

        Raises:
            NotFoundError / ForbiddenError: from the ownership check
            MissingCredentialError / ExpiredCredentialError: Google access lost
            ServiceUnavailableError: Docs API not enabled (503)
            RemoteError: any other Google failure (500)
        """
        letter = await letter_service.get_owned_letter(db, letter_id, owner_id)
        user = await user_service.get_user(db, letter.user_id)
        credentials = await credential_service.get_valid_credentials(db, user)

        text = html_to_text(letter.content)
        try:
            document_id = await run_in_threadpool(
                self._write_document,
                credentials,
                letter.title,
                text,
            )
        except LetterWriterError:
            raise
        except Exception as e:
            raise classify_google_error(e, default_message="Error creating Google Doc")

        await credential_service.save_refreshed_token(db, user, credentials)
        await letter_service.set_google_doc_id(db, letter, document_id)
        logger.info("Letter %s exported to Google Doc %s", letter.id, document_id)
        return document_id

    def _write_document(self, credentials: Credentials, title: str, text: str) -> str:
        docs = build("docs", "v1", credentials=credentials, cache_discovery=False)
        document = docs.documents().create(body={"title": title}).execute()
        document_id = document["documentId"]

        if text:
            docs.documents().batchUpdate(
                documentId=document_id,
                body={
                    "requests": [
                        {"insertText": {"location": {"index": 1}, "text": text}},
                    ]
                },
            ).execute()
        return document_id


docs_export_service = DocsExportService()
