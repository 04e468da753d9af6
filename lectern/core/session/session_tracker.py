"""
Session tracker.

Aggregates the ingestion status of every document submitted under one
session token. Nothing is cached: each read recomputes from the records.

Dependencies: sqlalchemy, lectern.boundary.db
System role: Progress reporting for multi-file uploads
"""

from collections import Counter
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from lectern.boundary.db.CRUD.document_crud import document_crud
from lectern.boundary.db.models.document_model import DocumentModel, DocumentStatus
from lectern.core.exceptions import SessionNotFoundError
from lectern.models.session import DocumentSummary, SessionStatus


def summarize_session(session_id: str, documents: Sequence[DocumentModel]) -> SessionStatus:
    """
    Count documents per status for one session.

    Args:
        session_id: Batch token
        documents: Every document carrying the token

    Returns:
        SessionStatus: Counts, completeness flag and per-document summaries
    """
    counts = Counter(document.status for document in documents)
    return SessionStatus(
        session_id=session_id,
        completed=counts[DocumentStatus.COMPLETED],
        processing=counts[DocumentStatus.PROCESSING],
        errored=counts[DocumentStatus.ERROR],
        ready=counts[DocumentStatus.READY],
        total=len(documents),
        is_complete=counts[DocumentStatus.PROCESSING] == 0,
        documents=[DocumentSummary.model_validate(document) for document in documents],
    )


class SessionTracker:
    """Read-side view over documents grouped by session token."""

    async def get_status(
        self,
        db: AsyncSession,
        owner_id: str,
        session_id: str,
    ) -> SessionStatus:
        """
        Compute the current status of an owner's session.

        Raises:
            SessionNotFoundError: When the owner has no documents under the token
        """
        documents = await document_crud.get_by_session(db, owner_id, session_id)
        if not documents:
            raise SessionNotFoundError(session_id)
        return summarize_session(session_id, documents)
