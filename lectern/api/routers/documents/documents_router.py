"""
Document API endpoints.

Routes:
- POST /documents - Upload files for background ingestion
- POST /documents/text - Create a document from direct content
- GET /documents - List the owner's documents
- GET /documents/sessions/{session_id} - Upload session progress
- GET /documents/{id} - Document status and content
- POST /documents/{id}/reingest - Queue re-ingestion from the stored file
- DELETE /documents/{id} - Delete document, vectors and stored file

Dependencies: lectern.application.services, lectern.models
System role: Document HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from lectern.api.deps import get_document_service, get_owner_id
from lectern.application.services.document_service import DocumentService, IncomingFile
from lectern.boundary.db.models.document_model import DocumentStatus
from lectern.models.document import (
    CreateTextDocumentRequest,
    DocumentDetailResponse,
    DocumentListResponse,
    DocumentResponse,
    IngestionAcceptedResponse,
    ReingestResponse,
    TextDocumentCreatedResponse,
)
from lectern.models.session import SessionStatus

from ..error_handling import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post(
    "",
    response_model=IngestionAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
@handle_api_errors
async def upload_documents(
    files: list[UploadFile] | None = File(default=None),
    subject_id: str | None = Form(default=None),
    topic_id: str | None = Form(default=None),
    session_id: str | None = Form(default=None),
    description: str | None = Form(default=None),
    owner_id: str = Depends(get_owner_id),
    document_service: DocumentService = Depends(get_document_service),
) -> IngestionAcceptedResponse:
    """
    Accept one or more files for background ingestion.

    Records are created in PROCESSING and the response returns before any
    extraction happens. Poll GET /documents/sessions/{session_id} for progress.

    Raises:
        HTTPException(400): No files provided
        HTTPException(500): Storage or database failure
    """
    logger.info(
        "Document upload request",
        extra={"owner_id": owner_id, "file_count": len(files or []), "session_id": session_id},
    )

    accepted = await document_service.ingest_files(
        owner_id=owner_id,
        files=[IncomingFile(file_name=f.filename or "", stream=f.file) for f in files or []],
        subject_id=subject_id or None,
        topic_id=topic_id or None,
        session_id=session_id or None,
        description=description or None,
    )
    return IngestionAcceptedResponse(
        document_ids=accepted.document_ids,
        session_id=accepted.session_id,
    )


@router.post(
    "/text",
    response_model=TextDocumentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
@handle_api_errors
async def create_text_document(
    request: CreateTextDocumentRequest,
    owner_id: str = Depends(get_owner_id),
    document_service: DocumentService = Depends(get_document_service),
) -> TextDocumentCreatedResponse:
    """
    Create a document from direct content.

    Raises:
        HTTPException(400): Unsupported document type
    """
    document = await document_service.create_text_document(owner_id, request)
    return TextDocumentCreatedResponse(
        document_id=document.id,
        status=document.status,
        session_id=document.session_id,
    )


@router.get("", response_model=DocumentListResponse)
@handle_api_errors
async def list_documents(
    subject_id: str | None = None,
    topic_id: str | None = None,
    status_filter: DocumentStatus | None = Query(default=None, alias="status"),
    owner_id: str = Depends(get_owner_id),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List the owner's documents, newest first."""
    documents = await document_service.list_documents(
        owner_id,
        subject_id=subject_id,
        topic_id=topic_id,
        status=status_filter,
    )
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(doc) for doc in documents],
        total=len(documents),
    )


@router.get("/sessions/{session_id}", response_model=SessionStatus)
@handle_api_errors
async def get_session_status(
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    document_service: DocumentService = Depends(get_document_service),
) -> SessionStatus:
    """
    Aggregate ingestion progress for an upload session.

    Raises:
        HTTPException(404): No documents carry the session token
    """
    return await document_service.get_session_status(owner_id, session_id)


@router.get("/{document_id}", response_model=DocumentDetailResponse)
@handle_api_errors
async def get_document(
    document_id: UUID,
    owner_id: str = Depends(get_owner_id),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentDetailResponse:
    """
    Read a document's status and extracted content.

    Raises:
        HTTPException(404): Document not found for this owner
    """
    document = await document_service.get_document(owner_id, document_id)
    return DocumentDetailResponse.model_validate(document)


@router.post(
    "/{document_id}/reingest",
    response_model=ReingestResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
@handle_api_errors
async def reingest_document(
    document_id: UUID,
    owner_id: str = Depends(get_owner_id),
    document_service: DocumentService = Depends(get_document_service),
) -> ReingestResponse:
    """
    Queue a document for re-ingestion from its stored file.

    Raises:
        HTTPException(400): The document has no stored file
        HTTPException(404): Document not found for this owner
    """
    document = await document_service.reingest_document(owner_id, document_id)
    return ReingestResponse(document_id=document.id, status=document.status)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_api_errors
async def delete_document(
    document_id: UUID,
    owner_id: str = Depends(get_owner_id),
    document_service: DocumentService = Depends(get_document_service),
) -> None:
    """
    Delete a document with its vectors and stored upload.

    Raises:
        HTTPException(404): Document not found for this owner
        HTTPException(500): Vector deletion failed
    """
    await document_service.delete_document(owner_id, document_id)
