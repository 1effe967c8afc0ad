# routers/documents.py
"""
Document routes: uploads to blob storage plus the lease signature workflow.

A document is visible to its uploader and to anyone who can see the entity it
is attached to.
"""
import os
from typing import List, Optional

from azure.core.exceptions import AzureError
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from azure_blob import delete_from_blob, upload_to_blob
from config import DOCUMENTS_CONTAINER
from database import get_session
from dependencies import get_scope
from logging_config import logger
from models.enums import DocumentEntityType, DocumentType
from schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from schemas.document import DocumentResponse, RejectDocumentRequest, SignatureRequest, SignDocumentRequest
from services import document_service
from services.access_service import AccessScope
from services.document_service import DocumentOwner
from services.exceptions import StorageUnavailableError
from services.policy import Action, Resource
from services.scoping import paginate, require_role

router = APIRouter(prefix="/api/documents", tags=["documents"])


def _file_size(file: UploadFile) -> int:
     file.file.seek(0, os.SEEK_END)
     size = file.file.tell()
     file.file.seek(0)
     return size


def _discard_blob(blob_name: str) -> None:
     try:
          delete_from_blob(DOCUMENTS_CONTAINER, blob_name)
     except AzureError as e:
          logger.warning("Blob %s was not removed: %s", blob_name, e)


@router.get(
     "",
     response_model=PaginatedResponse[DocumentResponse],
     summary="List documents"
)
def list_documents(
     entity_type: Optional[DocumentEntityType] = Query(None, alias="entityType", description="tenant, property, unit or payment"),
     entity_id: Optional[int] = Query(None, alias="entityId", description="Id of the owning entity"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.DOCUMENT, Action.READ)
     owner = None
     if entity_type is not None and entity_id is not None:
          owner = DocumentOwner(entity_type, entity_id)
     query = document_service.visible_documents(db, scope, owner)
     if entity_type is not None and owner is None:
          query = query.filter_by(entity_type=entity_type)
     items, pagination = paginate(query, page, page_size)
     return PaginatedResponse[DocumentResponse](
          data=[DocumentResponse.model_validate(d) for d in items],
          pagination=pagination,
     )


@router.get(
     "/entity/{entity_type}/{entity_id}",
     response_model=ApiResponse[List[DocumentResponse]],
     summary="List the documents attached to an entity"
)
def list_entity_documents(
     entity_type: DocumentEntityType,
     entity_id: int,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.DOCUMENT, Action.READ)
     owner = document_service.owner_or_404(db, scope, entity_type, entity_id)
     documents = document_service.visible_documents(db, scope, owner).all()
     return ApiResponse[List[DocumentResponse]](data=[DocumentResponse.model_validate(d) for d in documents])


@router.get(
     "/{document_id}",
     response_model=ApiResponse[DocumentResponse],
     summary="Get a document"
)
def get_document(document_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.DOCUMENT, Action.READ)
     document = document_service.get_document(db, scope, document_id)
     return ApiResponse[DocumentResponse](data=DocumentResponse.model_validate(document))


@router.post(
     "",
     response_model=ApiResponse[DocumentResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Upload a document"
)
def upload_document(
     file: UploadFile = File(...),
     entity_type: DocumentEntityType = Form(..., alias="entityType"),
     entity_id: int = Form(..., alias="entityId"),
     document_type: DocumentType = Form(..., alias="documentType"),
     description: Optional[str] = Form(None),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     """
     Multipart upload (max 10 MB). The entity must exist and be visible to
     the caller; the file goes to blob storage before the row is written.
     """
     require_role(scope, Resource.DOCUMENT, Action.CREATE)
     owner = document_service.owner_or_404(db, scope, entity_type, entity_id)
     size = _file_size(file)
     document_service.ensure_uploadable(size)

     try:
          url, blob_name = upload_to_blob(file, DOCUMENTS_CONTAINER, scope.user_id)
     except AzureError as e:
          logger.error("Blob upload failed for user %s: %s", scope.user_id, e)
          raise StorageUnavailableError("File storage is unavailable, please try again")

     try:
          document = document_service.create_document(
               db, scope, owner,
               document_type=document_type,
               name=file.filename or blob_name,
               mime_type=file.content_type or "application/octet-stream",
               size=size,
               url=url,
               public_id=blob_name,
               description=description,
          )
          db.commit()
     except Exception:
          db.rollback()
          _discard_blob(blob_name)
          raise
     return ApiResponse[DocumentResponse](data=DocumentResponse.model_validate(document), message="Document uploaded")


@router.delete(
     "/{document_id}",
     response_model=MessageResponse,
     summary="Delete a document"
)
def delete_document(document_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.DOCUMENT, Action.DELETE)
     document = document_service.delete_document(db, scope, document_id)
     db.commit()
     _discard_blob(document.public_id)
     return MessageResponse(message="Document deleted")


# ---------------------------------------------------------------------------
# Signature workflow
# ---------------------------------------------------------------------------

@router.post(
     "/{document_id}/request-signature",
     response_model=ApiResponse[DocumentResponse],
     summary="Send a lease agreement to the tenant for signature"
)
def request_signature(
     document_id: int,
     body: Optional[SignatureRequest] = None,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.DOCUMENT, Action.UPDATE)
     notes = body.notes if body else None
     document = document_service.request_signature(db, scope, document_id, notes)
     db.commit()
     return ApiResponse[DocumentResponse](
          data=DocumentResponse.model_validate(document), message="Signature requested"
     )


@router.post(
     "/{document_id}/sign",
     response_model=ApiResponse[DocumentResponse],
     summary="Sign a lease agreement"
)
def sign_document(
     document_id: int,
     body: Optional[SignDocumentRequest] = None,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.DOCUMENT, Action.SIGN)
     method = body.signature_method if body else SignDocumentRequest().signature_method
     document = document_service.sign_document(db, scope, document_id, method)
     db.commit()
     return ApiResponse[DocumentResponse](data=DocumentResponse.model_validate(document), message="Document signed")


@router.post(
     "/{document_id}/reject",
     response_model=ApiResponse[DocumentResponse],
     summary="Decline to sign a lease agreement"
)
def reject_document(
     document_id: int,
     body: RejectDocumentRequest,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.DOCUMENT, Action.SIGN)
     document = document_service.reject_document(db, scope, document_id, body.notes)
     db.commit()
     return ApiResponse[DocumentResponse](data=DocumentResponse.model_validate(document), message="Document rejected")
