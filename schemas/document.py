# schemas/document.py
from datetime import datetime
from typing import Optional
from pydantic import Field

from models.enums import DocumentEntityType, DocumentStatus, DocumentType, SignatureMethod
from .common import CamelModel


class DocumentResponse(CamelModel):
     id: int
     user_id: int
     entity_type: DocumentEntityType
     entity_id: int
     document_type: DocumentType
     name: str
     mime_type: str
     size: int
     url: str
     description: Optional[str] = None
     status: DocumentStatus
     signed_by: Optional[int] = None
     signed_at: Optional[datetime] = None
     requested_signature_at: Optional[datetime] = None
     signature_method: Optional[SignatureMethod] = None
     notes: Optional[str] = None
     created_at: datetime
     updated_at: datetime


class SignatureRequest(CamelModel):
     notes: Optional[str] = None


class SignDocumentRequest(CamelModel):
     signature_method: SignatureMethod = SignatureMethod.TYPED


class RejectDocumentRequest(CamelModel):
     notes: str = Field(..., min_length=1, description="Why the tenant declined to sign")
