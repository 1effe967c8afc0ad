# services/document_service.py
"""
Document Service - files attached to tenants, properties, units and payments.

A document points at its owner through (entity_type, entity_id). The owner is
resolved through OWNER_MODELS / OWNER_QUERIES, and must exist *and* be visible
to the caller when the document is written.

Lease agreements additionally run a signature workflow:

     draft -> pending_signature -> signed | rejected

signed and rejected are terminal. Every other document type stays in draft.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query, Session

from models import Document, Payment, Property, Tenant, Unit
from models.enums import (
     AuditEntityType,
     DocumentEntityType,
     DocumentStatus,
     DocumentType,
     NotificationType,
     SignatureMethod,
)
from logging_config import logger
from . import audit_service, notification_service
from .access_service import AccessScope
from .exceptions import BusinessRuleError, ForbiddenError
from .policy import Action, Resource, required_capability
from .scoping import (
     get_or_404,
     payment_query,
     property_id_of,
     property_query,
     require_capability,
     tenant_query,
     unit_query,
)

MAX_DOCUMENT_SIZE = 10 * 1024 * 1024

OWNER_MODELS = {
     DocumentEntityType.TENANT: Tenant,
     DocumentEntityType.PROPERTY: Property,
     DocumentEntityType.UNIT: Unit,
     DocumentEntityType.PAYMENT: Payment,
}

OWNER_QUERIES: Dict[DocumentEntityType, Callable[..., Query]] = {
     DocumentEntityType.TENANT: tenant_query,
     DocumentEntityType.PROPERTY: property_query,
     DocumentEntityType.UNIT: unit_query,
     DocumentEntityType.PAYMENT: payment_query,
}

OWNER_RESOURCES = {
     DocumentEntityType.TENANT: Resource.TENANT,
     DocumentEntityType.PROPERTY: Resource.PROPERTY,
     DocumentEntityType.UNIT: Resource.UNIT,
     DocumentEntityType.PAYMENT: Resource.PAYMENT,
}

SIGNATURE_TRANSITIONS = {
     DocumentStatus.DRAFT: {DocumentStatus.PENDING_SIGNATURE},
     DocumentStatus.PENDING_SIGNATURE: {DocumentStatus.SIGNED, DocumentStatus.REJECTED},
     DocumentStatus.SIGNED: set(),
     DocumentStatus.REJECTED: set(),
}


@dataclass(frozen=True)
class DocumentOwner:
     entity_type: DocumentEntityType
     entity_id: int

     @property
     def model(self):
          return OWNER_MODELS[self.entity_type]

     @property
     def resource(self) -> Resource:
          return OWNER_RESOURCES[self.entity_type]


def resolve_owner(db: Session, scope: AccessScope, owner: DocumentOwner):
     """
     The owning row, provided it exists and the caller can see it (404 otherwise).

     Managers also need the view capability for the owner's resource on its
     property (403 otherwise).
     """
     query = OWNER_QUERIES[owner.entity_type](db, scope)
     row = get_or_404(query, owner.model, owner.entity_id, owner.entity_type.value.capitalize())
     require_capability(scope, property_id_of(row), owner.resource, Action.READ)
     return row


def visible_documents(db: Session, scope: AccessScope, owner: Optional[DocumentOwner] = None):
     """
     Documents the caller uploaded or whose owner entity is in scope.

     For managers the owner must also be on a property where they hold the
     view capability of its resource (tenants, payments).
     """
     query = db.query(Document)
     if owner is not None:
          query = query.filter(Document.entity_type == owner.entity_type, Document.entity_id == owner.entity_id)
     if scope.is_unrestricted:
          return query.order_by(Document.created_at.desc(), Document.id.desc())

     conditions = [Document.user_id == scope.user_id]
     for entity_type, model in OWNER_MODELS.items():
          capability = required_capability(OWNER_RESOURCES[entity_type], Action.READ)
          ids = OWNER_QUERIES[entity_type](db, scope, capability).with_entities(model.id)
          conditions.append(and_(Document.entity_type == entity_type, Document.entity_id.in_(ids)))
     return query.filter(or_(*conditions)).order_by(Document.created_at.desc(), Document.id.desc())


def get_document(db: Session, scope: AccessScope, document_id: int) -> Document:
     return get_or_404(visible_documents(db, scope), Document, document_id, "Document")


def create_document(
     db: Session,
     scope: AccessScope,
     owner: DocumentOwner,
     document_type: DocumentType,
     name: str,
     mime_type: str,
     size: int,
     url: str,
     public_id: str,
     description: Optional[str] = None,
) -> Document:
     document = Document(
          user_id=scope.user_id,
          entity_type=owner.entity_type,
          entity_id=owner.entity_id,
          document_type=document_type,
          name=name,
          mime_type=mime_type,
          size=size,
          url=url,
          public_id=public_id,
          description=description,
          status=DocumentStatus.DRAFT,
     )
     db.add(document)
     db.flush()
     audit_service.record(db, scope.user_id, "document.upload", AuditEntityType.DOCUMENT, document.id,
                          f"Uploaded {name}",
                          metadata={"entity_type": owner.entity_type.value, "entity_id": owner.entity_id})
     logger.info("Document %s uploaded for %s %s", document.id, owner.entity_type.value, owner.entity_id)
     return document


def delete_document(db: Session, scope: AccessScope, document_id: int) -> Document:
     document = get_document(db, scope, document_id)
     if not scope.is_super_admin and document.user_id != scope.user_id:
          raise ForbiddenError("Only the uploader can delete this document")
     audit_service.record(db, scope.user_id, "document.delete", AuditEntityType.DOCUMENT, document.id,
                          f"Deleted {document.name}")
     db.delete(document)
     db.flush()
     return document


# ---------------------------------------------------------------------------
# Signature workflow
# ---------------------------------------------------------------------------

def _check_transition(document: Document, target: DocumentStatus) -> None:
     if document.document_type != DocumentType.LEASE_AGREEMENT:
          raise BusinessRuleError("Only lease agreements support signatures")
     current = DocumentStatus(document.status)
     if target not in SIGNATURE_TRANSITIONS[current]:
          raise BusinessRuleError(f"Cannot move a {current.value} document to {target.value}")


def _signing_tenant(db: Session, document: Document) -> Optional[Tenant]:
     if document.entity_type != DocumentEntityType.TENANT:
          return None
     return db.query(Tenant).filter(Tenant.id == document.entity_id).first()


def request_signature(db: Session, scope: AccessScope, document_id: int, notes: Optional[str] = None) -> Document:
     document = get_document(db, scope, document_id)
     _check_transition(document, DocumentStatus.PENDING_SIGNATURE)
     tenant = _signing_tenant(db, document)
     if tenant is None:
          raise BusinessRuleError("Signatures can only be requested on tenant lease agreements")

     document.status = DocumentStatus.PENDING_SIGNATURE
     document.requested_signature_at = datetime.utcnow()
     if notes:
          document.notes = notes
     db.flush()

     audit_service.record(db, scope.user_id, "document.request_signature", AuditEntityType.DOCUMENT, document.id)
     notification_service.notify(
          db, tenant.user_account_id, NotificationType.SYSTEM, "Lease agreement to sign",
          f"Please review and sign {document.name}",
          entity_type=AuditEntityType.DOCUMENT, entity_id=document.id, action_url=f"/documents/{document.id}",
     )
     return document


def _tenant_signer(db: Session, scope: AccessScope, document: Document) -> Tenant:
     tenant = _signing_tenant(db, document)
     if tenant is None or tenant.user_account_id != scope.user_id:
          raise ForbiddenError("Only the tenant named on this lease can sign it")
     return tenant


def sign_document(
     db: Session,
     scope: AccessScope,
     document_id: int,
     method: SignatureMethod = SignatureMethod.TYPED,
) -> Document:
     document = get_document(db, scope, document_id)
     _check_transition(document, DocumentStatus.SIGNED)
     _tenant_signer(db, scope, document)

     document.status = DocumentStatus.SIGNED
     document.signed_by = scope.user_id
     document.signed_at = datetime.utcnow()
     document.signature_method = method
     db.flush()

     audit_service.record(db, scope.user_id, "document.sign", AuditEntityType.DOCUMENT, document.id,
                          metadata={"method": SignatureMethod(method).value})
     notification_service.notify(
          db, document.user_id, NotificationType.SYSTEM, "Lease signed",
          f"{document.name} has been signed", entity_type=AuditEntityType.DOCUMENT, entity_id=document.id,
     )
     return document


def reject_document(db: Session, scope: AccessScope, document_id: int, notes: str) -> Document:
     document = get_document(db, scope, document_id)
     _check_transition(document, DocumentStatus.REJECTED)
     _tenant_signer(db, scope, document)

     document.status = DocumentStatus.REJECTED
     document.notes = notes
     db.flush()

     audit_service.record(db, scope.user_id, "document.reject", AuditEntityType.DOCUMENT, document.id,
                          notes)
     notification_service.notify(
          db, document.user_id, NotificationType.SYSTEM, "Lease declined",
          f"{document.name} was declined: {notes}", entity_type=AuditEntityType.DOCUMENT, entity_id=document.id,
     )
     return document


def ensure_uploadable(size: int) -> None:
     if size <= 0:
          raise BusinessRuleError("Uploaded file is empty")
     if size > MAX_DOCUMENT_SIZE:
          raise BusinessRuleError("File exceeds the 10 MB limit")


def owner_or_404(db: Session, scope: AccessScope, entity_type: DocumentEntityType, entity_id: int) -> DocumentOwner:
     owner = DocumentOwner(DocumentEntityType(entity_type), entity_id)
     resolve_owner(db, scope, owner)
     return owner
