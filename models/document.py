"""
Document model - a file attached to a tenant, property, unit or payment.

(entity_type, entity_id) is a polymorphic reference with no database foreign
key; services.document_service validates it at write time.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship
from .base import Base, enum_type
from .enums import DocumentEntityType, DocumentType, DocumentStatus, SignatureMethod


class Document(Base):
     __tablename__ = "documents"
     __table_args__ = (
          Index("ix_documents_entity", "entity_type", "entity_id"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
     entity_type = Column(enum_type(DocumentEntityType, "document_entity_type"), nullable=False)
     entity_id = Column(Integer, nullable=False)
     document_type = Column(enum_type(DocumentType, "document_type"), nullable=False, index=True)

     # Blob
     name = Column(String(255), nullable=False)
     mime_type = Column(String(100), nullable=False)
     size = Column(Integer, nullable=False)
     url = Column(String(500), nullable=False)
     public_id = Column(String(500), nullable=False)
     description = Column(Text, nullable=True)

     # Signature workflow (lease agreements only)
     status = Column(enum_type(DocumentStatus, "document_status"), default=DocumentStatus.DRAFT, nullable=False)
     signed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
     signed_at = Column(DateTime, nullable=True)
     requested_signature_at = Column(DateTime, nullable=True)
     signature_method = Column(enum_type(SignatureMethod, "signature_method"), nullable=True)
     notes = Column(Text, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     uploader = relationship("User", foreign_keys=[user_id])

     def __repr__(self):
          return (
               f"<Document(id={self.id}, type='{self.document_type}', "
               f"entity={self.entity_type}:{self.entity_id}, status='{self.status}')>"
          )
