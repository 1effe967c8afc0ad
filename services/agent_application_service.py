# services/agent_application_service.py
"""
Agent onboarding: public applications reviewed by an administrator.

Approving an application provisions a User with role=agent and a temporary
password, which is emailed to the applicant and returned to the reviewer.
"""
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from models import AgentApplication
from models.enums import ApplicationStatus, AuditEntityType, UserRole
from utils.email import send_agent_welcome
from logging_config import logger
from . import audit_service
from .auth_service import create_user, generate_temp_password, get_user_by_email
from .exceptions import BusinessRuleError, ConflictError, NotFoundError


def submit(db: Session, data: dict) -> AgentApplication:
     email = data["email"].strip().lower()
     pending = (
          db.query(AgentApplication)
          .filter(AgentApplication.email == email, AgentApplication.status == ApplicationStatus.PENDING)
          .first()
     )
     if pending is not None:
          raise ConflictError("An application with this email is already pending review")
     if get_user_by_email(db, email) is not None:
          raise ConflictError("An account with this email already exists")

     application = AgentApplication(**{**data, "email": email}, status=ApplicationStatus.PENDING)
     db.add(application)
     db.flush()
     logger.info("Agent application %s submitted by %s", application.id, email)
     return application


def latest_for_email(db: Session, email: str) -> AgentApplication:
     application = (
          db.query(AgentApplication)
          .filter(AgentApplication.email == email.strip().lower())
          .order_by(AgentApplication.created_at.desc(), AgentApplication.id.desc())
          .first()
     )
     if application is None:
          raise NotFoundError("No application found for this email")
     return application


def applications_query(db: Session, status: Optional[ApplicationStatus] = None):
     query = db.query(AgentApplication)
     if status is not None:
          query = query.filter(AgentApplication.status == status)
     return query.order_by(AgentApplication.created_at.desc(), AgentApplication.id.desc())


def get_application(db: Session, application_id: int) -> AgentApplication:
     application = db.query(AgentApplication).filter(AgentApplication.id == application_id).first()
     if application is None:
          raise NotFoundError.for_entity("Application", application_id)
     return application


def _pending(db: Session, application_id: int) -> AgentApplication:
     application = get_application(db, application_id)
     if application.status != ApplicationStatus.PENDING:
          raise BusinessRuleError(f"Application already {ApplicationStatus(application.status).value}")
     return application


def approve(db: Session, application_id: int, reviewer_id: int) -> Tuple[AgentApplication, str]:
     """Approve and provision the agent account; returns (application, temporary password)."""
     application = _pending(db, application_id)

     temp_password = generate_temp_password()
     user = create_user(
          db,
          email=application.email,
          password=temp_password,
          role=UserRole.AGENT,
          first_name=application.first_name,
          last_name=application.last_name,
          phone=application.phone,
          national_id=application.national_id,
     )
     application.status = ApplicationStatus.APPROVED
     application.user_id = user.id
     application.reviewed_by = reviewer_id
     application.reviewed_at = datetime.utcnow()
     db.flush()

     audit_service.record(db, reviewer_id, "agent_application.approve", AuditEntityType.USER, user.id,
                          f"Approved agent application {application.id}")
     send_agent_welcome(user.email, temp_password)
     logger.info("Agent application %s approved, user %s created", application.id, user.id)
     return application, temp_password


def reject(db: Session, application_id: int, reviewer_id: int, reason: str) -> AgentApplication:
     application = _pending(db, application_id)
     application.status = ApplicationStatus.REJECTED
     application.rejection_reason = reason
     application.reviewed_by = reviewer_id
     application.reviewed_at = datetime.utcnow()
     db.flush()
     audit_service.record(db, reviewer_id, "agent_application.reject", AuditEntityType.SYSTEM, application.id,
                          reason)
     return application
