"""
Enumerations shared by models and schemas.

The string values are the wire contract: the frontend filters and renders on
these exact values, so never rename a value without a data migration.
"""
import enum


class UserRole(str, enum.Enum):
     SUPER_ADMIN = "super_admin"
     AGENCY = "agency"
     OWNER = "owner"
     MANAGER = "manager"
     TENANT = "tenant"
     MAINTENANCE = "maintenance"
     AGENT = "agent"


class PropertyType(str, enum.Enum):
     APARTMENT = "apartment"
     HOUSE = "house"
     COMMERCIAL = "commercial"
     OTHER = "other"


class UnitStatus(str, enum.Enum):
     VACANT = "vacant"
     OCCUPIED = "occupied"
     MAINTENANCE = "maintenance"


class TenantStatus(str, enum.Enum):
     ACTIVE = "active"
     LATE = "late"
     EXITED = "exited"


class PaymentMethod(str, enum.Enum):
     CASH = "cash"
     MOMO = "momo"
     BANK = "bank"


class TicketCategory(str, enum.Enum):
     PLUMBING = "plumbing"
     ELECTRICAL = "electrical"
     STRUCTURAL = "structural"
     APPLIANCE = "appliance"
     OTHER = "other"


class TicketPriority(str, enum.Enum):
     LOW = "low"
     MEDIUM = "medium"
     HIGH = "high"
     URGENT = "urgent"


class TicketStatus(str, enum.Enum):
     PENDING = "pending"
     IN_PROGRESS = "in_progress"
     COMPLETED = "completed"
     CANCELLED = "cancelled"


class ManagerStatus(str, enum.Enum):
     PENDING = "pending"
     ACTIVE = "active"
     REVOKED = "revoked"


class ApplicationStatus(str, enum.Enum):
     PENDING = "pending"
     APPROVED = "approved"
     REJECTED = "rejected"


class CommissionType(str, enum.Enum):
     PERCENTAGE = "percentage"
     FIXED = "fixed"


class CommissionStatus(str, enum.Enum):
     PENDING = "pending"
     PAID = "paid"
     CANCELLED = "cancelled"


class TargetUserType(str, enum.Enum):
     OWNER = "owner"
     TENANT = "tenant"


class DocumentEntityType(str, enum.Enum):
     TENANT = "tenant"
     PROPERTY = "property"
     UNIT = "unit"
     PAYMENT = "payment"


class DocumentType(str, enum.Enum):
     LEASE_AGREEMENT = "lease_agreement"
     ID_COPY = "id_copy"
     PROOF_OF_INCOME = "proof_of_income"
     REFERENCE_LETTER = "reference_letter"
     PROPERTY_DEED = "property_deed"
     INSURANCE = "insurance"
     INSPECTION_REPORT = "inspection_report"
     RECEIPT = "receipt"
     OTHER = "other"


class DocumentStatus(str, enum.Enum):
     DRAFT = "draft"
     PENDING_SIGNATURE = "pending_signature"
     SIGNED = "signed"
     REJECTED = "rejected"


class SignatureMethod(str, enum.Enum):
     TYPED = "typed"
     UPLOADED = "uploaded"
     PHYSICAL = "physical"


class NotificationType(str, enum.Enum):
     PAYMENT_REMINDER = "payment_reminder"
     PAYMENT_RECEIVED = "payment_received"
     PAYMENT_OVERDUE = "payment_overdue"
     LEASE_EXPIRY = "lease_expiry"
     MAINTENANCE_UPDATE = "maintenance_update"
     MAINTENANCE_NEW = "maintenance_new"
     TENANT_ADDED = "tenant_added"
     TENANT_REMOVED = "tenant_removed"
     PROPERTY_UPDATE = "property_update"
     SYSTEM = "system"
     ANNOUNCEMENT = "announcement"
     MESSAGE = "message"


class NotificationPriority(str, enum.Enum):
     LOW = "low"
     NORMAL = "normal"
     HIGH = "high"
     URGENT = "urgent"


class AuditEntityType(str, enum.Enum):
     USER = "user"
     PROPERTY = "property"
     UNIT = "unit"
     TENANT = "tenant"
     PAYMENT = "payment"
     MAINTENANCE = "maintenance"
     DOCUMENT = "document"
     MANAGER = "manager"
     REPORT = "report"
     SYSTEM = "system"


class ReminderChannel(str, enum.Enum):
     SMS = "sms"
     EMAIL = "email"


class ReminderTrigger(str, enum.Enum):
     BEFORE_DUE = "before_due"
     ON_DUE = "on_due"
     AFTER_DUE = "after_due"


class ReminderStatus(str, enum.Enum):
     SENT = "sent"
     FAILED = "failed"


class AgentActionType(str, enum.Enum):
     RECORD_PAYMENT = "record_payment"
     ADD_TENANT = "add_tenant"
     ADD_PROPERTY = "add_property"
     UPDATE_TENANT = "update_tenant"
     UPDATE_PROPERTY = "update_property"
     CREATE_MAINTENANCE = "create_maintenance"
     RESOLVE_MAINTENANCE = "resolve_maintenance"
     ONBOARD_TENANT = "onboard_tenant"
