# models/__init__.py
from .base import Base
from .user import User
from .property import Property
from .property_manager import PropertyManager
from .unit import Unit
from .tenant import Tenant
from .payment import Payment
from .maintenance_ticket import MaintenanceTicket
from .agent_application import AgentApplication
from .commission_rule import CommissionRule
from .agent_transaction import AgentTransaction
from .agent_commission import AgentCommission
from .notification import Notification
from .document import Document
from .audit_log import AuditLog
from .reminder_log import ReminderLog

__all__ = [
     "Base",
     "User",
     "Property",
     "PropertyManager",
     "Unit",
     "Tenant",
     "Payment",
     "MaintenanceTicket",
     "AgentApplication",
     "CommissionRule",
     "AgentTransaction",
     "AgentCommission",
     "Notification",
     "Document",
     "AuditLog",
     "ReminderLog",
]
