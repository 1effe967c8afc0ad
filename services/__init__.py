# services/__init__.py
from .exceptions import (
     ServiceError,
     BusinessRuleError,
     ForbiddenError,
     NotFoundError,
     ConflictError,
)
from .access_service import AccessScope, resolve_scope
from .tenant_service import TenantService
from .payment_service import PaymentService
from .commission_service import calculate_commission_amount, record_agent_action

__all__ = [
     "ServiceError",
     "BusinessRuleError",
     "ForbiddenError",
     "NotFoundError",
     "ConflictError",
     "AccessScope",
     "resolve_scope",
     "TenantService",
     "PaymentService",
     "calculate_commission_amount",
     "record_agent_action",
]
