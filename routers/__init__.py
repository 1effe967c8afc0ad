# routers/__init__.py
from . import (
     agent_applications,
     agent_portal,
     audit,
     auth,
     commissions,
     dashboard,
     documents,
     maintenance,
     managers,
     notifications,
     payments,
     properties,
     reports,
     tenants,
     units,
)

ALL_ROUTERS = [
     auth.router,
     properties.router,
     units.router,
     tenants.router,
     payments.router,
     maintenance.router,
     managers.router,
     managers.portal_router,
     documents.router,
     notifications.router,
     audit.router,
     dashboard.router,
     reports.router,
     commissions.router,
     agent_portal.router,
     agent_applications.router,
]

__all__ = ["ALL_ROUTERS"]
