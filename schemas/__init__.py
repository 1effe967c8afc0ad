# schemas/__init__.py
from .common import ApiResponse, PaginatedResponse, PaginationMeta, MessageResponse, CamelModel
from .manager import ManagerPermissions

__all__ = [
     "ApiResponse",
     "PaginatedResponse",
     "PaginationMeta",
     "MessageResponse",
     "CamelModel",
     "ManagerPermissions",
]
