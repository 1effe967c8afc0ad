# services/exceptions.py
"""
Domain errors raised by the service layer.

Each carries the HTTP status it maps to; main.py turns them into the
{"success": false, "message": ...} envelope.
"""


class ServiceError(Exception):
     status_code = 500

     def __init__(self, message: str):
          super().__init__(message)
          self.message = message


class BusinessRuleError(ServiceError):
     status_code = 400


class ForbiddenError(ServiceError):
     status_code = 403


class NotFoundError(ServiceError):
     status_code = 404

     @classmethod
     def for_entity(cls, entity: str, entity_id) -> "NotFoundError":
          return cls(f"{entity} with ID {entity_id} not found")


class ConflictError(ServiceError):
     status_code = 409


class StorageUnavailableError(ServiceError):
     status_code = 503
