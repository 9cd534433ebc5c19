"""
Core Application - Infrastructure & Base Classes

This app contains infrastructure code shared by the domain apps:

- Generic, reusable base classes (no domain-specific logic)
- Clear extension points for domain apps
- Infrastructure concerns separated from business logic

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - ObjectIdPrimaryKeyMixin: 24-character hex object id as primary key

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes and kind
    - ValidationError, NotFoundError, ConflictError, PermissionDeniedError,
      InvalidOperationError, ServiceUnavailableError

Exception handler (core.exception_handler):
    - application_exception_handler: DRF EXCEPTION_HANDLER

Serializer helpers (core.serializer_mixins):
    - ObjectIdField, TimestampMixin

ViewSet Mixins (core.viewset_mixins):
    - EnvelopeResponseMixin, ServiceResultMixin

Helpers (core.helpers):
    - generate_object_id, is_object_id, normalize_object_id, get_client_ip

Validators (core.validators):
    - validate_object_id

Note:
    - Business logic should NOT go here. Extend core classes in your domain apps.
    - Django models and model mixins are NOT imported here to avoid AppRegistryNotReady
      errors. Import them directly from their modules.
"""

# Services (no Django model dependencies)
from .services import BaseService, ServiceResult

# Exceptions (no Django dependencies)
from .exceptions import (
    BaseApplicationError,
    ConflictError,
    ErrorKind,
    InvalidOperationError,
    NotFoundError,
    PermissionDeniedError,
    ServiceUnavailableError,
    ValidationError,
)

__all__ = [
    "BaseService",
    "ServiceResult",
    "BaseApplicationError",
    "ConflictError",
    "ErrorKind",
    "InvalidOperationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ServiceUnavailableError",
    "ValidationError",
]
