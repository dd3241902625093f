"""
Error kinds raised by the permission store.

Callers branch on the class: ``NotFoundError`` means the permission is
absent, ``ValidationError`` means bad input, ``StorageError`` and
``CancellationError`` mean the call did not complete.
"""

from typing import Any, Optional


class PermissionStoreError(Exception):
    """Base class for every error raised by the permission store"""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class StoreInitError(PermissionStoreError):
    """Raised when the store cannot be opened, e.g. the unique index fails"""

    def __init__(self, message: str = "Failed to initialize permission store"):
        super().__init__(message=message)


class ValidationError(PermissionStoreError):
    """Raised when a required field is missing, before any I/O"""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message=message or f"{field} is required", details={"field": field})


class NotFoundError(PermissionStoreError):
    """Raised when no permission matches a point query"""

    def __init__(self, message: str = "permission not found"):
        super().__init__(message=message)


class StorageError(PermissionStoreError):
    """Raised on connectivity, I/O or decode failures in the backing store"""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        super().__init__(
            message=f"{operation} failed: {reason}",
            details={"operation": operation},
        )


class CancellationError(PermissionStoreError):
    """Raised when the caller's deadline fires mid-operation"""

    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(
            message=f"{operation} exceeded its {timeout}s deadline",
            details={"operation": operation, "timeout": timeout},
        )
