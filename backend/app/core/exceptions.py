"""
Custom Exceptions for Campus Records
====================================

Every failure a view can surface is one of these. The API layer maps them to
HTTP responses through `http_status`; services never raise HTTPException.

Usage:
    from app.core.exceptions import ValidationError, RecordNotFoundError

    if not remark.strip():
        raise ValidationError("Please provide a remark before proceeding.", field="remark")
"""

from typing import Optional, Any, Dict


class CampusRecordsError(Exception):
    """Base exception for all Campus Records errors"""

    http_status: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Validation Errors (caught before any store call)
# ============================================

class ValidationError(CampusRecordsError):
    """Input failed validation; no mutation was attempted"""

    http_status = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            details={"field": field} if field else {}
        )
        self.field = field


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(CampusRecordsError):
    """No valid session"""

    http_status = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(CampusRecordsError):
    """User not authorized for this action"""

    http_status = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class RecordNotFoundError(CampusRecordsError):
    """A record with the given id does not exist"""

    http_status = 404

    def __init__(self, entity: str, record_id: str):
        super().__init__(
            f"{entity} with ID '{record_id}' not found",
            code=f"{entity.upper()}_NOT_FOUND",
            details={"entity": entity, "record_id": record_id}
        )


# ============================================
# Workflow Errors (409-type)
# ============================================

class InvalidTransitionError(CampusRecordsError):
    """Requested status change is not allowed from the current status"""

    http_status = 409

    def __init__(self, entity: str, record_id: str, current: str, target: str):
        super().__init__(
            f"{entity} '{record_id}' cannot move from {current} to {target}",
            code="INVALID_TRANSITION",
            details={"entity": entity, "record_id": record_id, "current": current, "target": target}
        )


class OperationInProgressError(CampusRecordsError):
    """Another action on the same record has not finished yet"""

    http_status = 409

    def __init__(self, record_id: str):
        super().__init__(
            f"An action on '{record_id}' is already in progress",
            code="OPERATION_IN_PROGRESS",
            details={"record_id": record_id}
        )


# ============================================
# Store Errors
# ============================================

class RecordStoreError(CampusRecordsError):
    """The backing record store or file storage failed"""

    http_status = 502

    def __init__(self, operation: str, entity: str, reason: str):
        super().__init__(
            f"Failed to {operation} {entity}: {reason}",
            code="STORE_ERROR",
            details={"operation": operation, "entity": entity}
        )
        self.operation = operation
        self.entity = entity
