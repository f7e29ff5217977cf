"""
Custom exceptions for the application.
Project: Interior CRM

Domain-specific exceptions for centralized error handling. Every
exception carries the HTTP status and error code that the handlers in
main.py send back to the client.

NOTE: BusinessValidationError is deliberately distinct from pydantic.ValidationError.
- pydantic.ValidationError: malformed input data (handled by FastAPI -> 422)
- BusinessValidationError: business rule violations such as the discount cap (-> 422)
"""

from typing import Any, Dict, Optional

__all__ = [
    "AppException",
    "NotFoundError",
    "BusinessValidationError",
    "ValidationError",       # alias of BusinessValidationError
    "ConflictError",
    "PreconditionError",
]


class AppException(Exception):
    """
    Base exception for the application.

    Attributes:
        status_code: HTTP status code returned to the client
        error_code: Stable identifier of the error for the frontend
        detail: Human-readable message, surfaced verbatim
        extra: Optional additional data for the frontend
    """

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        detail: str,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initializes the exception.

        Args:
            detail: Detailed error message
            error_code: Unique identifier (default: the class one)
            extra: Additional data for the frontend (default: None)
        """
        self.detail = detail
        self.error_code = error_code if error_code is not None else self.error_code
        self.extra = extra
        self.status_code = self.__class__.status_code
        super().__init__(detail)


class NotFoundError(AppException):
    """
    Raised when a resource does not exist or belongs to another company.
    """

    status_code: int = 404
    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        detail: str = "Resource not found",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class BusinessValidationError(ValueError, AppException):
    """
    Raised for business rule violations, before any write happens.

    Inherits from ValueError so it can also be raised from pydantic validators.

    Examples:
        - "Discount cannot exceed 30%. Current discount is 33.33%"
        - "Client name is required"
    """

    status_code: int = 422
    error_code: str = "BUSINESS_VALIDATION_ERROR"

    def __init__(
        self,
        detail: str = "Validation failed",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        # Call AppException.__init__ directly, ValueError takes no kwargs
        AppException.__init__(self, detail, error_code, extra)


# Compatibility alias
ValidationError = BusinessValidationError


class ConflictError(AppException):
    """
    Raised when the current state of the data forbids the operation.

    Used for:
        - a bill already existing for the quotation
        - deletes blocked by dependent records
        - duplicate document numbers detected by the database
    """

    status_code: int = 409
    error_code: str = "CONFLICT_STATE"

    def __init__(
        self,
        detail: str = "State conflict",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class PreconditionError(AppException):
    """
    Raised when a request reaches a tenant-scoped operation without a company.
    """

    status_code: int = 400
    error_code: str = "COMPANY_NOT_SELECTED"

    def __init__(
        self,
        detail: str = "Please select a company first",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)
