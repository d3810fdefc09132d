"""Custom exceptions for the application"""
from typing import Optional, Dict, Any


class AppException(Exception):
    """Base exception for the application"""
    def __init__(
        self,
        message: str,
        code: str = "APP_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Resource missing, or owned by another broker"""
    def __init__(self, message: str = "Resource not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NOT_FOUND", status_code=404, details=details)


class AuthenticationError(AppException):
    """Authentication failed"""
    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="AUTHENTICATION_FAILED", status_code=401, details=details)


class ValidationError(AppException):
    """Validation error"""
    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="VALIDATION_ERROR", status_code=422, details=details)


class ConflictError(AppException):
    """Resource conflict"""
    def __init__(self, message: str = "Resource conflict", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="CONFLICT", status_code=409, details=details)


class StoreError(AppException):
    """The data store rejected or failed a primary operation"""
    def __init__(self, message: str = "Data store error", reason: Optional[str] = None):
        details = {"reason": reason} if reason else None
        super().__init__(message=message, code="STORE_ERROR", status_code=500, details=details)


class ServiceError(AppException):
    """Upstream service error"""
    def __init__(
        self,
        message: str = "Service error",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 503
    ):
        super().__init__(message=message, code="SERVICE_ERROR", status_code=status_code, details=details)
