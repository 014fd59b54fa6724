"""
API error types

Services raise these; main.py renders them into the error envelope
``{statusCode, message, success, errors}``.
"""
from typing import Any, List, Optional


class ApiError(Exception):
    """Base error carrying an HTTP status code"""
    status_code = 500
    
    def __init__(self, message: str, errors: Optional[List[Any]] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        if status_code is not None:
            self.status_code = status_code
    
    def to_dict(self) -> dict:
        return {
            "statusCode": self.status_code,
            "message": self.message,
            "success": False,
            "errors": self.errors,
        }


class ValidationError(ApiError):
    """Missing or invalid input"""
    status_code = 400


class ConflictError(ApiError):
    """Transition not allowed from the current state"""
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class AuthError(ApiError):
    status_code = 401


class ForbiddenError(ApiError):
    status_code = 403


class ServerError(ApiError):
    status_code = 500
