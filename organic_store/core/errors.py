# organic_store/core/errors.py
"""
Domain error taxonomy.

Models and services raise these; `main.py` maps every one of them to an
HTTP status and the JSON envelope `{"success": false, "message": ...}`.
"""

from typing import Any

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidCouponError(ValidationError):
    default_message = "Invalid coupon code"


class EmptyCartError(ValidationError):
    default_message = "Cart is empty"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized. Please login to access this resource."


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class DuplicateError(ConflictError):
    default_message = "Already exists"


class InsufficientStockError(ConflictError):
    default_message = "Insufficient stock"


class InvalidStateError(ConflictError):
    default_message = "Invalid state transition"


class InternalError(AppError):
    pass
