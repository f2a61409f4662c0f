"""
Client-facing error taxonomy.

Services return ``(value, error)`` pairs; ``error`` is a ``ServiceError`` or
``None``. The HTTP layer turns a ``ServiceError`` into a response with the
status code mapped below.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


STATUS_CODES = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INTERNAL_ERROR: 500,
}

# Messages shared by more than one operation
EMAIL_EXISTS = "Email already exists."
INVALID_CREDENTIALS = "Invalid credentials."
INVALID_EMPLOYEE_ID = "Invalid employee ID."
EMPLOYEE_NOT_FOUND = "Employee not found."


@dataclass(frozen=True)
class ServiceError:
    code: ErrorCode
    message: str
    details: Optional[Any] = None

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.code]

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


def invalid_input(message: str, details: Optional[Any] = None) -> ServiceError:
    return ServiceError(ErrorCode.INVALID_INPUT, message, details)


def unauthenticated(message: str = INVALID_CREDENTIALS) -> ServiceError:
    return ServiceError(ErrorCode.UNAUTHENTICATED, message)


def not_found(message: str) -> ServiceError:
    return ServiceError(ErrorCode.NOT_FOUND, message)


def internal_error(message: str, details: Optional[Any] = None) -> ServiceError:
    return ServiceError(ErrorCode.INTERNAL_ERROR, message, details)
