"""
Centralized input validation for every operation.

Each operation maps to an ordered list of field rules. A rule holds one or
more checks (predicate + message). All checks of all rules run and every
failure is collected, so callers get the first message for display and the
full list for the ``details`` payload.
"""
import math
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import email_validator
from email_validator import EmailNotValidError, validate_email

from errors import ServiceError, invalid_input

Check = Tuple[Callable[[Any], bool], str]

# Syntax only: reserved names such as .test and .local are still well-formed
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()


class FieldRule:
    """Checks applied to one input field."""

    def __init__(self, field: str, *checks: Check, optional: bool = False):
        self.field = field
        self.checks = checks
        self.optional = optional

    def errors(self, values: Mapping[str, Any]) -> List[Dict[str, str]]:
        value = values.get(self.field)
        if self.optional and value is None:
            return []
        return [
            {"field": self.field, "message": message}
            for predicate, message in self.checks
            if not predicate(value)
        ]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def _is_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _is_iso_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    candidate = value.strip()
    try:
        date.fromisoformat(candidate)
        return True
    except ValueError:
        pass
    try:
        datetime.fromisoformat(candidate.replace("Z", "+00:00"))
    except ValueError:
        return False
    # Bare times like "10:00" are not calendar dates
    return len(candidate) >= 10


def required(message: str) -> Check:
    return _is_present, message


def min_length(length: int, message: str) -> Check:
    return (lambda value: len(_as_text(value)) >= length), message


def email(message: str) -> Check:
    return _is_email, message


def min_number(minimum: float, message: str) -> Check:
    def check(value: Any) -> bool:
        number = _to_number(value)
        return number is not None and number >= minimum

    return check, message


def iso_date(message: str) -> Check:
    return _is_iso_date, message


def text(message: str) -> Check:
    return (lambda value: isinstance(value, str)), message


MIN_SALARY = 1000

PASSWORD_REQUIRED = "Password is required."
PASSWORD_LENGTH = "Password must be at least 6 characters."
EMAIL_REQUIRED = "Email is required."
EMAIL_INVALID = "Email format is invalid."
SALARY_MINIMUM = f"Salary must be at least {MIN_SALARY}."
DATE_INVALID = "date_of_joining must be a valid date (YYYY-MM-DD)."
PHOTO_NOT_TEXT = "employee_photo must be a string (URL or base64 image data)."

_REQUIRED_EMPLOYEE_TEXT = {
    "first_name": "First name is required.",
    "last_name": "Last name is required.",
    "designation": "Designation is required.",
    "department": "Department is required.",
}

RULES: Dict[str, List[FieldRule]] = {
    "login": [
        FieldRule(
            "password",
            required(PASSWORD_REQUIRED),
            min_length(6, PASSWORD_LENGTH),
        ),
    ],
    "signup": [
        FieldRule(
            "username",
            required("Username is required."),
            min_length(3, "Username must be at least 3 characters."),
        ),
        FieldRule("email", required(EMAIL_REQUIRED), email(EMAIL_INVALID)),
        FieldRule(
            "password",
            required(PASSWORD_REQUIRED),
            min_length(6, PASSWORD_LENGTH),
        ),
    ],
    "addEmployee": [
        FieldRule("first_name", required(_REQUIRED_EMPLOYEE_TEXT["first_name"])),
        FieldRule("last_name", required(_REQUIRED_EMPLOYEE_TEXT["last_name"])),
        FieldRule("email", required(EMAIL_REQUIRED), email(EMAIL_INVALID)),
        FieldRule("designation", required(_REQUIRED_EMPLOYEE_TEXT["designation"])),
        FieldRule("salary", min_number(MIN_SALARY, SALARY_MINIMUM)),
        FieldRule(
            "date_of_joining",
            required("Date of joining is required."),
            iso_date(DATE_INVALID),
        ),
        FieldRule("department", required(_REQUIRED_EMPLOYEE_TEXT["department"])),
        FieldRule("employee_photo", text(PHOTO_NOT_TEXT), optional=True),
    ],
    "updateEmployee": [
        FieldRule("eid", required("Employee ID is required.")),
        FieldRule("email", email(EMAIL_INVALID), optional=True),
        FieldRule("salary", min_number(MIN_SALARY, SALARY_MINIMUM), optional=True),
        *[
            FieldRule(field, required(message), optional=True)
            for field, message in _REQUIRED_EMPLOYEE_TEXT.items()
        ],
        FieldRule("date_of_joining", iso_date(DATE_INVALID), optional=True),
        FieldRule("employee_photo", text(PHOTO_NOT_TEXT), optional=True),
    ],
}


def collect_errors(operation: str, values: Mapping[str, Any]) -> List[Dict[str, str]]:
    """Run every rule registered for ``operation`` and return all violations."""
    if operation not in RULES:
        raise KeyError(f"No validation rules registered for '{operation}'")
    errors: List[Dict[str, str]] = []
    for rule in RULES[operation]:
        errors.extend(rule.errors(values))
    return errors


def validate(operation: str, values: Mapping[str, Any]) -> Optional[ServiceError]:
    """
    Validate ``values`` for ``operation``.
    Returns None when valid, otherwise an INVALID_INPUT error carrying the
    first violation as its message and all violations as details.
    """
    errors = collect_errors(operation, values)
    if not errors:
        return None
    return invalid_input(errors[0]["message"], details=errors)
