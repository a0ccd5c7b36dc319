from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional


NAME_ERROR = "Enter a valid name (letters and spaces only)."
STUDENT_ID_ERROR = "Student ID must be numeric."
EMAIL_ERROR = "Enter a valid email address."
CONTACT_ERROR = "Contact must be numeric and at least 10 digits."

# Patterns are applied with fullmatch, so `$` never accepts a trailing newline
_NAME_RE = re.compile(r"[A-Za-z ]{2,}")
_STUDENT_ID_RE = re.compile(r"[0-9]+")
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_CONTACT_RE = re.compile(r"[0-9]{10,}")


def _check(pattern: re.Pattern[str], message: str, value: str) -> Optional[str]:
    return None if pattern.fullmatch(value) else message


def check_name(value: str) -> Optional[str]:
    """Letters and spaces only, at least two characters."""
    return _check(_NAME_RE, NAME_ERROR, value)


def check_student_id(value: str) -> Optional[str]:
    """One or more digits. Leading zeros are significant."""
    return _check(_STUDENT_ID_RE, STUDENT_ID_ERROR, value)


def check_email(value: str) -> Optional[str]:
    return _check(_EMAIL_RE, EMAIL_ERROR, value)


def check_contact(value: str) -> Optional[str]:
    """Ten or more ASCII digits."""
    return _check(_CONTACT_RE, CONTACT_ERROR, value)


# Serialized field key -> check. Order matches the form layout.
FIELD_CHECKS: Dict[str, Callable[[str], Optional[str]]] = {
    "name": check_name,
    "studentId": check_student_id,
    "email": check_email,
    "contact": check_contact,
}


@dataclass(frozen=True)
class FormValidation:
    """Outcome of validating one form submission.

    Attributes
    - values: trimmed text for every field key, valid or not
    - errors: field key -> message, one entry per failing field
    """

    values: Dict[str, str]
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def _run_checks(values: Dict[str, str]) -> FormValidation:
    errors: Dict[str, str] = {}
    # No short-circuit: every failing field reports at once
    for key, check in FIELD_CHECKS.items():
        message = check(values[key])
        if message is not None:
            errors[key] = message
    return FormValidation(values=values, errors=errors)


def validate_form(fields: Mapping[str, Optional[str]]) -> FormValidation:
    """Trim raw form input and validate all four fields.

    Missing or None values are treated as empty text and therefore fail
    their check. Keys outside the four known fields are ignored.
    """
    values = {key: (fields.get(key) or "").strip() for key in FIELD_CHECKS}
    return _run_checks(values)


def validate_record(values: Mapping[str, str]) -> FormValidation:
    """Validate an already built record's serialized fields, untrimmed."""
    return _run_checks({key: values.get(key, "") for key in FIELD_CHECKS})


__all__ = [
    "CONTACT_ERROR",
    "EMAIL_ERROR",
    "FIELD_CHECKS",
    "FormValidation",
    "NAME_ERROR",
    "STUDENT_ID_ERROR",
    "check_contact",
    "check_email",
    "check_name",
    "check_student_id",
    "validate_form",
    "validate_record",
]
