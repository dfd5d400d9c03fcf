"""
Client-side form validation.

Errors are keyed per field and never reach the network.
"""

import re
from typing import Mapping

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6

# Field -> message shown when it is left blank
INFO_RECORD_FIELDS = {
    "medicineName": "Medicine name is required",
    "usage": "Usage/Purpose is required",
    "dosage": "Dosage instructions are required",
    "exp": "Expiry date is required",
    "man": "Manufacturing date is required",
    "price": "Price is required",
    "btno": "Batch number is required",
    "compName": "Company name is required",
    "instr": "Storage instructions are required",
    "drugs": "Drug composition is required",
}


class ValidationError(Exception):
    """One or more form fields are invalid."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(errors.values()))


def _check_email(email: str, errors: dict[str, str]) -> None:
    if not email.strip():
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.search(email):
        errors["email"] = "Please enter a valid email address"


def validate_login(email: str, password: str) -> dict[str, str]:
    """Return the field errors of the login form (empty when valid)."""
    errors: dict[str, str] = {}
    _check_email(email, errors)
    if not password:
        errors["password"] = "Password is required"
    return errors


def validate_signup(name: str, email: str, password: str, confirm_password: str) -> dict[str, str]:
    """Return the field errors of the signup form (empty when valid)."""
    errors: dict[str, str] = {}

    if not name.strip():
        errors["name"] = "Name is required"
    elif len(name.strip()) < MIN_NAME_LENGTH:
        errors["name"] = f"Name must be at least {MIN_NAME_LENGTH} characters"

    _check_email(email, errors)

    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

    if not confirm_password:
        errors["confirmPassword"] = "Please confirm your password"
    elif password != confirm_password:
        errors["confirmPassword"] = "Passwords do not match"

    return errors


def validate_info_record(data: Mapping[str, str]) -> dict[str, str]:
    """Every medicine field is required."""
    return {
        field: message
        for field, message in INFO_RECORD_FIELDS.items()
        if not str(data.get(field) or "").strip()
    }


def ensure_valid(errors: dict[str, str]) -> None:
    """Raise ValidationError when ``errors`` is not empty."""
    if errors:
        raise ValidationError(errors)


def clear_field_error(errors: dict[str, str], field: str) -> dict[str, str]:
    """Drop the error of a field the user is editing."""
    if field not in errors:
        return errors
    return {key: value for key, value in errors.items() if key != field}
