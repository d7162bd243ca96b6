# services/validation.py
"""
Input rules checked locally, before any store call.
Each function returns the list of messages in the order the rules run.
"""
import re
from typing import List, Optional

from models.models import UserRole
from schemas.user_schema import RegistrationForm

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
VALID_ROLES = {role.value for role in UserRole}


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and EMAIL_PATTERN.match(value.strip()) is not None


def validate_registration(form: RegistrationForm) -> List[str]:
    """
    Rule order: required fields, email format, role, password length,
    password confirmation, then the role's company requirement.
    """
    errors: List[str] = []

    if not form.email.strip() or not form.password.strip() or not form.full_name.strip() or not form.role:
        errors.append("Please fill in all required fields")

    if form.email.strip() and not is_valid_email(form.email):
        errors.append("Please enter a valid email address")

    if form.role and form.role not in VALID_ROLES:
        errors.append("Please select a valid role")

    if form.password and len(form.password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if form.confirm_password is not None and form.password != form.confirm_password:
        errors.append("Passwords do not match")

    if form.role == UserRole.COMPANY.value and not (form.company_name or "").strip():
        errors.append("Company name is required for company accounts")

    if form.role == UserRole.CLIENT.value and not (form.company_id or "").strip():
        errors.append("Please select the company you are a client of")

    return errors


def validate_contact(name: Optional[str], email: Optional[str], message: Optional[str]) -> Optional[str]:
    """Returns the contact endpoint's error text, or None when the request is acceptable."""
    if not name or not email or not message:
        return "Missing fields."
    if not EMAIL_PATTERN.match(email):
        return "Invalid email."
    return None
