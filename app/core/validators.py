from email_validator import EmailNotValidError, validate_email

from app.core.exceptions import ValidationException
from app.models.role import ASSIGNABLE_ROLES, SchoolRole


def normalize_email(value: str | None) -> str:
    """
    Validate an email address and return it lower-cased.

    Raises:
        ValidationException: If the value is missing or not a valid address
    """
    if not value or not value.strip():
        raise ValidationException("Email is required")
    try:
        validated = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationException(f"Invalid email address: {e}")
    return validated.normalized.lower()


def require_assignable_role(role: SchoolRole | str | None) -> SchoolRole:
    """
    Ensure a role can be granted through team management.

    Raises:
        ValidationException: If role is missing, unknown or super_admin
    """
    if role is None:
        raise ValidationException("Role is required")
    try:
        role = SchoolRole(role)
    except ValueError:
        raise ValidationException(f"Unknown role: {role}")
    if role not in ASSIGNABLE_ROLES:
        raise ValidationException(f"Role {role.value} cannot be assigned")
    return role
