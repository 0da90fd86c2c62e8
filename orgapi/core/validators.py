"""Input validation helpers for org and user payloads."""
from __future__ import annotations

from orgapi.core.models import DeleteOrg, DeleteUser, Org, User

NAME_MAX_LENGTH = 128
DESC_MAX_LENGTH = 1024
EMAIL_MAX_LENGTH = 254


def validate_email(email: str) -> str:
    """Validate email address.

    Args:
        email: Email address to validate

    Returns:
        Trimmed email address, case preserved

    Raises:
        ValueError: If email is invalid
    """
    email = email.strip()
    if not email or "@" not in email:
        raise ValueError("Invalid email format")

    local, domain = email.rsplit("@", 1)
    if not local or not domain or "." not in domain:
        raise ValueError("Invalid email format")
    if len(email) > EMAIL_MAX_LENGTH:
        raise ValueError("Email exceeds maximum length")

    return email


def validate_name(name: str, field: str) -> str:
    """Validate a display name.

    Args:
        name: Name to validate
        field: Field name for error messages (e.g., "Org name")

    Returns:
        Trimmed name

    Raises:
        ValueError: If name is invalid
    """
    name = name.strip()
    if not name:
        raise ValueError(f"{field} is required")
    if len(name) > NAME_MAX_LENGTH:
        raise ValueError(f"{field} exceeds maximum length")

    return name


def validate_desc(desc: str) -> str:
    desc = desc.strip()
    if not desc:
        raise ValueError("Description is required")
    if len(desc) > DESC_MAX_LENGTH:
        raise ValueError("Description exceeds maximum length")
    return desc


def validate_org(org: Org) -> Org:
    """Validate an org before it is saved. The org is sent as given."""
    validate_name(org.name, "Org name")
    validate_desc(org.desc)
    if org.id and org.version <= 0:
        raise ValueError("Version is required when updating an org")
    return org


def validate_user(user: User) -> User:
    """Validate a user before it is saved. The user is sent as given."""
    if not user.org_id.strip():
        raise ValueError("Org id is required")
    validate_name(user.name, "User name")
    validate_email(user.email)
    if user.id and user.version <= 0:
        raise ValueError("Version is required when updating a user")
    return user


def validate_delete(target: DeleteOrg | DeleteUser) -> DeleteOrg | DeleteUser:
    """Both id and a non-zero version are required to delete."""
    if not target.id.strip():
        raise ValueError("Id is required")
    if target.version <= 0:
        raise ValueError("Version is required")
    return target
