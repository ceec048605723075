# account_service/validation.py
"""Field rules for registration candidates.

Every rule is checked and all violations are returned together, in the
order the fields are declared on the candidate (name, email, password).
"""
from typing import List, Optional

from email_validator import EmailNotValidError, validate_email

from . import schemas
from .core.config import Settings, settings as default_settings

NAME_EMPTY = "name must not be empty"
EMAIL_MALFORMED = "email must be a well-formed email address"
EMAIL_DOMAIN_NOT_ALLOWED = "email domain is not allowed"


def password_too_short_message(min_length: int) -> str:
    return f"Password must be at least {min_length} characters long"


def normalize_email(email: str) -> Optional[str]:
    """
    Canonical form of a well-formed address, or None.

    Accounts are keyed by this form, so addresses differing only in letter
    case belong to the same account.
    """
    try:
        validated = validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return None
    return validated.normalized.lower()


def email_domain(email: str) -> Optional[str]:
    """Return the lowercased domain of a well-formed address, or None."""
    normalized = normalize_email(email)
    if normalized is None:
        return None
    return normalized.rsplit("@", 1)[1]


def validate_candidate(candidate: schemas.UserCreate, settings: Optional[Settings] = None) -> List[str]:
    """
    Return the violated rules for a candidate as human-readable messages.
    An empty list means the candidate may be registered.
    """
    settings = settings or default_settings
    errors: List[str] = []

    if not candidate.name.strip():
        errors.append(NAME_EMPTY)

    domain = email_domain(candidate.email)
    if domain is None:
        errors.append(EMAIL_MALFORMED)
    elif domain not in {d.lower() for d in settings.ALLOWED_EMAIL_DOMAINS}:
        errors.append(EMAIL_DOMAIN_NOT_ALLOWED)

    if len(candidate.password) < settings.PASSWORD_MIN_LENGTH:
        errors.append(password_too_short_message(settings.PASSWORD_MIN_LENGTH))

    return errors
