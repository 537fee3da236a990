"""
Input checks applied during registration.
"""

import re
from typing import Any

from email_validator import EmailNotValidError, validate_email

_ALPHANUMERIC_RE = re.compile(r"[0-9A-Za-z]+")


def is_valid_email(value: Any) -> bool:
    """Syntactic email check; the domain is not resolved."""
    if not isinstance(value, str) or not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_alphanumeric(value: Any) -> bool:
    """Non-empty, ASCII letters and digits only."""
    return isinstance(value, str) and _ALPHANUMERIC_RE.fullmatch(value) is not None
