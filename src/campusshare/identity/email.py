"""Email syntax helpers."""

import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


def is_plausible_email(value: Optional[str]) -> bool:
    """Check that a string looks like an email address.

    This is a syntax filter only; it says nothing about deliverability.

    Args:
        value: Candidate address

    Returns:
        True if the whole string matches the address pattern

    Example:
        >>> is_plausible_email("alice@campus.edu")
        True
        >>> is_plausible_email("alice@campus")
        False
    """
    if value is None:
        return False
    return EMAIL_PATTERN.fullmatch(value) is not None


def normalize_email(value: Optional[str]) -> Optional[str]:
    """Strip and lowercase an address, mapping blank input to None."""
    if value is None:
        return None
    value = value.strip()
    return value.lower() if value else None
