"""Identity helpers: email syntax and user sessions."""

from .email import is_plausible_email, normalize_email
from .session import UserSession

__all__ = [
    "is_plausible_email",
    "normalize_email",
    "UserSession",
]
