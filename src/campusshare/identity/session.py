"""Logged-in user session and admin allow-list."""

from dataclasses import dataclass
from typing import Iterable, Optional

from ..errors import AdminRequiredError, AuthRequiredError, ValidationError
from .email import is_plausible_email, normalize_email


@dataclass(frozen=True)
class UserSession:
    """A verified identity and its admin flag."""

    email: str
    is_admin: bool = False

    @classmethod
    def login(cls, email: Optional[str], admins: Iterable[str] = ()) -> "UserSession":
        """Create a session for an already verified email.

        Args:
            email: Verified email address
            admins: Admin allow-list (compared case-insensitively)

        Returns:
            UserSession with the lowercased email

        Raises:
            AuthRequiredError: If no email was supplied
            ValidationError: If the email is not plausible
        """
        normalized = normalize_email(email)
        if normalized is None:
            raise AuthRequiredError("Login required")
        if not is_plausible_email(normalized):
            raise ValidationError(f"Invalid email address: {email}")

        admin_set = {a for a in (normalize_email(x) for x in admins) if a}
        return cls(email=normalized, is_admin=normalized in admin_set)

    def require_admin(self) -> None:
        """Raise AdminRequiredError unless this session belongs to an admin."""
        if not self.is_admin:
            raise AdminRequiredError("Only admins can delete resources")
