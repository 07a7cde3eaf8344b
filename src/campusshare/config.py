"""Configuration management for campusshare.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

DEFAULT_ADMINS = "admin@campus.edu,superadmin@campus.edu"


@dataclass
class Config:
    """Application configuration."""

    # Storage
    data_dir: Path
    resources_path: Path
    chats_path: Path

    # Access
    admins: frozenset[str]

    # Payments
    borrow_fee: float
    payment_success_rate: float
    payment_timeout: Optional[float]  # seconds, None = unbounded

    # Logging
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        data_dir = Path(os.environ.get("CAMPUSSHARE_DATA_DIR", "data")).expanduser()

        resources_path = Path(
            os.environ.get("CAMPUSSHARE_RESOURCES_FILE", str(data_dir / "resources.db"))
        ).expanduser()
        chats_path = Path(
            os.environ.get("CAMPUSSHARE_CHATS_FILE", str(data_dir / "chats.db"))
        ).expanduser()

        admins = frozenset(
            a.strip().lower()
            for a in os.environ.get("CAMPUSSHARE_ADMINS", DEFAULT_ADMINS).split(",")
            if a.strip()
        )

        timeout = float(os.environ.get("CAMPUSSHARE_PAYMENT_TIMEOUT", "30"))

        return cls(
            data_dir=data_dir,
            resources_path=resources_path,
            chats_path=chats_path,
            admins=admins,
            borrow_fee=float(os.environ.get("CAMPUSSHARE_BORROW_FEE", "50")),
            payment_success_rate=float(
                os.environ.get("CAMPUSSHARE_PAYMENT_SUCCESS_RATE", "0.9")
            ),
            payment_timeout=timeout if timeout > 0 else None,
            log_level=os.environ.get("CAMPUSSHARE_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        for path in (self.resources_path, self.chats_path):
            if not path.parent.exists():
                try:
                    path.parent.mkdir(parents=True, exist_ok=True)
                except OSError:
                    errors.append(f"Cannot create data directory: {path.parent}")

        if self.borrow_fee <= 0:
            errors.append("Borrow fee must be positive")

        if not 0.0 <= self.payment_success_rate <= 1.0:
            errors.append("Payment success rate must be between 0 and 1")

        return errors

    def is_admin(self, email: Optional[str]) -> bool:
        """Check an email against the admin allow-list."""
        return bool(email) and email.strip().lower() in self.admins


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
