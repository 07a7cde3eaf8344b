"""Pydantic schemas for shared resources."""

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..identity.email import is_plausible_email

CONTACT_PATTERN = re.compile(r"[0-9+\- ]{6,20}")


class ResourceStatus(str, Enum):
    """Availability of a resource."""

    AVAILABLE = "available"
    TAKEN = "taken"


class Resource(BaseModel):
    """A shareable resource and its availability."""

    id: str
    name: str
    owner_name: str
    owner_contact: str
    owner_email: Optional[str] = None
    available: bool = True

    model_config = {"from_attributes": True}

    @property
    def status(self) -> ResourceStatus:
        """Current state in the available/taken state machine."""
        return ResourceStatus.AVAILABLE if self.available else ResourceStatus.TAKEN

    def __str__(self) -> str:
        reach = self.owner_email or self.owner_contact
        return f"[{self.id}] {self.name} - {self.owner_name} ({reach}) - {self.status.value}"


class ResourceCreate(BaseModel):
    """Schema for adding a resource."""

    name: str = Field(..., max_length=200)
    owner_name: str = Field(..., max_length=200)
    owner_contact: str
    owner_email: Optional[str] = Field(None, max_length=200)

    @field_validator("name", "owner_name", "owner_contact", mode="before")
    @classmethod
    def strip_required(cls, v):
        """Strip required text fields and reject blanks."""
        if v is None:
            raise ValueError("is required")
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("must not be empty")
        return v

    @field_validator("owner_contact")
    @classmethod
    def contact_looks_like_phone(cls, v: str) -> str:
        """Validate the contact is a phone-like number."""
        if not CONTACT_PATTERN.fullmatch(v):
            raise ValueError("must be 6-20 digits, '+', '-' or spaces")
        return v

    @field_validator("owner_email", mode="before")
    @classmethod
    def normalize_owner_email(cls, v):
        """Blank email means no email; otherwise it must look valid."""
        if v is None:
            return None
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            if not is_plausible_email(v):
                raise ValueError("is not a valid email address")
            return v.lower()
        return v
