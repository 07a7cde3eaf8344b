"""SQLAlchemy models for the resource file.

Tables:
- resources: One row per shared resource, ordered by position
"""

from typing import Optional

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..db.models import Base


class ResourceRecord(Base):
    """Stored form of a Resource."""

    __tablename__ = "resources"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    owner_name: Mapped[str] = mapped_column(String(200), nullable=False)
    owner_contact: Mapped[str] = mapped_column(String(20), nullable=False)
    owner_email: Mapped[Optional[str]] = mapped_column(String(200))
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<ResourceRecord(id={self.id}, name='{self.name}')>"
