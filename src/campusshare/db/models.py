"""SQLAlchemy ORM base shared by the store files.

Tables:
- store_meta: Format tag and schema version of a store file
"""

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class StoreMeta(Base):
    """Key/value metadata describing what a store file holds."""

    __tablename__ = "store_meta"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[str] = mapped_column(String(200), nullable=False)
