"""SQLAlchemy models for the chat file.

Tables:
- chat_messages: Every message, grouped by conversation id and ordered by position
"""

from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..db.models import Base


class ChatMessageRecord(Base):
    """Stored form of a ChatMessage."""

    __tablename__ = "chat_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    conversation_id: Mapped[str] = mapped_column(String(410), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    from_email: Mapped[str] = mapped_column(String(200), nullable=False)
    to_email: Mapped[str] = mapped_column(String(200), nullable=False)
    timestamp_millis: Mapped[int] = mapped_column(BigInteger, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
