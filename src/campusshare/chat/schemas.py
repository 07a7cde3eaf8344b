"""Pydantic schemas for chat messages."""

import time
from typing import Optional

from pydantic import BaseModel


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return time.time_ns() // 1_000_000


class ChatMessage(BaseModel):
    """A direct message between two email addresses. Never changes once created."""

    from_email: str
    to_email: str
    timestamp_millis: int
    text: str

    model_config = {"frozen": True, "from_attributes": True}

    @classmethod
    def create(
        cls,
        from_email: str,
        to_email: str,
        text: str,
        timestamp_millis: Optional[int] = None,
    ) -> "ChatMessage":
        """Build a message stamped with the current time."""
        return cls(
            from_email=from_email,
            to_email=to_email,
            timestamp_millis=now_millis() if timestamp_millis is None else timestamp_millis,
            text=text,
        )
