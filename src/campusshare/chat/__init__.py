"""Direct messages between campus members.

Provides functionality for:
- Canonical conversation ids for a pair of emails
- Append-only conversations persisted after every message
- Listing who a user has talked to
"""

from .models import ChatMessageRecord
from .persistence import ConversationPersistence
from .schemas import ChatMessage
from .store import ConversationStore, conversation_id

__all__ = [
    "ChatMessageRecord",
    "ConversationPersistence",
    "ChatMessage",
    "ConversationStore",
    "conversation_id",
]
