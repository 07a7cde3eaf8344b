"""Conversation store: append-only direct messages between two emails."""

import logging
from typing import Optional

from ..errors import PersistenceError, ValidationError
from ..identity.email import normalize_email
from .persistence import ConversationPersistence
from .schemas import ChatMessage

logger = logging.getLogger(__name__)

SEPARATOR = "::"


def conversation_id(a: Optional[str], b: Optional[str]) -> Optional[str]:
    """Canonical id for the conversation between two emails.

    Both addresses are lowercased and the smaller one goes first, so the
    argument order never matters.

    Example:
        >>> conversation_id("Bob@x.edu", "alice@x.edu")
        'alice@x.edu::bob@x.edu'
    """
    if a is None or b is None:
        return None
    a, b = a.lower(), b.lower()
    if a <= b:
        return f"{a}{SEPARATOR}{b}"
    return f"{b}{SEPARATOR}{a}"


class ConversationStore:
    """Owns every conversation and persists after each appended message.

    The store loads once at construction. There is no save method: every
    append writes the whole store before returning.
    """

    conversation_id = staticmethod(conversation_id)

    def __init__(self, persistence: ConversationPersistence):
        """Initialize the store from persistence.

        A store that cannot be loaded is logged and starts empty.
        """
        self.persistence = persistence
        self._lock = persistence.lock
        self._conversations: dict[str, list[ChatMessage]] = {}

        with self._lock:
            try:
                self._conversations = persistence.load()
            except PersistenceError as e:
                logger.warning("Starting with no conversations: %s", e)

    def get_conversation(self, a: Optional[str], b: Optional[str]) -> list[ChatMessage]:
        """Full message history between two emails, in append order."""
        conv_id = conversation_id(a, b)
        if conv_id is None:
            return []
        with self._lock:
            return list(self._conversations.get(conv_id, []))

    def append_message(self, message: ChatMessage) -> None:
        """Append a message and persist the whole store.

        If persisting fails the message stays in memory and the error is
        raised; the next successful append writes it out.

        Raises:
            PersistenceError: If the store could not be written
        """
        conv_id = conversation_id(message.from_email, message.to_email)
        if conv_id is None:
            return

        with self._lock:
            self._conversations.setdefault(conv_id, []).append(message)
            try:
                self.persistence.save(self._conversations)
            except PersistenceError:
                logger.error("Message kept in memory only for %s", conv_id)
                raise

    def send(
        self,
        from_email: Optional[str],
        to_email: Optional[str],
        text: str,
        now: Optional[int] = None,
    ) -> ChatMessage:
        """Create a message from the current user and append it.

        Args:
            from_email: Sender email
            to_email: Recipient email
            text: Message text
            now: Timestamp in epoch milliseconds (default: current time)

        Returns:
            The appended message

        Raises:
            ValidationError: Missing email or blank text
        """
        sender = normalize_email(from_email)
        recipient = normalize_email(to_email)
        if sender is None or recipient is None:
            raise ValidationError("Both sender and recipient emails are required")

        text = (text or "").strip()
        if not text:
            raise ValidationError("Message text must not be empty")

        message = ChatMessage.create(sender, recipient, text, timestamp_millis=now)
        self.append_message(message)
        return message

    def list_conversations_for(self, email: Optional[str]) -> set[str]:
        """Emails of everyone the given address has a conversation with."""
        if email is None:
            return set()
        low = email.lower()
        others = set()
        with self._lock:
            for conv_id in self._conversations:
                parts = conv_id.split(SEPARATOR)
                if len(parts) != 2:
                    continue
                if parts[0] == low:
                    others.add(parts[1])
                elif parts[1] == low:
                    others.add(parts[0])
        return others

    def snapshot(self) -> dict[str, list[ChatMessage]]:
        """Copy of every conversation, for export."""
        with self._lock:
            return {k: list(v) for k, v in self._conversations.items()}
