"""Conversation persistence: the full id -> messages map in one SQLite file."""

import logging
from pathlib import Path
from typing import Mapping, Sequence, Union

from pydantic import ValidationError as SchemaError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from ..db.sqlite import Database
from ..errors import PersistenceError
from .models import ChatMessageRecord
from .schemas import ChatMessage

logger = logging.getLogger(__name__)

STORE_FORMAT = "campusshare.chats"
SCHEMA_VERSION = 1


class ConversationPersistence:
    """Saves and loads every conversation at once."""

    def __init__(self, path: Union[str, Path]):
        """Initialize the persistence.

        Args:
            path: SQLite file path, or ":memory:"
        """
        self.db = Database(path, tables=[ChatMessageRecord.__table__])
        self.path = self.db.db_path
        self.lock = self.db.lock

    def save(self, conversations: Mapping[str, Sequence[ChatMessage]]) -> None:
        """Replace the file content with the given conversations.

        Raises:
            PersistenceError: If the file cannot be written
        """
        with self.lock:
            try:
                self.db.ensure_directory()
                self.db.check_writable(STORE_FORMAT)
                self.db.create_tables()
                with self.db.get_session() as session:
                    self.db.write_format(session, STORE_FORMAT, SCHEMA_VERSION)
                    session.execute(delete(ChatMessageRecord))
                    for conv_id, messages in conversations.items():
                        session.add_all(
                            ChatMessageRecord(
                                conversation_id=conv_id,
                                position=i,
                                **m.model_dump(),
                            )
                            for i, m in enumerate(messages)
                        )
            except PersistenceError:
                raise
            except (SQLAlchemyError, OSError) as e:
                raise PersistenceError(f"Cannot save chats to {self.path}: {e}") from e

    def load(self) -> dict[str, list[ChatMessage]]:
        """Read every stored conversation, messages in append order.

        Raises:
            PersistenceError: If the file is corrupt, unreadable or foreign
        """
        with self.lock:
            if not self.db.exists():
                return {}
            try:
                if self.db.is_blank():
                    return {}
                with self.db.get_session() as session:
                    self.db.check_format(session, STORE_FORMAT, SCHEMA_VERSION)
                    rows = session.execute(
                        select(ChatMessageRecord).order_by(
                            ChatMessageRecord.conversation_id,
                            ChatMessageRecord.position,
                        )
                    ).scalars().all()

                    conversations: dict[str, list[ChatMessage]] = {}
                    for row in rows:
                        conversations.setdefault(row.conversation_id, []).append(
                            ChatMessage.model_validate(row)
                        )
                    return conversations
            except PersistenceError:
                raise
            except (SQLAlchemyError, SchemaError, OSError) as e:
                raise PersistenceError(f"Cannot load chats from {self.path}: {e}") from e
