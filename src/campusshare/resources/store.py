"""Resource persistence: the full resource set in one SQLite file."""

import logging
from pathlib import Path
from typing import Iterable, Union

from pydantic import ValidationError as SchemaError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from ..db.sqlite import Database
from ..errors import PersistenceError
from .models import ResourceRecord
from .schemas import Resource

logger = logging.getLogger(__name__)

STORE_FORMAT = "campusshare.resources"
SCHEMA_VERSION = 1


class ResourceStore:
    """Saves and loads the complete resource sequence.

    ``save`` overwrites whatever the file held before, in one transaction.
    ``load`` returns an empty list when the file does not exist yet.
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize the store.

        Args:
            path: SQLite file path, or ":memory:"
        """
        self.db = Database(path, tables=[ResourceRecord.__table__])
        self.path = self.db.db_path
        self.lock = self.db.lock

    def save(self, resources: Iterable[Resource]) -> None:
        """Replace the file content with the given resources.

        Raises:
            PersistenceError: If the file cannot be written
        """
        resources = list(resources)
        with self.lock:
            try:
                self.db.ensure_directory()
                self.db.check_writable(STORE_FORMAT)
                self.db.create_tables()
                with self.db.get_session() as session:
                    self.db.write_format(session, STORE_FORMAT, SCHEMA_VERSION)
                    session.execute(delete(ResourceRecord))
                    session.add_all(
                        ResourceRecord(position=i, **r.model_dump())
                        for i, r in enumerate(resources)
                    )
            except PersistenceError:
                raise
            except (SQLAlchemyError, OSError) as e:
                raise PersistenceError(f"Cannot save resources to {self.path}: {e}") from e

        logger.debug("Saved %d resources to %s", len(resources), self.path)

    def load(self) -> list[Resource]:
        """Read every stored resource, in saved order.

        Raises:
            PersistenceError: If the file is corrupt, unreadable or foreign
        """
        with self.lock:
            if not self.db.exists():
                return []
            try:
                if self.db.is_blank():
                    return []
                with self.db.get_session() as session:
                    self.db.check_format(session, STORE_FORMAT, SCHEMA_VERSION)
                    rows = session.execute(
                        select(ResourceRecord).order_by(ResourceRecord.position)
                    ).scalars().all()
                    return [Resource.model_validate(row) for row in rows]
            except PersistenceError:
                raise
            except (SQLAlchemyError, SchemaError, OSError) as e:
                raise PersistenceError(f"Cannot load resources from {self.path}: {e}") from e
