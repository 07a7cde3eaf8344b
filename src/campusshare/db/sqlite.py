"""SQLite file handling for the local stores.

Each store (resources, chats) owns one SQLite file. A file is tagged with a
format name and schema version in ``store_meta`` so that loading a foreign or
outdated file fails with a clear PersistenceError.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Sequence, Union

from sqlalchemy import Table, create_engine, inspect, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..errors import PersistenceError
from .models import Base, StoreMeta

FORMAT_KEY = "format"
VERSION_KEY = "schema_version"


class Database:
    """Connection manager for a single store file."""

    def __init__(self, db_path: Union[str, Path], tables: Optional[Sequence[Table]] = None):
        """Initialize database connection.

        Args:
            db_path: Path to the SQLite file, or ":memory:"
            tables: Tables this file holds, besides store_meta
        """
        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"
        self.tables = [StoreMeta.__table__, *(tables or [])]

        # For in-memory databases, use StaticPool to reuse the same connection
        # This ensures all sessions share the same in-memory database
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

        # Shared by the store and the in-memory component it backs
        self.lock = threading.RLock()

    def exists(self) -> bool:
        """Check whether the backing file exists."""
        return self._is_memory or self.db_path.exists()

    def ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        if not self._is_memory:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create this file's tables if they are missing."""
        Base.metadata.create_all(self.engine, tables=self.tables)

    def has_table(self, name: str) -> bool:
        """Check whether a table exists in the file."""
        return inspect(self.engine).has_table(name)

    def table_names(self) -> list[str]:
        """Names of every table in the file."""
        return inspect(self.engine).get_table_names()

    def is_blank(self) -> bool:
        """True if the file holds no tables at all."""
        return not self.table_names()

    def check_writable(self, fmt: str) -> None:
        """Refuse to write into a file that belongs to someone else.

        A blank file, or one holding only this store's own tables, may be
        written. Anything else must already carry the given format tag.

        Raises:
            PersistenceError: If the file holds other data
        """
        if not self.exists() or self.is_blank():
            return

        own = {t.name for t in self.tables}
        if self.has_table(StoreMeta.__tablename__):
            with self.get_session() as session:
                existing = self.read_meta(session).get(FORMAT_KEY)
            if existing is not None:
                if existing != fmt:
                    raise PersistenceError(
                        f"Refusing to overwrite '{existing}' data in {self.db_path}"
                    )
                return

        if not set(self.table_names()) <= own:
            raise PersistenceError(f"Refusing to overwrite untagged data in {self.db_path}")

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Close pooled connections."""
        self.engine.dispose()

    # ========================================================================
    # Format tagging
    # ========================================================================

    def read_meta(self, session: Session) -> dict[str, str]:
        """Read all store_meta rows."""
        rows = session.execute(select(StoreMeta)).scalars().all()
        return {row.key: row.value for row in rows}

    def check_format(self, session: Session, fmt: str, version: int) -> None:
        """Verify the file carries the expected format tag and version.

        Raises:
            PersistenceError: If the tag is missing or does not match
        """
        meta = self.read_meta(session) if self.has_table(StoreMeta.__tablename__) else {}
        found_fmt = meta.get(FORMAT_KEY)
        found_version = meta.get(VERSION_KEY)

        if found_fmt is None:
            raise PersistenceError(f"{self.db_path} has no format tag")
        if found_fmt != fmt:
            raise PersistenceError(
                f"{self.db_path} holds '{found_fmt}' data, expected '{fmt}'"
            )
        if found_version != str(version):
            raise PersistenceError(
                f"{self.db_path} has schema version {found_version}, expected {version}"
            )

    def write_format(self, session: Session, fmt: str, version: int) -> None:
        """Tag the file with a format and version.

        Raises:
            PersistenceError: If the file already holds another format
        """
        meta = self.read_meta(session)
        existing = meta.get(FORMAT_KEY)
        if existing is not None and existing != fmt:
            raise PersistenceError(
                f"Refusing to overwrite '{existing}' data in {self.db_path}"
            )

        session.merge(StoreMeta(key=FORMAT_KEY, value=fmt))
        session.merge(StoreMeta(key=VERSION_KEY, value=str(version)))
