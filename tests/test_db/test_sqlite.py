"""Tests for the store file Database helper."""

import threading

import pytest
from sqlalchemy import text

from campusshare.db import Database
from campusshare.errors import PersistenceError
from campusshare.resources import ResourceRecord


@pytest.fixture
def db(tmp_path):
    """Database for a resources-shaped file."""
    database = Database(tmp_path / "nested" / "store.db", tables=[ResourceRecord.__table__])
    yield database
    database.dispose()


class TestDatabase:
    """Tests for Database."""

    def test_exists_and_blank(self, db):
        """Test a fresh path does not exist and is blank once created."""
        assert db.exists() is False

        db.ensure_directory()
        assert db.is_blank() is True

        db.create_tables()
        assert db.exists() is True
        assert db.is_blank() is False
        assert db.has_table("resources")
        assert db.has_table("store_meta")

    def test_memory_database_always_exists(self):
        """Test the in-memory database reports existing."""
        assert Database(":memory:").exists() is True

    def test_lock_is_reentrant(self, db):
        """Test the shared lock can be re-acquired by its holder."""
        assert isinstance(db.lock, type(threading.RLock()))
        with db.lock:
            with db.lock:
                pass

    def test_session_rolls_back_on_error(self, db):
        """Test a failing session leaves no partial writes."""
        db.ensure_directory()
        db.create_tables()

        with pytest.raises(RuntimeError):
            with db.get_session() as session:
                db.write_format(session, "test.format", 1)
                session.flush()
                raise RuntimeError("boom")

        with db.get_session() as session:
            assert db.read_meta(session) == {}


class TestFormatTag:
    """Tests for format tagging."""

    def test_write_then_check(self, db):
        """Test a tagged file passes its own check."""
        db.ensure_directory()
        db.create_tables()
        with db.get_session() as session:
            db.write_format(session, "test.format", 3)

        with db.get_session() as session:
            db.check_format(session, "test.format", 3)
            assert db.read_meta(session) == {"format": "test.format", "schema_version": "3"}

    def test_version_can_be_rewritten(self, db):
        """Test rewriting the same format updates the version."""
        db.ensure_directory()
        db.create_tables()
        with db.get_session() as session:
            db.write_format(session, "test.format", 1)
        with db.get_session() as session:
            db.write_format(session, "test.format", 2)

        with db.get_session() as session:
            db.check_format(session, "test.format", 2)

    def test_check_mismatch(self, db):
        """Test a different format fails the check."""
        db.ensure_directory()
        db.create_tables()
        with db.get_session() as session:
            db.write_format(session, "other.format", 1)

        with db.get_session() as session:
            with pytest.raises(PersistenceError):
                db.check_format(session, "test.format", 1)


class TestWritable:
    """Tests for refusing to write into someone else's file."""

    def test_blank_file_is_writable(self, db):
        """Test a file with no tables may be written."""
        db.ensure_directory()
        db.check_writable("test.format")

    def test_other_tables_make_file_unwritable(self, db):
        """Test a file holding unknown tables is not blank and is refused."""
        db.ensure_directory()
        with db.engine.begin() as conn:
            conn.execute(text("CREATE TABLE notes (x INTEGER)"))

        assert db.is_blank() is False
        with pytest.raises(PersistenceError, match="untagged data"):
            db.check_writable("test.format")

    def test_other_format_is_unwritable(self, db):
        """Test a file tagged with another format is refused."""
        db.ensure_directory()
        db.create_tables()
        with db.get_session() as session:
            db.write_format(session, "other.format", 1)

        with pytest.raises(PersistenceError, match="Refusing to overwrite 'other.format'"):
            db.check_writable("test.format")

    def test_missing_tag_check(self, db):
        """Test a file without store_meta reports a missing tag."""
        db.ensure_directory()
        with db.engine.begin() as conn:
            conn.execute(text("CREATE TABLE notes (x INTEGER)"))

        with db.get_session() as session:
            with pytest.raises(PersistenceError, match="no format tag"):
                db.check_format(session, "test.format", 1)
