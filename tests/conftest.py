"""Pytest configuration and shared fixtures.

This module provides fixtures for testing campusshare, including store files
under a temporary directory, ledgers wired to fixed payment gates, and
conversation stores.
"""

import os
from pathlib import Path
from typing import Generator

import pytest

from campusshare.chat import ConversationPersistence, ConversationStore
from campusshare.config import reset_config
from campusshare.payments import FixedPaymentGate
from campusshare.resources import ResourceLedger, ResourceStore


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def resources_path(tmp_path: Path) -> Path:
    """Path for a resource file that does not exist yet."""
    return tmp_path / "data" / "resources.db"


@pytest.fixture
def chats_path(tmp_path: Path) -> Path:
    """Path for a chat file that does not exist yet."""
    return tmp_path / "data" / "chats.db"


@pytest.fixture
def resource_store(resources_path: Path) -> Generator[ResourceStore, None, None]:
    """Resource store backed by a temporary file."""
    store = ResourceStore(resources_path)
    yield store
    store.db.dispose()


@pytest.fixture
def paying_gate() -> FixedPaymentGate:
    """Payment gate that approves every charge."""
    return FixedPaymentGate(True)


@pytest.fixture
def declining_gate() -> FixedPaymentGate:
    """Payment gate that declines every charge."""
    return FixedPaymentGate(False)


@pytest.fixture
def ledger(resource_store: ResourceStore, paying_gate: FixedPaymentGate) -> ResourceLedger:
    """Empty ledger whose payments always succeed."""
    return ResourceLedger(resource_store, paying_gate)


@pytest.fixture
def conversation_persistence(chats_path: Path) -> Generator[ConversationPersistence, None, None]:
    """Conversation persistence backed by a temporary file."""
    persistence = ConversationPersistence(chats_path)
    yield persistence
    persistence.db.dispose()


@pytest.fixture
def conversations(conversation_persistence: ConversationPersistence) -> ConversationStore:
    """Empty conversation store."""
    return ConversationStore(conversation_persistence)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def drill(ledger: ResourceLedger):
    """The drill owned by Alice."""
    return ledger.add("Drill", "Alice", "9999999999", "alice@campus.edu")


@pytest.fixture
def sample_resources(ledger: ResourceLedger) -> list:
    """A few resources, one without an owner email."""
    return [
        ledger.add("Drill", "Alice", "9999999999", "alice@campus.edu"),
        ledger.add("Tent", "Bob", "+91 98765-43210", "Bob@Campus.edu"),
        ledger.add("Calculator", "Carol", "555-123456"),
    ]


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture
def campus_env(tmp_path: Path) -> Generator[Path, None, None]:
    """Point configuration at a temporary data directory."""
    data_dir = tmp_path / "campus"
    keys = {
        "CAMPUSSHARE_DATA_DIR": str(data_dir),
        "CAMPUSSHARE_ADMINS": "admin@campus.edu",
        "CAMPUSSHARE_PAYMENT_SUCCESS_RATE": "1.0",
        "CAMPUSSHARE_PAYMENT_TIMEOUT": "0",
    }
    extra = [
        "CAMPUSSHARE_RESOURCES_FILE",
        "CAMPUSSHARE_CHATS_FILE",
        "CAMPUSSHARE_USER",
        "CAMPUSSHARE_BORROW_FEE",
        "CAMPUSSHARE_LOG_LEVEL",
    ]
    saved = {k: os.environ.get(k) for k in [*keys, *extra]}
    for k in saved:
        os.environ.pop(k, None)
    os.environ.update(keys)
    reset_config()

    yield data_dir

    reset_config()
    for k, v in saved.items():
        if v is None:
            os.environ.pop(k, None)
        else:
            os.environ[k] = v
