"""Shared resource lending.

Provides functionality for:
- Adding and removing shareable resources
- Borrowing (after payment) and returning them
- Saving and loading the full resource set
"""

from .ledger import ResourceLedger
from .models import ResourceRecord
from .schemas import Resource, ResourceCreate, ResourceStatus
from .store import ResourceStore

__all__ = [
    "ResourceLedger",
    "ResourceRecord",
    "Resource",
    "ResourceCreate",
    "ResourceStatus",
    "ResourceStore",
]
