"""Resource ledger: the in-memory authority on resources and availability."""

import logging
import math
from typing import Optional

from pydantic import ValidationError as SchemaError

from ..errors import (
    AlreadyAvailableError,
    AlreadyTakenError,
    AuthRequiredError,
    NotFoundError,
    PaymentFailedError,
    PersistenceError,
    ValidationError,
)
from ..identity.email import normalize_email
from ..payments.gate import PaymentGate
from .schemas import Resource, ResourceCreate
from .store import ResourceStore

logger = logging.getLogger(__name__)

DEFAULT_BORROW_FEE = 50.0
ID_SEED = 1000


def _schema_message(error: SchemaError) -> str:
    parts = []
    for err in error.errors():
        field = ".".join(str(p) for p in err["loc"]) or "input"
        msg = err["msg"].removeprefix("Value error, ")
        parts.append(f"{field} {msg}")
    return "; ".join(parts)


class ResourceLedger:
    """Manages resources and their available/taken state.

    Every mutation, and every load or save, holds the store's lock for its
    whole duration, so the ledger and its store act as one component.
    """

    def __init__(
        self,
        store: ResourceStore,
        gate: PaymentGate,
        default_fee: float = DEFAULT_BORROW_FEE,
        id_seed: int = ID_SEED,
    ):
        """Initialize an empty ledger.

        Args:
            store: Resource persistence
            gate: Payment gate consulted by borrow
            default_fee: Amount charged when borrow is not given one
            id_seed: First id handed out
        """
        self.store = store
        self.gate = gate
        self.default_fee = default_fee
        self._lock = store.lock
        self._resources: dict[str, Resource] = {}
        self._next_id = id_seed

    @classmethod
    def open(cls, store: ResourceStore, gate: PaymentGate, **kwargs) -> "ResourceLedger":
        """Create a ledger and load it from the store.

        An unreadable store is logged and the ledger starts empty.
        """
        ledger = cls(store, gate, **kwargs)
        try:
            ledger.load()
        except PersistenceError as e:
            logger.warning("Starting with no resources: %s", e)
        return ledger

    def __len__(self) -> int:
        return len(self._resources)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> int:
        """Replace the in-memory resources with the stored ones.

        Returns:
            Number of resources loaded
        """
        with self._lock:
            loaded = self.store.load()
            self._resources = {r.id: r for r in loaded}
            self._reseed()
            logger.info("Loaded %d resources from %s", len(loaded), self.store.path)
            return len(loaded)

    def save(self) -> int:
        """Persist every resource to the store.

        Returns:
            Number of resources saved
        """
        with self._lock:
            self.store.save(self._resources.values())
            return len(self._resources)

    def _reseed(self) -> None:
        numeric = [int(rid) for rid in self._resources if rid.isdecimal()]
        if numeric:
            self._next_id = max(self._next_id, max(numeric) + 1)

    def _allocate_id(self) -> str:
        while str(self._next_id) in self._resources:
            self._next_id += 1
        rid = str(self._next_id)
        self._next_id += 1
        return rid

    def _get(self, resource_id: str) -> Resource:
        resource = self._resources.get(resource_id)
        if resource is None:
            raise NotFoundError(resource_id)
        return resource

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def find_by_id(self, resource_id: str) -> Optional[Resource]:
        """Get a copy of a resource by ID.

        Args:
            resource_id: Resource ID

        Returns:
            Resource or None
        """
        with self._lock:
            resource = self._resources.get(resource_id)
            return resource.model_copy() if resource else None

    def list_resources(self, available_only: bool = False) -> list[Resource]:
        """List copies of all resources in the order they were added.

        Args:
            available_only: Only return resources that can be borrowed

        Returns:
            List of resources
        """
        with self._lock:
            return [
                r.model_copy()
                for r in self._resources.values()
                if r.available or not available_only
            ]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(
        self,
        name: str,
        owner_name: str,
        owner_contact: str,
        owner_email: Optional[str] = None,
    ) -> Resource:
        """Add a new, available resource.

        Args:
            name: Resource name
            owner_name: Owner display name
            owner_contact: Owner phone number
            owner_email: Owner email, used to start a chat

        Returns:
            The created resource

        Raises:
            ValidationError: If any field is missing or malformed
        """
        try:
            data = ResourceCreate(
                name=name,
                owner_name=owner_name,
                owner_contact=owner_contact,
                owner_email=owner_email,
            )
        except SchemaError as e:
            raise ValidationError(_schema_message(e)) from e

        with self._lock:
            resource = Resource(id=self._allocate_id(), **data.model_dump())
            self._resources[resource.id] = resource

        logger.info("Added resource %s (%s)", resource.id, resource.name)
        return resource.model_copy()

    def borrow(
        self,
        resource_id: str,
        requester_email: Optional[str],
        amount: Optional[float] = None,
        note: Optional[str] = None,
    ) -> Resource:
        """Borrow a resource after the payment gate approves the fee.

        Nothing changes unless the gate approves. The lock is held across
        the gate call, so no caller can observe a half-finished borrow.

        Args:
            resource_id: Resource ID
            requester_email: Verified email of the borrower
            amount: Fee to charge (default: the ledger's default fee)
            note: Payment note (default: "Borrow fee for <name>")

        Returns:
            The updated resource

        Raises:
            NotFoundError: Unknown resource
            AlreadyTakenError: Resource is already taken
            AuthRequiredError: No requester identity
            ValidationError: Amount not a positive, finite number
            PaymentFailedError: The gate declined or failed
        """
        amount = self.default_fee if amount is None else amount

        with self._lock:
            resource = self._get(resource_id)
            if not resource.available:
                raise AlreadyTakenError(resource_id)

            requester = normalize_email(requester_email)
            if requester is None:
                raise AuthRequiredError("Login required to borrow a resource")

            if not math.isfinite(amount) or amount <= 0:
                raise ValidationError("Amount must be a positive number")

            note = note or f"Borrow fee for {resource.name}"
            try:
                paid = self.gate.charge(amount, note)
            except Exception as e:
                logger.warning("Payment gate error for resource %s: %s", resource_id, e)
                raise PaymentFailedError(f"Payment failed: {e}") from e

            if not paid:
                logger.warning("Payment declined for resource %s by %s", resource_id, requester)
                raise PaymentFailedError("Payment failed or cancelled. Borrow not completed.")

            resource.available = False
            logger.info("Resource %s borrowed by %s", resource_id, requester)
            return resource.model_copy()

    def give_back(self, resource_id: str) -> Resource:
        """Return a taken resource.

        Raises:
            NotFoundError: Unknown resource
            AlreadyAvailableError: Resource is not taken
        """
        with self._lock:
            resource = self._get(resource_id)
            if resource.available:
                raise AlreadyAvailableError(resource_id)
            resource.available = True
            logger.info("Resource %s returned", resource_id)
            return resource.model_copy()

    def remove(self, resource_id: str) -> Resource:
        """Delete a resource permanently.

        Authorization is the caller's job; the ledger trusts it.

        Raises:
            NotFoundError: Unknown resource
        """
        with self._lock:
            resource = self._get(resource_id)
            del self._resources[resource_id]
            logger.info("Resource %s removed", resource_id)
            return resource.model_copy()
