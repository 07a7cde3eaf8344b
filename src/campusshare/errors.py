"""Exceptions raised by campusshare.

Validation and state-conflict errors are raised before anything is mutated.
PersistenceError is also an OSError so callers can treat it as plain I/O.
"""


class CampusShareError(Exception):
    """Base class for all campusshare errors."""

    pass


class ValidationError(CampusShareError, ValueError):
    """Malformed input to a ledger or chat operation."""

    pass


class NotFoundError(CampusShareError, LookupError):
    """No resource exists with the requested id."""

    def __init__(self, resource_id: str):
        super().__init__(f"Resource not found: {resource_id}")
        self.resource_id = resource_id


class StateConflictError(CampusShareError):
    """Operation is not allowed in the resource's current state."""

    pass


class AlreadyTakenError(StateConflictError):
    """Resource is already taken."""

    def __init__(self, resource_id: str):
        super().__init__(f"Resource already taken: {resource_id}")
        self.resource_id = resource_id


class AlreadyAvailableError(StateConflictError):
    """Resource is already available."""

    def __init__(self, resource_id: str):
        super().__init__(f"Resource already available: {resource_id}")
        self.resource_id = resource_id


class AuthRequiredError(CampusShareError):
    """A verified identity is required."""

    pass


class AdminRequiredError(CampusShareError):
    """Operation is restricted to admins."""

    pass


class PaymentFailedError(CampusShareError):
    """The payment gate declined the charge."""

    pass


class PersistenceError(CampusShareError, OSError):
    """Reading or writing a store file failed."""

    pass
