"""Payment gate collaborators.

The ledger only needs a ``charge(amount, note) -> bool`` call. Nothing here
moves real money.
"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class PaymentGate(Protocol):
    """Contract for a pass/fail payment service."""

    def charge(self, amount: float, note: str) -> bool: ...


class SimulatedPaymentGate:
    """Approves a configurable share of charges at random."""

    def __init__(self, success_rate: float = 0.9, rng: Optional[random.Random] = None):
        """Initialize the simulated gate.

        Args:
            success_rate: Probability that a charge succeeds
            rng: Random source (injected for reproducible runs)
        """
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError("success_rate must be between 0 and 1")
        self.success_rate = success_rate
        self.rng = rng or random.Random()

    def charge(self, amount: float, note: str) -> bool:
        return self.rng.random() < self.success_rate


class FixedPaymentGate:
    """Always returns the same answer and remembers what it was asked."""

    def __init__(self, result: bool = True):
        self.result = result
        self.calls: list[tuple[float, str]] = []

    def charge(self, amount: float, note: str) -> bool:
        self.calls.append((amount, note))
        return self.result


class BoundedPaymentGate:
    """Wraps another gate and gives up on it after a timeout.

    A charge that does not answer in time counts as declined. The inner call
    keeps running on its worker thread; its late answer is discarded.
    """

    def __init__(self, inner: PaymentGate, timeout: float):
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.inner = inner
        self.timeout = timeout

    def charge(self, amount: float, note: str) -> bool:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="payment-gate")
        future = executor.submit(self.inner.charge, amount, note)
        try:
            return bool(future.result(timeout=self.timeout))
        except FutureTimeout:
            logger.warning(
                "Payment gate did not answer within %.1fs for %r", self.timeout, note
            )
            return False
        finally:
            executor.shutdown(wait=False)


def build_gate(success_rate: float, timeout: Optional[float] = None) -> PaymentGate:
    """Build the simulated gate used by the command line."""
    gate: PaymentGate = SimulatedPaymentGate(success_rate)
    if timeout:
        gate = BoundedPaymentGate(gate, timeout)
    return gate
