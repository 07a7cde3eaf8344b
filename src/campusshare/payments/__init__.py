"""Payment gate collaborators."""

from .gate import (
    BoundedPaymentGate,
    FixedPaymentGate,
    PaymentGate,
    SimulatedPaymentGate,
    build_gate,
)

__all__ = [
    "PaymentGate",
    "SimulatedPaymentGate",
    "FixedPaymentGate",
    "BoundedPaymentGate",
    "build_gate",
]
