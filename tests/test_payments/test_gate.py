"""Tests for payment gates."""

import random
import threading

import pytest

from campusshare.payments import (
    BoundedPaymentGate,
    FixedPaymentGate,
    SimulatedPaymentGate,
    build_gate,
)


class TestFixedPaymentGate:
    """Tests for FixedPaymentGate."""

    def test_returns_fixed_result_and_records_calls(self):
        """Test the gate answers the same way and remembers calls."""
        gate = FixedPaymentGate(False)

        assert gate.charge(50, "Borrow fee for Drill") is False
        assert gate.charge(10.5, "tip") is False
        assert gate.calls == [(50, "Borrow fee for Drill"), (10.5, "tip")]


class TestSimulatedPaymentGate:
    """Tests for SimulatedPaymentGate."""

    def test_always_succeeds_at_rate_one(self):
        """Test a success rate of 1 never declines."""
        gate = SimulatedPaymentGate(1.0)
        assert all(gate.charge(1, "x") for _ in range(50))

    def test_never_succeeds_at_rate_zero(self):
        """Test a success rate of 0 always declines."""
        gate = SimulatedPaymentGate(0.0)
        assert not any(gate.charge(1, "x") for _ in range(50))

    def test_seeded_rng_is_reproducible(self):
        """Test an injected random source makes outcomes repeatable."""
        first = SimulatedPaymentGate(0.5, random.Random(42))
        second = SimulatedPaymentGate(0.5, random.Random(42))

        assert [first.charge(1, "x") for _ in range(20)] == [
            second.charge(1, "x") for _ in range(20)
        ]

    def test_invalid_rate(self):
        """Test rates outside [0, 1] are rejected."""
        with pytest.raises(ValueError):
            SimulatedPaymentGate(1.5)


class StuckGate:
    """Gate that blocks until released."""

    def __init__(self):
        self.release = threading.Event()

    def charge(self, amount, note):
        self.release.wait(5)
        return True


class TestBoundedPaymentGate:
    """Tests for BoundedPaymentGate."""

    def test_passes_through_answer(self):
        """Test a prompt answer is returned unchanged."""
        assert BoundedPaymentGate(FixedPaymentGate(True), 1.0).charge(5, "x") is True
        assert BoundedPaymentGate(FixedPaymentGate(False), 1.0).charge(5, "x") is False

    def test_times_out_as_decline(self):
        """Test a stuck gate counts as a decline."""
        inner = StuckGate()
        gate = BoundedPaymentGate(inner, 0.05)
        try:
            assert gate.charge(5, "x") is False
        finally:
            inner.release.set()

    def test_inner_exception_propagates(self):
        """Test errors from the inner gate reach the caller."""

        class BrokenGate:
            def charge(self, amount, note):
                raise RuntimeError("gateway down")

        with pytest.raises(RuntimeError, match="gateway down"):
            BoundedPaymentGate(BrokenGate(), 1.0).charge(5, "x")

    def test_invalid_timeout(self):
        """Test a non-positive timeout is rejected."""
        with pytest.raises(ValueError):
            BoundedPaymentGate(FixedPaymentGate(True), 0)


class TestBuildGate:
    """Tests for build_gate."""

    def test_unbounded(self):
        """Test no timeout gives the bare simulated gate."""
        assert isinstance(build_gate(0.9), SimulatedPaymentGate)

    def test_bounded(self):
        """Test a timeout wraps the simulated gate."""
        gate = build_gate(0.9, timeout=2.0)
        assert isinstance(gate, BoundedPaymentGate)
        assert isinstance(gate.inner, SimulatedPaymentGate)
