"""Tests for the reference backend."""

import pytest

from circuit_test_runner.errors import OptimizeError
from circuit_test_runner.models.result import Satisfied, Unsatisfied
from circuit_test_runner.toolchains.reference.backend import ReferenceBackend
from circuit_test_runner.toolchains.reference.circuit import (
    AssertZero,
    Assign,
    BinOp,
    Circuit,
    Const,
    Neg,
    Witness,
)
from circuit_test_runner.toolchains.reference.config import (
    BN254_SCALAR_MODULUS,
    ReferenceToolchainConfig,
)


@pytest.fixture
def backend() -> ReferenceBackend:
    """Create backend over the default field."""
    return ReferenceBackend.from_config(ReferenceToolchainConfig())


def assert_eq(lhs: object, rhs: object, source: str) -> AssertZero:
    return AssertZero(expression=BinOp("-", lhs, rhs), source=source)  # type: ignore[arg-type]


def deep_sum(terms: int) -> BinOp:
    expression = BinOp("+", Witness(0), Const(1))
    for _ in range(terms):
        expression = BinOp("+", expression, Const(1))
    return expression


class TestOptimize:
    """Tests for optimize."""

    def test_folds_constants(self, backend: ReferenceBackend) -> None:
        """Witness-free subexpressions become constants."""
        circuit = Circuit(
            witness_count=1,
            assignments=[
                Assign(witness=0, expression=BinOp("*", Const(2), Const(3)))
            ],
            constraints=[assert_eq(Witness(0), BinOp("+", Const(1), Const(5)), "x == 6")],
        )

        optimized = backend.optimize(circuit)

        assert optimized.assignments == [Assign(witness=0, expression=Const(6))]
        assert optimized.constraints == [assert_eq(Witness(0), Const(6), "x == 6")]

    def test_drops_trivial_and_duplicate_constraints(
        self, backend: ReferenceBackend
    ) -> None:
        """Constraints that always hold or repeat are removed."""
        circuit = Circuit(
            witness_count=1,
            assignments=[Assign(witness=0, expression=Const(1))],
            constraints=[
                assert_eq(Const(2), Const(2), "2 == 2"),
                assert_eq(Witness(0), Const(1), "x == 1"),
                assert_eq(Witness(0), Const(1), "x == 1"),
            ],
        )

        optimized = backend.optimize(circuit)

        assert [c.source for c in optimized.constraints] == ["x == 1"]

    def test_keeps_false_constant_constraints(self, backend: ReferenceBackend) -> None:
        """A contradiction survives so that execution reports it."""
        circuit = Circuit(
            witness_count=0,
            constraints=[assert_eq(Const(1), Const(2), "1 == 2")],
        )

        optimized = backend.optimize(circuit)

        assert optimized.constraints == [
            AssertZero(expression=Const(BN254_SCALAR_MODULUS - 1), source="1 == 2")
        ]

    def test_rejects_reads_of_unassigned_witnesses(
        self, backend: ReferenceBackend
    ) -> None:
        """Raises OptimizeError for malformed circuits."""
        circuit = Circuit(
            witness_count=1,
            constraints=[assert_eq(Witness(0), Const(1), "x == 1")],
        )

        with pytest.raises(OptimizeError, match="_0"):
            backend.optimize(circuit)

    def test_rejects_deeply_nested_expressions(self, backend: ReferenceBackend) -> None:
        """Expressions too deep to fold are an optimizer failure."""
        circuit = Circuit(
            witness_count=1,
            assignments=[Assign(witness=0, expression=Const(1))],
            constraints=[assert_eq(deep_sum(5000), Const(0), "deep")],
        )

        with pytest.raises(OptimizeError, match="nested too deeply"):
            backend.optimize(circuit)

    def test_does_not_mutate_input(self, backend: ReferenceBackend) -> None:
        """Returns a new circuit."""
        circuit = Circuit(
            witness_count=0,
            constraints=[assert_eq(Const(2), Const(2), "2 == 2")],
        )

        backend.optimize(circuit)

        assert len(circuit.constraints) == 1


class TestExecute:
    """Tests for execute."""

    def test_satisfied_circuit(self, backend: ReferenceBackend) -> None:
        """Returns Satisfied when every constraint holds."""
        circuit = Circuit(
            witness_count=2,
            assignments=[
                Assign(witness=0, expression=Const(3)),
                Assign(witness=1, expression=Neg(Witness(0))),
            ],
            constraints=[assert_eq(BinOp("+", Witness(0), Witness(1)), Const(0), "x + y == 0")],
        )

        assert backend.execute(circuit, {}) == Satisfied()

    def test_reports_first_failing_constraint(self, backend: ReferenceBackend) -> None:
        """Returns Unsatisfied naming the failing constraint."""
        circuit = Circuit(
            witness_count=1,
            assignments=[Assign(witness=0, expression=Const(3))],
            constraints=[
                assert_eq(Witness(0), Const(3), "x == 3"),
                assert_eq(Witness(0), Const(4), "x == 4"),
            ],
        )

        assert backend.execute(circuit, {}) == Unsatisfied(
            reason="Constraint #1 failed: x == 4"
        )

    def test_arithmetic_wraps_in_field(self) -> None:
        """Values are reduced modulo the configured prime."""
        backend = ReferenceBackend(field_modulus=7)
        circuit = Circuit(
            witness_count=0,
            constraints=[assert_eq(BinOp("*", Const(3), Const(5)), Const(1), "3 * 5 == 1")],
        )

        assert backend.execute(circuit, {}) == Satisfied()

    def test_unassigned_witness_is_unsatisfied(self, backend: ReferenceBackend) -> None:
        """Reading a missing witness fails execution."""
        circuit = Circuit(
            witness_count=1,
            constraints=[assert_eq(Witness(0), Const(1), "x == 1")],
        )

        assert backend.execute(circuit, {}) == Unsatisfied(
            reason="Witness _0 is unassigned"
        )

    def test_conflicting_initial_witness(self, backend: ReferenceBackend) -> None:
        """An initial value contradicting an assignment fails execution."""
        circuit = Circuit(
            witness_count=1,
            assignments=[Assign(witness=0, expression=Const(1))],
        )

        outcome = backend.execute(circuit, {0: 2})

        assert isinstance(outcome, Unsatisfied)
        assert "conflicting" in outcome.reason

    def test_is_deterministic(self, backend: ReferenceBackend) -> None:
        """Executing twice gives the same outcome."""
        circuit = Circuit(
            witness_count=0,
            constraints=[assert_eq(Const(1), Const(2), "1 == 2")],
        )

        assert backend.execute(circuit, {}) == backend.execute(circuit, {})

    def test_deeply_nested_expression_is_unsatisfied(
        self, backend: ReferenceBackend
    ) -> None:
        """Expressions too deep to evaluate fail execution instead of crashing."""
        circuit = Circuit(
            witness_count=1,
            assignments=[Assign(witness=0, expression=Const(1))],
            constraints=[assert_eq(deep_sum(5000), Const(0), "deep")],
        )

        assert backend.execute(circuit, {}) == Unsatisfied(
            reason="Circuit expression is nested too deeply"
        )
