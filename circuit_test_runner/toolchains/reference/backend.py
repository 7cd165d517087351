"""Backend optimizing and solving reference circuits over a prime field."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Self

from circuit_test_runner.errors import OptimizeError
from circuit_test_runner.models.result import ExecutionOutcome, Satisfied, Unsatisfied
from circuit_test_runner.toolchains.reference.circuit import (
    AssertZero,
    Assign,
    Circuit,
    Const,
    UnassignedWitnessError,
    evaluate,
    fold,
    witnesses_of,
)
from circuit_test_runner.toolchains.reference.config import ReferenceToolchainConfig

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ReferenceBackend:
    """Solves assignments in order and checks every constraint."""

    field_modulus: int

    @classmethod
    def from_config(cls, config: ReferenceToolchainConfig) -> Self:
        return cls(field_modulus=config.field_modulus)

    def optimize(self, circuit: Circuit) -> Circuit:
        """Fold constants and drop trivially satisfied or duplicate constraints.

        Constant constraints that do not hold are kept so that execution
        reports them.

        Raises:
            OptimizeError: If a witness is read before it is assigned, or an
                expression nests too deeply to fold

        """
        try:
            return self._optimize(circuit)
        except (RecursionError, MemoryError) as e:
            raise OptimizeError("Circuit expression is nested too deeply") from e

    def _optimize(self, circuit: Circuit) -> Circuit:
        assigned: set[int] = set()
        assignments: list[Assign] = []
        for assignment in circuit.assignments:
            expression = fold(assignment.expression, self.field_modulus)
            self._check_reads(witnesses_of(expression), assigned)
            assignments.append(Assign(witness=assignment.witness, expression=expression))
            assigned.add(assignment.witness)

        constraints: list[AssertZero] = []
        seen = set()
        for constraint in circuit.constraints:
            expression = fold(constraint.expression, self.field_modulus)
            self._check_reads(witnesses_of(expression), assigned)
            if expression == Const(0) or expression in seen:
                continue
            seen.add(expression)
            constraints.append(AssertZero(expression=expression, source=constraint.source))

        log.debug(
            "Optimized circuit: %d -> %d constraints",
            len(circuit.constraints),
            len(constraints),
        )
        return Circuit(
            witness_count=circuit.witness_count,
            assignments=assignments,
            constraints=constraints,
        )

    def execute(
        self, circuit: Circuit, initial_witness: Mapping[int, int]
    ) -> ExecutionOutcome:
        values = {w: v % self.field_modulus for w, v in initial_witness.items()}
        try:
            for assignment in circuit.assignments:
                value = evaluate(assignment.expression, values, self.field_modulus)
                if values.setdefault(assignment.witness, value) != value:
                    return Unsatisfied(
                        reason=f"Witness _{assignment.witness} has conflicting values"
                    )

            for i, constraint in enumerate(circuit.constraints):
                if evaluate(constraint.expression, values, self.field_modulus) != 0:
                    return Unsatisfied(
                        reason=f"Constraint #{i} failed: {constraint.source}"
                    )
        except UnassignedWitnessError as e:
            return Unsatisfied(reason=str(e))
        except (RecursionError, MemoryError):
            return Unsatisfied(reason="Circuit expression is nested too deeply")

        return Satisfied()

    def _check_reads(self, reads: set[int], assigned: set[int]) -> None:
        if unassigned := sorted(reads - assigned):
            raise OptimizeError(f"Witness _{unassigned[0]} is read before it is assigned")
