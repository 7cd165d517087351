"""Capabilities a toolchain must provide to run circuit tests."""

from collections.abc import Mapping, Sequence
from typing import Protocol

from circuit_test_runner.models.options import CompileOptions
from circuit_test_runner.models.program import (
    CompiledProgram,
    CrateId,
    Diagnostic,
    FuncId,
    ProgramUnit,
)
from circuit_test_runner.models.result import ExecutionOutcome
from circuit_test_runner.workspace import Package

type WitnessMap = Mapping[int, int]


class Backend[C](Protocol):
    """Constraint-solving backend.

    Generic type C is the backend's circuit representation. The runner never
    looks inside it; it only hands circuits from the front-end to the backend.
    Calls are made sequentially and never concurrently.
    """

    def optimize(self, circuit: C) -> C:
        """Return a backend-specific optimization of the circuit.

        Raises:
            OptimizeError: If the circuit cannot be optimized

        """
        ...

    def execute(self, circuit: C, initial_witness: WitnessMap) -> ExecutionOutcome:
        """Solve the circuit from the initial witness and check every constraint."""
        ...


class Frontend[C](Protocol):
    """Language front-end producing program units and circuits."""

    def prepare_package(self, package: Package) -> tuple[ProgramUnit, CrateId]:
        """Parse and type-check a package into a program unit.

        Raises:
            StaticCheckError: If the package sources cannot be parsed

        """
        ...

    def check_crate(
        self, program: ProgramUnit, crate_id: CrateId
    ) -> Sequence[Diagnostic]:
        """Run static checks over a crate and return every diagnostic found."""
        ...

    def compile_function(
        self,
        program: ProgramUnit,
        func_id: FuncId,
        show_output: bool,
        options: CompileOptions,
    ) -> CompiledProgram[C]:
        """Compile a single function to a circuit without re-checking the crate.

        Raises:
            CompileError: If the function cannot be translated to a circuit

        """
        ...
