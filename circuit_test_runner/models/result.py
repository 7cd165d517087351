"""Models for circuit execution outcomes and test results."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from circuit_test_runner.models.program import Diagnostic


@dataclass(frozen=True, kw_only=True)
class Satisfied:
    """Every constraint of the circuit holds."""


@dataclass(frozen=True, kw_only=True)
class Unsatisfied:
    """At least one constraint does not hold."""

    reason: str


type ExecutionOutcome = Satisfied | Unsatisfied


@dataclass(frozen=True, kw_only=True)
class Passed:
    """The test compiled and its circuit was satisfied."""

    output: Sequence[str] = ()


@dataclass(frozen=True, kw_only=True)
class CompileFailed:
    """The test function could not be translated to a circuit."""

    message: str


@dataclass(frozen=True, kw_only=True)
class ExecutionFailed:
    """The test's circuit was not satisfiable."""

    reason: str
    output: Sequence[str] = ()


@dataclass(frozen=True, kw_only=True)
class ToolingFault:
    """The optimizer or backend failed; not a defect of the program under test."""

    message: str


type TestOutcome = Passed | CompileFailed | ExecutionFailed | ToolingFault

TestStatus = Literal["passed", "compile_failed", "execution_failed"]


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Result of a single test execution."""

    __test__ = False

    name: str
    status: TestStatus
    duration: float
    message: str | None = None
    output: Sequence[str] = ()

    @property
    def failed(self) -> bool:
        return self.status != "passed"


@dataclass(frozen=True, kw_only=True)
class PackageReport:
    """Results of every test run for one package, in discovery order.

    Diagnostics hold the static-check warnings that did not abort the package.
    """

    package_name: str
    results: Sequence[TestResult] = ()
    diagnostics: Sequence[Diagnostic] = ()

    @property
    def failing(self) -> int:
        return sum(1 for result in self.results if result.failed)

    def summary(self) -> str:
        """Human-readable one-line summary, pluralized for the failing count."""
        if self.failing == 0:
            return "All tests passed"
        plural = "" if self.failing == 1 else "s"
        return f"{self.failing} test{plural} failed"
