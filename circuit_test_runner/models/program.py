"""Models for compiled program units and the functions they contain."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Literal, NewType

CrateId = NewType("CrateId", int)
FuncId = NewType("FuncId", int)


@dataclass(frozen=True, kw_only=True)
class Diagnostic:
    """A message produced by the front-end's static checks."""

    severity: Literal["error", "warning"]
    message: str
    function: str | None = None

    def __str__(self) -> str:
        location = f" in '{self.function}'" if self.function else ""
        return f"{self.severity}{location}: {self.message}"


@dataclass(frozen=True, kw_only=True)
class CheckedFunction:
    """A type-checked function of a program unit.

    The body is owned by the front-end and is never inspected by the runner.
    """

    func_id: FuncId
    crate_id: CrateId
    name: str
    is_test: bool = False
    body: Any = None


@dataclass(frozen=True, kw_only=True)
class ProgramUnit:
    """Checked representation of a package, keyed by function identifier.

    Functions are kept in declaration order.
    """

    functions: Mapping[FuncId, CheckedFunction] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class TestFunction:
    """A test-tagged function selected for execution."""

    __test__ = False

    name: str
    func_id: FuncId


@dataclass(frozen=True, kw_only=True)
class CompiledProgram[C]:
    """Circuit produced for a single function plus captured print output."""

    circuit: C
    printed_output: Sequence[str] = ()

    def with_circuit(self, circuit: C) -> "CompiledProgram[C]":
        """Return a copy holding a different circuit."""
        return replace(self, circuit=circuit)
