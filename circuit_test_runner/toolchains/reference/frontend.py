"""Front-end compiling reference source files to arithmetic circuits.

A package holds one YAML source file with a list of functions::

    functions:
      - name: test_add
        test: true
        let:
          x: 2
          y: x + 1
        assert:
          - x + y == 5
        print: [y]

``let`` bindings are solved in order and may only read earlier bindings.
Expressions support integer literals, names, ``+``, ``-``, ``*``, unary
minus and parentheses.
"""

import ast
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Self

import yaml
from pydantic import ValidationError

from circuit_test_runner.errors import CompileError, StaticCheckError
from circuit_test_runner.models.options import CompileOptions
from circuit_test_runner.models.program import (
    CheckedFunction,
    CompiledProgram,
    CrateId,
    Diagnostic,
    FuncId,
    ProgramUnit,
)
from circuit_test_runner.toolchains.reference.circuit import (
    AssertZero,
    Assign,
    BinOp,
    Circuit,
    Const,
    Expr,
    Neg,
    Witness,
    evaluate,
)
from circuit_test_runner.toolchains.reference.config import (
    ReferenceBackendOptions,
    ReferenceToolchainConfig,
)
from circuit_test_runner.toolchains.reference.source import SourceFile, SourceFunction
from circuit_test_runner.workspace import Package

log = logging.getLogger(__name__)

ROOT_CRATE = CrateId(0)

_BINARY_OPS = {ast.Add: "+", ast.Sub: "-", ast.Mult: "*"}


class LoweringError(Exception):
    """Raised when a function cannot be lowered to a circuit."""


class NestingTooDeepError(LoweringError):
    """Raised when an expression nests deeper than the interpreter can walk."""

    def __init__(self) -> None:
        super().__init__("expression is nested too deeply")


@dataclass(frozen=True, kw_only=True)
class LoweredFunction:
    circuit: Circuit
    bindings: Mapping[str, int]


def lower_function(function: SourceFunction) -> LoweredFunction:
    """Translate a source function into a circuit.

    Raises:
        LoweringError: If an expression is malformed, unsupported, or reads an
            unknown name

    """
    try:
        return _lower_function(function)
    except (RecursionError, MemoryError) as e:
        raise NestingTooDeepError from e


def _lower_function(function: SourceFunction) -> LoweredFunction:
    bindings: dict[str, int] = {}
    assignments: list[Assign] = []
    for name, value in function.let.items():
        expression = _lower(_parse(str(value)), bindings)
        index = len(bindings)
        assignments.append(Assign(witness=index, expression=expression))
        bindings[name] = index

    constraints: list[AssertZero] = []
    for source in function.assertions:
        node = _parse(source)
        if not (
            isinstance(node, ast.Compare)
            and len(node.ops) == 1
            and isinstance(node.ops[0], ast.Eq)
        ):
            raise LoweringError(f"expected '<expr> == <expr>', found '{source}'")
        lhs = _lower(node.left, bindings)
        rhs = _lower(node.comparators[0], bindings)
        constraints.append(AssertZero(expression=BinOp("-", lhs, rhs), source=source))

    for name in function.print:
        if name not in bindings:
            raise LoweringError(f"cannot find value '{name}' in scope")

    circuit = Circuit(
        witness_count=len(bindings),
        assignments=assignments,
        constraints=constraints,
    )
    return LoweredFunction(circuit=circuit, bindings=bindings)


def unused_bindings(function: SourceFunction) -> Sequence[str]:
    """Return let bindings that are never read, ignoring names starting with '_'.

    Raises:
        LoweringError: If an expression does not parse

    """
    used: set[str] = set(function.print)
    for text in [*map(str, function.let.values()), *function.assertions]:
        used.update(
            node.id for node in ast.walk(_parse(text)) if isinstance(node, ast.Name)
        )
    return [
        name for name in function.let if name not in used and not name.startswith("_")
    ]


def _parse(text: str) -> ast.expr:
    try:
        return ast.parse(text.strip(), mode="eval").body
    except SyntaxError as e:
        raise LoweringError(f"invalid expression '{text}': {e.msg}") from e
    except (RecursionError, MemoryError) as e:
        raise NestingTooDeepError from e


def _lower(node: ast.expr, bindings: Mapping[str, int]) -> Expr:
    match node:
        case ast.Constant(value=bool()):
            raise LoweringError(f"expected an integer, found '{ast.unparse(node)}'")
        case ast.Constant(value=int() as value):
            return Const(value)
        case ast.Name(id=name):
            if name not in bindings:
                raise LoweringError(f"cannot find value '{name}' in scope")
            return Witness(bindings[name])
        case ast.UnaryOp(op=ast.USub(), operand=operand):
            return Neg(_lower(operand, bindings))
        case ast.UnaryOp(op=ast.UAdd(), operand=operand):
            return _lower(operand, bindings)
        case ast.BinOp(left=left, op=op, right=right) if type(op) in _BINARY_OPS:
            return BinOp(
                _BINARY_OPS[type(op)], _lower(left, bindings), _lower(right, bindings)
            )
    raise LoweringError(f"unsupported expression '{ast.unparse(node)}'")


def _parse_backend_options(options: CompileOptions) -> ReferenceBackendOptions:
    try:
        return ReferenceBackendOptions(**options.backend_options)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(map(str, error['loc']))}: {error['msg']}"
            for error in e.errors()
        )
        raise CompileError(f"invalid backend options ({problems})") from e

@dataclass(frozen=True, kw_only=True)
class ReferenceFrontend:
    """Front-end for packages written in the reference source format."""

    config: ReferenceToolchainConfig

    @classmethod
    def from_config(cls, config: ReferenceToolchainConfig) -> Self:
        return cls(config=config)

    def prepare_package(self, package: Package) -> tuple[ProgramUnit, CrateId]:
        source_path = package.root_dir / self.config.source_path
        log.debug("Loading %s for package %s", source_path, package.name)
        try:
            data = yaml.safe_load(source_path.read_text()) or {}
            source = SourceFile(**data)
        except (OSError, yaml.YAMLError, ValidationError, TypeError) as e:
            raise StaticCheckError(
                package.name,
                [Diagnostic(severity="error", message=f"{source_path}: {e}")],
            ) from e

        functions = {
            FuncId(i): CheckedFunction(
                func_id=FuncId(i),
                crate_id=ROOT_CRATE,
                name=function.name,
                is_test=function.test,
                body=function,
            )
            for i, function in enumerate(source.functions)
        }
        return ProgramUnit(functions=functions), ROOT_CRATE

    def check_crate(
        self, program: ProgramUnit, crate_id: CrateId
    ) -> Sequence[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        seen: set[str] = set()
        for function in program.functions.values():
            if function.crate_id != crate_id:
                continue
            if function.name in seen:
                diagnostics.append(
                    Diagnostic(
                        severity="error",
                        message="duplicate definition",
                        function=function.name,
                    )
                )
            seen.add(function.name)

            # Only syntax is checked here; names are resolved per function
            # by compile_function.
            try:
                unused = unused_bindings(function.body)
            except NestingTooDeepError:
                # Fails only this function, at compile time.
                continue
            except LoweringError as e:
                diagnostics.append(
                    Diagnostic(severity="error", message=str(e), function=function.name)
                )
                continue

            diagnostics.extend(
                Diagnostic(
                    severity="warning",
                    message=f"unused variable '{name}'",
                    function=function.name,
                )
                for name in unused
            )
        return diagnostics

    def compile_function(
        self,
        program: ProgramUnit,
        func_id: FuncId,
        show_output: bool,
        options: CompileOptions,
    ) -> CompiledProgram[Circuit]:
        function: SourceFunction = program.functions[func_id].body
        knobs = _parse_backend_options(options)
        try:
            lowered = lower_function(function)
            printed = (
                self._printed_values(function, lowered, knobs.print_radix)
                if show_output
                else []
            )
        except LoweringError as e:
            raise CompileError(str(e)) from e
        except (RecursionError, MemoryError) as e:
            raise CompileError(str(NestingTooDeepError())) from e

        return CompiledProgram(circuit=lowered.circuit, printed_output=printed)

    def _printed_values(
        self, function: SourceFunction, lowered: LoweredFunction, radix: str
    ) -> list[str]:
        if not function.print:
            return []
        values: dict[int, int] = {}
        for assignment in lowered.circuit.assignments:
            values[assignment.witness] = evaluate(
                assignment.expression, values, self.config.field_modulus
            )
        show = hex if radix == "16" else str
        return [
            f"{name} = {show(values[lowered.bindings[name]])}" for name in function.print
        ]
