"""Arithmetic circuit representation used by the reference toolchain."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal


class UnassignedWitnessError(Exception):
    """Raised when an expression reads a witness that has no value."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Witness _{index} is unassigned")


@dataclass(frozen=True)
class Const:
    value: int

    def pretty(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Witness:
    index: int

    def pretty(self) -> str:
        return f"_{self.index}"


@dataclass(frozen=True)
class Neg:
    operand: "Expr"

    def pretty(self) -> str:
        return f"-{self.operand.pretty()}"


@dataclass(frozen=True)
class BinOp:
    op: Literal["+", "-", "*"]
    lhs: "Expr"
    rhs: "Expr"

    def pretty(self) -> str:
        return f"({self.lhs.pretty()} {self.op} {self.rhs.pretty()})"


type Expr = Const | Witness | Neg | BinOp


@dataclass(frozen=True, kw_only=True)
class Assign:
    """Solve a witness from an expression over previously solved witnesses."""

    witness: int
    expression: Expr


@dataclass(frozen=True, kw_only=True)
class AssertZero:
    """Constraint that holds when its expression evaluates to zero."""

    expression: Expr
    source: str


@dataclass(frozen=True, kw_only=True)
class Circuit:
    witness_count: int
    assignments: Sequence[Assign] = ()
    constraints: Sequence[AssertZero] = ()

    def __str__(self) -> str:
        lines = [f"witnesses: {self.witness_count}"]
        lines += [f"  _{a.witness} := {a.expression.pretty()}" for a in self.assignments]
        lines += [f"  assert {c.expression.pretty()} == 0" for c in self.constraints]
        return "\n".join(lines)


def evaluate(expr: Expr, witnesses: Mapping[int, int], modulus: int) -> int:
    """Evaluate an expression in the prime field of the given modulus.

    Raises:
        UnassignedWitnessError: If the expression reads a missing witness

    """
    match expr:
        case Const(value=value):
            return value % modulus
        case Witness(index=index):
            if index not in witnesses:
                raise UnassignedWitnessError(index)
            return witnesses[index] % modulus
        case Neg(operand=operand):
            return -evaluate(operand, witnesses, modulus) % modulus
        case BinOp(op=op, lhs=lhs, rhs=rhs):
            left = evaluate(lhs, witnesses, modulus)
            right = evaluate(rhs, witnesses, modulus)
            if op == "+":
                return (left + right) % modulus
            if op == "-":
                return (left - right) % modulus
            return (left * right) % modulus
    raise TypeError(f"Not an expression: {expr!r}")


def fold(expr: Expr, modulus: int) -> Expr:
    """Replace every witness-free subexpression with its constant value."""
    match expr:
        case Const(value=value):
            return Const(value % modulus)
        case Neg(operand=operand):
            folded = fold(operand, modulus)
            if isinstance(folded, Const):
                return Const(-folded.value % modulus)
            return Neg(folded)
        case BinOp(op=op, lhs=lhs, rhs=rhs):
            folded = BinOp(op, fold(lhs, modulus), fold(rhs, modulus))
            if isinstance(folded.lhs, Const) and isinstance(folded.rhs, Const):
                return Const(evaluate(folded, {}, modulus))
            return folded
    return expr


def witnesses_of(expr: Expr) -> set[int]:
    """Return the indices of every witness read by an expression."""
    match expr:
        case Witness(index=index):
            return {index}
        case Neg(operand=operand):
            return witnesses_of(operand)
        case BinOp(lhs=lhs, rhs=rhs):
            return witnesses_of(lhs) | witnesses_of(rhs)
    return set()
