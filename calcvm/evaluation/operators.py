"""Integer operator semantics.

All arithmetic is signed 32-bit: results wrap on overflow, division truncates
toward zero and the remainder takes the sign of the dividend. Comparisons and
logical operators yield Number(1) or Number(0).
"""

from __future__ import annotations

import operator
from typing import Callable

from calcvm import RuntimeValue
from calcvm.ast import Operator
from calcvm.errors import DivisionByZero, ModuloByZero, TypeMismatch
from calcvm.types.value import Number, is_truthy


def _div(a: int, b: int) -> int:
    if b == 0:
        raise DivisionByZero()
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def _mod(a: int, b: int) -> int:
    if b == 0:
        raise ModuloByZero()
    return a - b * _div(a, b)


def _flag(test: Callable[[int, int], bool]) -> Callable[[int, int], int]:
    return lambda a, b: 1 if test(a, b) else 0


_BINARY: dict[Operator, Callable[[int, int], int]] = {
    Operator.ADD: operator.add,
    Operator.SUB: operator.sub,
    Operator.MUL: operator.mul,
    Operator.DIV: _div,
    Operator.MOD: _mod,
    Operator.EQ: _flag(operator.eq),
    Operator.NE: _flag(operator.ne),
    Operator.LT: _flag(operator.lt),
    Operator.LE: _flag(operator.le),
    Operator.GT: _flag(operator.gt),
    Operator.GE: _flag(operator.ge),
    # Both sides are always evaluated; no short-circuit
    Operator.AND: _flag(lambda a, b: a != 0 and b != 0),
    Operator.OR: _flag(lambda a, b: a != 0 or b != 0),
}


def binary(op: Operator, left: RuntimeValue, right: RuntimeValue) -> Number:
    """Apply a binary operator to two already-evaluated operands."""
    if not isinstance(left, Number) or not isinstance(right, Number):
        raise TypeMismatch(
            f"Operator '{op.value}' expects numbers, got {left!r} and {right!r}"
        )
    fn = _BINARY.get(op)
    if fn is None:
        raise TypeMismatch(f"'{op.value}' is not a binary operator")
    return Number(fn(left.value, right.value))


def unary(op: Operator, operand: RuntimeValue) -> Number:
    if op is Operator.NOT:
        return Number(0 if is_truthy(operand) else 1)
    if op is Operator.NEG:
        if not isinstance(operand, Number):
            raise TypeMismatch(f"Negation expects a number, got {operand!r}")
        return Number(-operand.value)
    raise TypeMismatch(f"'{op.value}' is not a unary operator")
