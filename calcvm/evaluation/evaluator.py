"""Tree-walking evaluator for calcvm.

`evaluate` turns expression nodes into values; `execute` runs statement nodes
and returns a control-flow Signal. Statement handlers live in the STATEMENTS
registry and receive these functions as arguments, so the handlers never
import the evaluator back.

Errors are raised, never caught here: they unwind through every nested
evaluation unchanged, while `Runtime.block` and `Runtime.call_frame` restore
the scope stack on the way out.
"""

from __future__ import annotations

from typing import Iterable

from calcvm import Node, RuntimeValue
from calcvm.ast import BinaryOp, FunctionCall, Identifier, NumberLiteral, UnaryOp, is_expression
from calcvm.evaluation.apply import call_function
from calcvm.evaluation.operators import binary, unary
from calcvm.evaluation.statements import STATEMENTS
from calcvm.runtime import Runtime
from calcvm.types.signal import Normal, Signal
from calcvm.types.value import Number


def evaluate(node: Node, runtime: Runtime) -> RuntimeValue:
    """Evaluate an expression node to a value."""
    match node:
        case NumberLiteral(value=value):
            return Number(value)
        case Identifier(name=name):
            return runtime.load(name)
        case BinaryOp(left=left, op=op, right=right):
            # Left operand strictly before right
            lhs = evaluate(left, runtime)
            rhs = evaluate(right, runtime)
            return binary(op, lhs, rhs)
        case UnaryOp(op=op, operand=operand):
            return unary(op, evaluate(operand, runtime))
        case FunctionCall():
            return call_function(node, runtime, evaluate, execute_body)
    raise TypeError(f"Cannot evaluate {node!r} as an expression")


def execute(node: Node, runtime: Runtime) -> Signal:
    """Execute one statement; a bare expression is evaluated and discarded."""
    handler = STATEMENTS.get(type(node))
    if handler is not None:
        return handler(node, runtime, evaluate, execute_block)
    if is_expression(node):
        evaluate(node, runtime)
        return Normal
    raise TypeError(f"Cannot execute {node!r} as a statement")


def execute_body(body: Iterable[Node], runtime: Runtime) -> Signal:
    """Execute statements in the current scope until one yields a non-Normal signal."""
    for statement in body:
        signal = execute(statement, runtime)
        if signal is not Normal:
            return signal
    return Normal


def execute_block(body: Iterable[Node], runtime: Runtime) -> Signal:
    """Execute statements inside a fresh child scope."""
    with runtime.block():
        return execute_body(body, runtime)
