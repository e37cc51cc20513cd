"""Looping statements: while, break and continue.

Break and continue only produce signals; the enclosing while loop decides what
they mean. A Returned signal passes straight through the loop.
"""

from calcvm import EvaluatorFn, ExecutorFn
from calcvm.ast import Break, Continue, WhileStatement
from calcvm.runtime import Runtime
from calcvm.types.signal import (
    BreakRequested,
    ContinueRequested,
    Normal,
    Returned,
    Signal,
)
from calcvm.types.value import is_truthy


def while_statement(
    node: WhileStatement,
    runtime: Runtime,
    evaluate_fn: EvaluatorFn,
    execute_block_fn: ExecutorFn,
) -> Signal:
    while is_truthy(evaluate_fn(node.condition, runtime)):
        # Fresh child scope per iteration
        signal = execute_block_fn(node.body, runtime)
        if signal is BreakRequested:
            break
        if isinstance(signal, Returned):
            return signal
        # Normal or ContinueRequested: next iteration
    return Normal


def break_statement(
    node: Break,
    runtime: Runtime,
    evaluate_fn: EvaluatorFn,
    execute_block_fn: ExecutorFn,
) -> Signal:
    return BreakRequested


def continue_statement(
    node: Continue,
    runtime: Runtime,
    evaluate_fn: EvaluatorFn,
    execute_block_fn: ExecutorFn,
) -> Signal:
    return ContinueRequested
