from calcvm import EvaluatorFn, ExecutorFn
from calcvm.ast import Assignment
from calcvm.evaluation.operators import binary
from calcvm.runtime import Runtime
from calcvm.types.signal import Normal, Signal


def assignment_statement(
    node: Assignment,
    runtime: Runtime,
    evaluate_fn: EvaluatorFn,
    _: ExecutorFn,
) -> Signal:
    # Right-hand side first, then the current value, then the combined rebind
    value = evaluate_fn(node.value, runtime)
    current = runtime.load(node.name)
    op = node.op.operator
    if op is not None:
        value = binary(op, current, value)
    runtime.assign(node.name, value)
    return Normal
