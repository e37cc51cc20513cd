from calcvm import EvaluatorFn, ExecutorFn
from calcvm.ast import Output
from calcvm.runtime import Runtime
from calcvm.types.signal import Normal, Signal


def output_statement(
    node: Output,
    runtime: Runtime,
    evaluate_fn: EvaluatorFn,
    _: ExecutorFn,
) -> Signal:
    """! expr -- print the value on its own line."""
    runtime.write_line(str(evaluate_fn(node.value, runtime)))
    return Normal
