from calcvm import EvaluatorFn, ExecutorFn
from calcvm.ast import Return
from calcvm.runtime import Runtime
from calcvm.types.signal import Returned, Signal
from calcvm.types.value import Null


def return_statement(
    node: Return,
    runtime: Runtime,
    evaluate_fn: EvaluatorFn,
    _: ExecutorFn,
) -> Signal:
    """
    return [expr]
    The value is parked in a cell owned by the signal, so it survives the
    block scopes popped while the signal travels up to the call.
    """
    value = Null if node.value is None else evaluate_fn(node.value, runtime)
    return Returned(runtime.store(value))
