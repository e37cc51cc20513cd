from calcvm import EvaluatorFn, ExecutorFn
from calcvm.ast import IfStatement
from calcvm.runtime import Runtime
from calcvm.types.signal import Normal, Signal
from calcvm.types.value import is_truthy


def if_statement(
    node: IfStatement,
    runtime: Runtime,
    evaluate_fn: EvaluatorFn,
    execute_block_fn: ExecutorFn,
) -> Signal:
    """Run the first branch whose condition is truthy, each in its own child scope.

    Conditions are evaluated in order and only until one matches.
    """
    if is_truthy(evaluate_fn(node.condition, runtime)):
        return execute_block_fn(node.body, runtime)
    for condition, body in node.else_ifs:
        if is_truthy(evaluate_fn(condition, runtime)):
            return execute_block_fn(body, runtime)
    if node.else_body is not None:
        return execute_block_fn(node.else_body, runtime)
    return Normal
