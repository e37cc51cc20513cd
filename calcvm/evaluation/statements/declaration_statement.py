import logging

from calcvm import EvaluatorFn, ExecutorFn
from calcvm.ast import FunctionDeclaration, VariableDeclaration
from calcvm.errors import DuplicateDeclaration
from calcvm.runtime import Runtime
from calcvm.types.signal import Normal, Signal
from calcvm.types.value import Function

logger = logging.getLogger(__name__)


def variable_declaration_statement(
    node: VariableDeclaration,
    runtime: Runtime,
    evaluate_fn: EvaluatorFn,
    _: ExecutorFn,
) -> Signal:
    """
    var name = expr / mut name = expr
    The value is evaluated before the name exists, so `var x = x` refers to an outer x.
    """
    value = evaluate_fn(node.value, runtime)
    runtime.declare(node.name, runtime.store(value), node.mutable)
    return Normal


def function_declaration_statement(
    node: FunctionDeclaration,
    runtime: Runtime,
    evaluate_fn: EvaluatorFn,
    _: ExecutorFn,
) -> Signal:
    """
    fun name(params) { body }
    Captures a flattened snapshot of every enclosing scope plus a binding of
    `name` to the function itself, so free variables resolve against the
    declaring environment and the function can recurse.
    """
    if node.name in runtime.current_scope:
        raise DuplicateDeclaration(node.name)

    arena = runtime.arena
    handle = arena.reserve()
    captured = runtime.capture(node.name, handle)
    fn = Function(node.name, node.params, node.body, captured, handle)
    arena.store(handle, fn)
    runtime.declare(node.name, handle, mutable=False)
    logger.debug("declared %r at %r capturing %d names", fn, handle, len(captured))
    return Normal
