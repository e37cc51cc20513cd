"""Function-call mechanics.

A call evaluates its arguments left to right into cells, resolves the callee,
checks arity, then passes the argument handles through the register file into
a fresh call scope whose parent is the function's captured scope (never the
caller's scope). The result travels back through register 0.
"""

from __future__ import annotations

import logging

from calcvm import RuntimeValue, EvaluatorFn, ExecutorFn
from calcvm.ast import FunctionCall
from calcvm.errors import ArityMismatch, NotCallable, RegisterOverflow, StackOverflow
from calcvm.runtime import Runtime
from calcvm.types.signal import Returned
from calcvm.types.value import Function, Null

logger = logging.getLogger(__name__)

RESULT_REGISTER = 0


def call_function(
    node: FunctionCall,
    runtime: Runtime,
    evaluate_fn: EvaluatorFn,
    execute_body_fn: ExecutorFn,
) -> RuntimeValue:
    """Evaluate a FunctionCall node and return the callee's result.

    Falling off the end of the body (or leaving it through a stray break or
    continue) yields Null. Nesting deeper than `runtime.max_call_depth` raises
    StackOverflow.
    """
    arena = runtime.arena
    registers = runtime.registers

    # Arguments first, each into its own (possibly shared) cell
    arg_handles = []
    try:
        for arg in node.args:
            arg_handles.append(runtime.store(evaluate_fn(arg, runtime)))

        fn_handle = runtime.lookup(node.name)
        fn = arena.dereference(fn_handle)
        if not isinstance(fn, Function):
            raise NotCallable(node.name)
        if len(arg_handles) != fn.arity:
            raise ArityMismatch(node.name, fn.arity, len(arg_handles))
        if len(arg_handles) > len(registers):
            raise RegisterOverflow(len(arg_handles), len(registers))
        if runtime.call_depth >= runtime.max_call_depth:
            raise StackOverflow(node.name, runtime.max_call_depth)

        for index, handle in enumerate(arg_handles):
            registers.load(index, handle)
    finally:
        for handle in arg_handles:
            arena.release(handle)

    # Keep the callee alive even if the body rebinds the name it was called through
    arena.retain(fn_handle)
    try:
        logger.debug("call %s (depth %d)", fn.name, runtime.call_depth + 1)
        with runtime.call_frame(fn.captured):
            for index, param in enumerate(fn.params):
                handle = registers.handle(index)
                runtime.declare(param, arena.retain(handle), mutable=False)
            signal = execute_body_fn(fn.body, runtime)
    except RecursionError:
        # Python ran out of stack before max_call_depth was reached
        raise StackOverflow(fn.name, runtime.call_depth + 1) from None
    finally:
        arena.release(fn_handle)

    if isinstance(signal, Returned):
        registers.load(RESULT_REGISTER, signal.handle)
        arena.release(signal.handle)
    else:
        result = runtime.store(Null)
        registers.load(RESULT_REGISTER, result)
        arena.release(result)

    value = registers.value(RESULT_REGISTER)
    logger.debug("return %s -> %r", fn.name, value)
    return value
