from __future__ import annotations

import logging
from typing import TextIO

from calcvm import Node, RuntimeValue
from calcvm.ast import is_expression
from calcvm.evaluation.evaluator import evaluate, execute
from calcvm.reader.parser import parse
from calcvm.runtime import Runtime
from calcvm.types.signal import Normal, Returned
from calcvm.types.value import Null

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Parses and runs calcvm source against one long-lived Runtime.
    Scope and arena state carry over from one `eval` call to the next.
    """

    def __init__(
        self,
        arena_size: int | None = None,
        out: TextIO | None = None,
        max_call_depth: int | None = None,
    ):
        self.runtime: Runtime = Runtime(
            arena_size=arena_size, out=out, max_call_depth=max_call_depth
        )

    def eval(self, code: str) -> RuntimeValue:
        """Run one top-level statement group and return its trailing value.

        The trailing value is the value of the last bare expression, or the
        value of a top-level `return` (which also ends the group). Null when
        there is neither. Errors propagate; bindings made before the failing
        statement are kept.
        """
        return self.run(parse(code))

    def run(self, statements: list[Node]) -> RuntimeValue:
        with self.runtime.recursion_headroom():
            return self._run_group(statements)

    def _run_group(self, statements: list[Node]) -> RuntimeValue:
        runtime = self.runtime
        result: RuntimeValue = Null
        for statement in statements:
            if is_expression(statement):
                result = evaluate(statement, runtime)
                continue
            signal = execute(statement, runtime)
            if signal is Normal:
                continue
            if isinstance(signal, Returned):
                result = runtime.value_of(signal.handle)
                runtime.arena.release(signal.handle)
            else:
                logger.debug("%r outside of a loop ends the statement group", signal)
            break
        return result

    def variables(self) -> dict[str, RuntimeValue]:
        return self.runtime.variables()
