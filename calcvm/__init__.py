# Core type aliases for the calcvm runtime.
# Values are instances of calcvm.types.value (Number, Function, Null); AST nodes
# are the dataclasses in calcvm.ast. The aliases below are used in signatures of
# the evaluator and statement handlers so the call shapes stay readable.

import logging
from typing import Any, Callable

# Runtime value alias
RuntimeValue = Any
# AST node alias
Node = Any

# Evaluator function types passed to statement handlers
EvaluatorFn = Callable[..., RuntimeValue]
ExecutorFn = Callable[..., Any]

logging.getLogger(__name__).addHandler(logging.NullHandler())
