from calcvm.types.value import Number, Function, Null, NullType, is_truthy
from calcvm.types.symbol import Symbol
from calcvm.types.scope import Scope
from calcvm.types.signal import Signal, Normal, Returned, BreakRequested, ContinueRequested

__all__ = [
    "Number",
    "Function",
    "Null",
    "NullType",
    "is_truthy",
    "Symbol",
    "Scope",
    "Signal",
    "Normal",
    "Returned",
    "BreakRequested",
    "ContinueRequested",
]
