"""Runtime values: signed 32-bit numbers, functions and Null.

Only numbers take part in arithmetic. Functions carry their parameter names,
their body and the scope snapshot taken when they were declared.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO

from calcvm.types.scope import Scope

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def wrap_int32(value: int) -> int:
    """Wrap an arbitrary Python int into two's-complement int32 range."""
    return ((value - INT32_MIN) % 2 ** 32) + INT32_MIN


@dataclass(frozen=True, slots=True)
class Number:
    value: int

    def __post_init__(self):
        if not INT32_MIN <= self.value <= INT32_MAX:
            object.__setattr__(self, "value", wrap_int32(self.value))

    def __str__(self) -> str:
        return str(self.value)


class Function:
    """A first-class function value with its captured scope snapshot.

    Functions compare by identity: two declarations are never the same value,
    even with identical source.
    """

    __slots__ = ("name", "params", "body", "captured", "handle")

    def __init__(self, name: str, params: tuple, body: tuple, captured: Scope, handle=None):
        self.name: str = name
        self.params: tuple = tuple(params)
        self.body: tuple = tuple(body)
        self.captured: Scope = captured
        # Cell the function was declared into; the self-binding in `captured` points here
        self.handle = handle

    @property
    def arity(self) -> int:
        return len(self.params)

    def __str__(self) -> str:
        return "Function"

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<Function ")
            buffer.write(self.name)
            buffer.write("(")
            buffer.write(", ".join(self.params))
            buffer.write(")>")
            return buffer.getvalue()


class NullType:
    __slots__ = ()

    def __repr__(self): return "Null"
    def __str__(self): return "Null"
    def __bool__(self): return False

    def __eq__(self, other):
        return isinstance(other, NullType)

    def __hash__(self):
        return hash(NullType)


Null = NullType()


def is_truthy(value) -> bool:
    """Only Number(0) and Null are false; every other value, functions included, is true."""
    if isinstance(value, Number):
        return value.value != 0
    return not isinstance(value, NullType)
