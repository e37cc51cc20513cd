from __future__ import annotations

from typing import Optional

from calcvm import RuntimeValue
from calcvm.config import REGISTER_COUNT
from calcvm.memory.arena import Arena, Handle
from calcvm.types.value import Null


class RegisterFile:
    """Scratch slots holding handles, used to pass call arguments and results.

    A register owns one reference to the cell it points at, so loading a new
    handle releases whatever the register held before.
    """

    __slots__ = ("arena", "slots")

    def __init__(self, arena: Arena, size: int = REGISTER_COUNT):
        self.arena: Arena = arena
        self.slots: list[Optional[Handle]] = [None] * size

    def load(self, index: int, handle: Handle) -> None:
        # Retain first: the new handle may be the one already held
        self.arena.retain(handle)
        previous = self.slots[index]
        self.slots[index] = handle
        if previous is not None:
            self.arena.release(previous)

    def handle(self, index: int) -> Optional[Handle]:
        return self.slots[index]

    def value(self, index: int) -> RuntimeValue:
        handle = self.slots[index]
        if handle is None:
            return Null
        return self.arena.dereference(handle)

    def clear(self, index: int) -> None:
        previous = self.slots[index]
        self.slots[index] = None
        if previous is not None:
            self.arena.release(previous)

    def clear_all(self) -> None:
        for index in range(len(self.slots)):
            self.clear(index)

    def __len__(self) -> int:
        return len(self.slots)

    def __repr__(self) -> str:
        return f"<RegisterFile {self.slots!r}>"
