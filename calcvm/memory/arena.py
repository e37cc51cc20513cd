"""Fixed-capacity, reference-counted memory arena.

Every variable, register and closure holds a Handle into the arena rather than
a copy of the value. A cell is free when nothing holds it (reference count 0)
and is reused by the next allocation; there is no explicit free operation.

Allocation interns values: if an in-use cell already holds an equal value its
handle is shared instead of filling a new cell. Numbers and Null compare by
value, functions by identity.

A function occupying a cell keeps every handle in its captured scope alive,
except the self-binding that points back at its own cell. When the function's
cell is freed those handles are released in turn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from calcvm import RuntimeValue
from calcvm import config
from calcvm.errors import InvalidHandle, OutOfMemory
from calcvm.types.value import Function, Null

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Handle:
    index: int

    def __repr__(self) -> str:
        return f"@{self.index}"


class Cell:
    __slots__ = ("value", "refs")

    def __init__(self):
        self.value: RuntimeValue = Null
        self.refs: int = 0

    @property
    def free(self) -> bool:
        return self.refs == 0

    def __repr__(self) -> str:
        return f"Cell({self.value!r}, refs={self.refs})"


class Arena:
    """A fixed number of reference-counted cells addressed by Handle."""

    def __init__(self, capacity: int | None = None):
        if capacity is None:
            capacity = config.get_arena_size()
        if capacity < 1:
            raise ValueError(f"Arena capacity must be positive, got {capacity}")
        self.cells: list[Cell] = [Cell() for _ in range(capacity)]

    @property
    def capacity(self) -> int:
        return len(self.cells)

    # --- Allocation ---
    def allocate(self, value: RuntimeValue) -> Handle:
        """Return a handle holding `value`, owned once by the caller.

        Reuses an in-use cell holding an equal value when there is one,
        otherwise fills the first free cell. Raises OutOfMemory when the arena
        is full.
        """
        handle = self.find(value)
        if handle is not None:
            self.cells[handle.index].refs += 1
            return handle
        handle = self._first_free()
        self._occupy(handle, value)
        logger.debug("allocated %r <- %r", handle, value)
        return handle

    def reserve(self) -> Handle:
        """Claim a free cell holding Null so its handle is known before its value.

        Function declarations need this: the closure captures a binding to the
        cell the function is about to be stored in.
        """
        handle = self._first_free()
        cell = self.cells[handle.index]
        cell.value = Null
        cell.refs = 1
        return handle

    def store(self, handle: Handle, value: RuntimeValue) -> None:
        """Fill a cell obtained from `reserve`."""
        cell = self._cell(handle)
        if cell.value is not Null:
            raise InvalidHandle(f"Cell {handle!r} is already filled with {cell.value!r}")
        cell.value = value
        if isinstance(value, Function):
            self._retain_captured(handle, value)
        logger.debug("stored %r <- %r", handle, value)

    def _first_free(self) -> Handle:
        for index, cell in enumerate(self.cells):
            if cell.refs == 0:
                return Handle(index)
        raise OutOfMemory(self.capacity)

    def _occupy(self, handle: Handle, value: RuntimeValue) -> None:
        cell = self.cells[handle.index]
        cell.value = value
        cell.refs = 1
        if isinstance(value, Function):
            self._retain_captured(handle, value)

    # --- Reference counting ---
    def retain(self, handle: Handle) -> Handle:
        self._cell(handle).refs += 1
        return handle

    def release(self, handle: Handle) -> None:
        cell = self._cell(handle)
        cell.refs -= 1
        if cell.refs == 0:
            value = cell.value
            cell.value = Null
            logger.debug("freed %r (was %r)", handle, value)
            if isinstance(value, Function):
                self._release_captured(handle, value)

    def _retain_captured(self, handle: Handle, fn: Function) -> None:
        for symbol in fn.captured.symbols.values():
            if symbol.handle != handle:
                self.retain(symbol.handle)

    def _release_captured(self, handle: Handle, fn: Function) -> None:
        for symbol in fn.captured.symbols.values():
            if symbol.handle != handle:
                self.release(symbol.handle)

    # --- Access ---
    def dereference(self, handle: Handle) -> RuntimeValue:
        return self._cell(handle).value

    def _cell(self, handle: Handle) -> Cell:
        if not 0 <= handle.index < len(self.cells):
            raise InvalidHandle(f"Handle {handle!r} is outside the arena")
        cell = self.cells[handle.index]
        if cell.refs == 0:
            raise InvalidHandle(f"Handle {handle!r} refers to a free cell")
        return cell

    # --- Introspection ---
    def find(self, value: RuntimeValue) -> Optional[Handle]:
        """Handle of an in-use cell holding a value equal to `value`, if any."""
        for index, cell in enumerate(self.cells):
            if cell.refs == 0:
                continue
            if isinstance(value, Function) or isinstance(cell.value, Function):
                if cell.value is value:
                    return Handle(index)
            elif type(cell.value) is type(value) and cell.value == value:
                return Handle(index)
        return None

    def refcount(self, handle: Handle) -> int:
        if not 0 <= handle.index < len(self.cells):
            raise InvalidHandle(f"Handle {handle!r} is outside the arena")
        return self.cells[handle.index].refs

    def is_free(self, handle: Handle) -> bool:
        return self.refcount(handle) == 0

    def in_use(self) -> int:
        return sum(1 for cell in self.cells if cell.refs)

    def handles(self) -> Iterator[Handle]:
        """Handles of all in-use cells, in address order."""
        for index, cell in enumerate(self.cells):
            if cell.refs:
                yield Handle(index)

    def __len__(self) -> int:
        return self.capacity

    def __repr__(self) -> str:
        return f"<Arena {self.in_use()}/{self.capacity} cells in use>"
