"""Runtime session state for calcvm.

A Runtime bundles everything a program mutates while it runs: the memory
arena, the register file, and the stack of active scopes. One Runtime can be
fed many top-level statement groups (the interactive case); constructing a new
one starts from a clean slate.

Ownership rule: every Symbol and register owns exactly one reference to the
cell its handle points at. `declare` and `rebind` take over a reference the
caller already holds (as returned by `store`); `pop_scope` releases the
references of every symbol in the popped scope.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, TextIO

from calcvm import RuntimeValue, config
from calcvm.errors import DuplicateDeclaration, ImmutableAssignment, UndeclaredVariable
from calcvm.memory.arena import Arena, Handle
from calcvm.memory.registers import RegisterFile
from calcvm.types.scope import Scope
from calcvm.types.symbol import Symbol

logger = logging.getLogger(__name__)

# Upper bound on Python frames one nested call adds (call, body, statement, expression)
PYTHON_FRAMES_PER_CALL = 24


class Runtime:
    """Arena, registers and scope stack of one interpreter session."""

    def __init__(
        self,
        arena_size: int | None = None,
        out: TextIO | None = None,
        max_call_depth: int | None = None,
    ):
        self.arena: Arena = Arena(arena_size)
        self.registers: RegisterFile = RegisterFile(self.arena)
        self.scopes: list[Scope] = [Scope()]
        self.out: TextIO = out if out is not None else sys.stdout
        self.call_depth: int = 0
        if max_call_depth is None:
            max_call_depth = config.get_max_call_depth()
        if max_call_depth < 1:
            raise ValueError(f"Maximum call depth must be positive, got {max_call_depth}")
        self.max_call_depth: int = max_call_depth

    @property
    def current_scope(self) -> Scope:
        return self.scopes[-1]

    @property
    def global_scope(self) -> Scope:
        return self.scopes[0]

    # --- Scope stack ---
    def push_scope(self, parent: Scope | None = None) -> Scope:
        """Push a new scope whose parent is `parent` (default: the current scope)."""
        if parent is None and self.scopes:
            parent = self.current_scope
        scope = Scope(parent)
        self.scopes.append(scope)
        logger.debug("push scope (depth %d)", len(self.scopes))
        return scope

    def pop_scope(self) -> Scope:
        scope = self.scopes.pop()
        for symbol in scope.symbols.values():
            self.arena.release(symbol.handle)
        logger.debug("pop scope (depth %d)", len(self.scopes))
        return scope

    @contextmanager
    def block(self) -> Iterator[Scope]:
        """Run the body in a fresh child scope, popped on every exit path."""
        scope = self.push_scope()
        try:
            yield scope
        finally:
            self.pop_scope()

    @contextmanager
    def call_frame(self, captured: Scope) -> Iterator[Scope]:
        """Swap the scope stack for a call scope whose parent is `captured`.

        The caller's stack is restored on every exit path, including errors.
        """
        saved = self.scopes
        self.scopes = []
        self.call_depth += 1
        try:
            yield self.push_scope(parent=captured)
        finally:
            try:
                while self.scopes:
                    self.pop_scope()
            finally:
                self.scopes = saved
                self.call_depth -= 1

    @contextmanager
    def recursion_headroom(self) -> Iterator[None]:
        """Raise the interpreter's recursion limit so `max_call_depth` nested calls fit.

        Every call nests a handful of Python frames (call, body, statement,
        expression), so the limit is scaled by PYTHON_FRAMES_PER_CALL. The
        previous limit is restored on exit.
        """
        previous = sys.getrecursionlimit()
        needed = previous + self.max_call_depth * PYTHON_FRAMES_PER_CALL
        sys.setrecursionlimit(needed)
        try:
            yield
        finally:
            sys.setrecursionlimit(previous)

    # --- Cells ---
    def store(self, value: RuntimeValue) -> Handle:
        """Allocate (or reuse) a cell for `value`; the caller owns the reference."""
        return self.arena.allocate(value)

    def value_of(self, handle: Handle) -> RuntimeValue:
        return self.arena.dereference(handle)

    # --- Bindings ---
    def declare(self, name: str, handle: Handle, mutable: bool = False) -> Symbol:
        """Bind `name` in the current scope, taking over the caller's reference."""
        symbol = Symbol(name, handle, mutable)
        try:
            self.current_scope.declare(symbol)
        except DuplicateDeclaration:
            self.arena.release(handle)
            raise
        return symbol

    def declare_value(self, name: str, value: RuntimeValue, mutable: bool = False) -> Symbol:
        if name in self.current_scope:
            raise DuplicateDeclaration(name)
        return self.declare(name, self.store(value), mutable)

    def lookup(self, name: str) -> Handle:
        return self.current_scope.lookup(name).handle

    def load(self, name: str) -> RuntimeValue:
        return self.arena.dereference(self.lookup(name))

    def _writable(self, name: str) -> Symbol:
        symbol = self.current_scope.lookup(name)
        if not symbol.mutable:
            raise ImmutableAssignment(name)
        return symbol

    def rebind(self, name: str, handle: Handle) -> None:
        """Point `name` at `handle`, taking over the caller's reference.

        The cell the name pointed at before is released, never overwritten.
        Inside a function's captured scope a binding to the function's own
        cell holds no reference, like the self-binding; counting it would
        keep the cell alive through itself.
        """
        try:
            symbol = self._writable(name)
        except (UndeclaredVariable, ImmutableAssignment):
            self.arena.release(handle)
            raise
        owner = self.current_scope.find(name).owner
        previous = symbol.handle
        symbol.handle = handle
        if handle == owner:
            self.arena.release(handle)
        if previous != owner:
            self.arena.release(previous)

    def assign(self, name: str, value: RuntimeValue) -> None:
        self._writable(name)
        self.rebind(name, self.store(value))

    def capture(self, self_name: str | None = None, self_handle: Handle | None = None) -> Scope:
        """Flatten the active scope chain into one parentless snapshot.

        With `self_name`, the snapshot also binds that name to `self_handle`
        so a function can call itself. The snapshot holds no references yet;
        the arena retains them once the function is stored.
        """
        snapshot = Scope(owner=self_handle)
        snapshot.symbols = self.current_scope.flatten()
        if self_name is not None:
            snapshot.symbols[self_name] = Symbol(self_name, self_handle, False)
        return snapshot

    # --- Output / introspection ---
    def write_line(self, text: str) -> None:
        print(text, file=self.out)

    def variables(self) -> dict[str, RuntimeValue]:
        """Snapshot of the global scope as {name: value}."""
        return {
            name: self.arena.dereference(symbol.handle)
            for name, symbol in self.global_scope.symbols.items()
        }

    def stats(self) -> dict[str, int]:
        return {
            "capacity": self.arena.capacity,
            "cells_in_use": self.arena.in_use(),
            "scope_depth": len(self.scopes),
            "registers_in_use": sum(1 for h in self.registers.slots if h is not None),
        }

    def __repr__(self) -> str:
        return f"<Runtime {self.arena!r} scopes={len(self.scopes)}>"
