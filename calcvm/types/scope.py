"""Lexical scopes for calcvm.

A Scope maps names to Symbols and optionally links to a parent scope. Lookups
walk from the innermost scope outwards and the first match wins, so inner
declarations shadow outer ones. Scopes never touch the arena themselves; the
Runtime retains and releases the handles their symbols hold.
"""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING, Iterator, Optional

from calcvm.errors import DuplicateDeclaration, UndeclaredVariable
from calcvm.types.symbol import Symbol

if TYPE_CHECKING:
    from calcvm.memory.arena import Handle


class Scope:
    """Mapping from names to Symbols with an optional parent link."""

    __slots__ = ("symbols", "parent", "owner")

    def __init__(self, parent: Optional[Scope] = None, owner: Optional[Handle] = None):
        self.symbols: dict[str, Symbol] = {}
        self.parent: Scope | None = parent
        # Cell of the function whose captured snapshot this is; None for block and call scopes
        self.owner: Handle | None = owner

    def declare(self, symbol: Symbol) -> None:
        """Add `symbol` to this frame.

        Raises DuplicateDeclaration if the name already exists in this frame;
        shadowing a name from a parent scope is allowed.
        """
        if symbol.name in self.symbols:
            raise DuplicateDeclaration(symbol.name)
        self.symbols[symbol.name] = symbol

    def find(self, name: str) -> Optional[Scope]:
        """Find the nearest scope in the chain that declares `name`."""
        scope: Optional[Scope] = self
        while scope is not None:
            if name in scope.symbols:
                return scope
            scope = scope.parent
        return None

    def lookup(self, name: str) -> Symbol:
        """Return the innermost Symbol for `name`.

        Raises UndeclaredVariable if no scope in the chain declares it.
        """
        scope = self.find(name)
        if scope is None:
            raise UndeclaredVariable(name)
        return scope.symbols[name]

    def chain(self) -> Iterator[Scope]:
        """Yield this scope and then each ancestor, innermost first."""
        scope: Optional[Scope] = self
        while scope is not None:
            yield scope
            scope = scope.parent

    def flatten(self) -> dict[str, Symbol]:
        """Merge the whole chain into one mapping of Symbol copies.

        Descendant bindings overwrite ancestor bindings with the same name.
        """
        merged: dict[str, Symbol] = {}
        for scope in reversed(list(self.chain())):
            for name, symbol in scope.symbols.items():
                merged[name] = symbol.copy()
        return merged

    def __contains__(self, name: str) -> bool:
        return name in self.symbols

    def __len__(self) -> int:
        return len(self.symbols)

    def _write_symbols(self, buffer: StringIO) -> None:
        buffer.write("{")
        first = True
        for name, symbol in self.symbols.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{name}: {symbol.handle!r}")
            if symbol.mutable:
                buffer.write(" (mut)")
            first = False
        buffer.write("}")

    def __str__(self) -> str:
        with StringIO() as buffer:
            self._write_symbols(buffer)
            if self.parent is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<Scope chain: ")
            frames = []
            for scope in self.chain():
                frame_buf = StringIO()
                scope._write_symbols(frame_buf)
                frames.append(frame_buf.getvalue())
            buffer.write(" -> ".join(frames))
            buffer.write(">")
            return buffer.getvalue()
