"""Interactive front-end for calcvm.

Lines are collected until their `{}`/`()` nesting is balanced, then the buffer
runs as one statement group against a single Interpreter, so definitions
persist between entries. Ctrl-C drops the pending buffer (or aborts the
running group) without ending the session.
"""

from __future__ import annotations

import sys
from typing import Callable, TextIO

from calcvm.errors import CalcError
from calcvm.interpreter import Interpreter
from calcvm.reader.lexer import bracket_depth
from calcvm.types.value import NullType

PROMPT = "> "
CONTINUATION_PROMPT = ". "
EXIT_COMMANDS = ("exit", "quit")


class Repl:
    def __init__(
        self,
        interpreter: Interpreter | None = None,
        input_fn: Callable[[str], str] = input,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ):
        self.out: TextIO = out if out is not None else sys.stdout
        self.err: TextIO = err if err is not None else sys.stderr
        self.interpreter: Interpreter = (
            interpreter if interpreter is not None else Interpreter(out=self.out)
        )
        self.input_fn = input_fn
        self.buffer: list[str] = []

    def feed(self, line: str) -> bool:
        """Add a line; run the buffer once brackets balance. Returns True if it ran."""
        self.buffer.append(line)
        source = "\n".join(self.buffer)
        if bracket_depth(source) > 0:
            return False
        self.buffer.clear()
        if not source.strip():
            return False
        self.run_group(source)
        return True

    def run_group(self, source: str) -> None:
        try:
            result = self.interpreter.eval(source)
        except CalcError as ex:
            print(f"Error: {ex}", file=self.err)
            return
        except KeyboardInterrupt:
            print("Interrupted", file=self.err)
            return
        if not isinstance(result, NullType):
            print(result, file=self.out)

    def loop(self) -> int:
        while True:
            prompt = CONTINUATION_PROMPT if self.buffer else PROMPT
            try:
                line = self.input_fn(prompt)
            except EOFError:
                print(file=self.out)
                return 0
            except KeyboardInterrupt:
                # Discard a partially typed group
                self.buffer.clear()
                print(file=self.out)
                continue
            if not self.buffer and line.strip() in EXIT_COMMANDS:
                return 0
            self.feed(line)
