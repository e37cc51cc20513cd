"""calcvm command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from calcvm import config
from calcvm.errors import CalcError
from calcvm.interpreter import Interpreter
from calcvm.repl import Repl
from calcvm.solve.linear import solve


def _run_file(args: argparse.Namespace) -> int:
    try:
        with open(args.file, "r", encoding="utf-8") as handle:
            source = handle.read()
    except OSError as exc:
        print(f"Failed to read {args.file}: {exc}", file=sys.stderr)
        return 1

    interpreter = Interpreter(arena_size=args.arena_size, max_call_depth=args.max_call_depth)
    try:
        interpreter.eval(source)
    except CalcError as error:
        print(f"{type(error).__name__}: {error}", file=sys.stderr)
        return 1
    return 0


def _run_repl(args: argparse.Namespace) -> int:
    print("calcvm REPL. Type 'exit' or press Ctrl-D to leave.")
    return Repl(Interpreter(arena_size=args.arena_size, max_call_depth=args.max_call_depth)).loop()


def _run_solve(args: argparse.Namespace) -> int:
    try:
        solution = solve(args.equations)
    except CalcError as error:
        print(f"{type(error).__name__}: {error}", file=sys.stderr)
        return 1
    for name, value in solution.items():
        print(f"{name} = {value:g}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="calcvm", description="calcvm integer language interpreter")
    parser.add_argument("--log-level", default=None, help="Logging level (default: $CALCVM_LOG_LEVEL or WARNING)")
    parser.add_argument("--arena-size", type=int, default=None, help="Number of memory cells (default: $CALCVM_ARENA_SIZE or 1024)")
    parser.add_argument("--max-call-depth", type=int, default=None, help="Deepest allowed call nesting (default: $CALCVM_MAX_CALL_DEPTH or 512)")
    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser("run", help="Run a program file")
    run.add_argument("file")
    run.set_defaults(handler=_run_file)

    repl = sub.add_parser("repl", help="Start the interactive interpreter")
    repl.set_defaults(handler=_run_repl)

    solve_cmd = sub.add_parser("solve", help="Solve linear equations, e.g. '2*x + 3 = 7'")
    solve_cmd.add_argument("equations", nargs="+")
    solve_cmd.set_defaults(handler=_run_solve)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = config.get_log_level()
    if args.log_level:
        level = logging.getLevelName(args.log_level.upper())
        if not isinstance(level, int):
            parser.error(f"unknown log level {args.log_level!r}")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.arena_size is not None and args.arena_size < 1:
        parser.error("--arena-size must be positive")
    if args.max_call_depth is not None and args.max_call_depth < 1:
        parser.error("--max-call-depth must be positive")

    handler = getattr(args, "handler", _run_repl)
    return handler(args)
