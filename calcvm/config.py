from __future__ import annotations
import logging
import os

# Number of argument/result registers; fixed by the calling convention
REGISTER_COUNT = 8

# Defaults
_DEFAULT_ARENA_SIZE = 1024
_DEFAULT_MAX_CALL_DEPTH = 512
_DEFAULT_LOG_LEVEL = 'WARNING'


def int_from_env(var: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None
    return max(value, minimum)


def get_arena_size() -> int:
    return int_from_env('CALCVM_ARENA_SIZE', _DEFAULT_ARENA_SIZE, minimum=1)


def get_max_call_depth() -> int:
    return int_from_env('CALCVM_MAX_CALL_DEPTH', _DEFAULT_MAX_CALL_DEPTH, minimum=1)


def get_log_level() -> int:
    name = os.environ.get('CALCVM_LOG_LEVEL', _DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    # getLevelName returns a string for unknown names
    return level if isinstance(level, int) else logging.WARNING
