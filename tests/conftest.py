import io

import pytest

from calcvm.interpreter import Interpreter
from calcvm.memory.arena import Arena
from calcvm.runtime import Runtime


@pytest.fixture
def out():
    """Captures Output statement lines."""
    return io.StringIO()


@pytest.fixture
def interp(out):
    """Fresh interpreter writing program output to `out`."""
    return Interpreter(out=out)


@pytest.fixture
def runtime(out):
    return Runtime(arena_size=32, out=out)


@pytest.fixture
def arena():
    return Arena(8)
