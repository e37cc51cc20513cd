"""Control-flow results of statement execution.

Every statement returns one of these instead of setting flags on shared state,
so a loop or call that consumes a signal does so explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from calcvm.memory.arena import Handle


class Signal:
    __slots__ = ()


class _Normal(Signal):
    __slots__ = ()

    def __repr__(self):
        return "Normal"


class _BreakRequested(Signal):
    __slots__ = ()

    def __repr__(self):
        return "BreakRequested"


class _ContinueRequested(Signal):
    __slots__ = ()

    def __repr__(self):
        return "ContinueRequested"


@dataclass(frozen=True, slots=True)
class Returned(Signal):
    # Holds one arena reference to the returned value until the call consumes it
    handle: Handle


Normal = _Normal()
BreakRequested = _BreakRequested()
ContinueRequested = _ContinueRequested()
