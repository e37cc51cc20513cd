from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from calcvm.memory.arena import Handle


@dataclass(slots=True)
class Symbol:
    """A declared name: the handle it is bound to and whether it may be rebound."""

    name: str
    handle: Handle
    mutable: bool = False

    def copy(self) -> Symbol:
        return Symbol(self.name, self.handle, self.mutable)
