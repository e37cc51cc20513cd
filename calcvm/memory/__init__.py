from calcvm.memory.arena import Arena, Cell, Handle
from calcvm.memory.registers import RegisterFile

__all__ = ["Arena", "Cell", "Handle", "RegisterFile"]
