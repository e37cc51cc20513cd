from calcvm.memory.registers import RegisterFile
from calcvm.types.value import Null, Number


def test_register_file_has_eight_slots(arena):
    registers = RegisterFile(arena)
    assert len(registers) == 8
    assert registers.value(0) is Null
    assert registers.handle(7) is None


def test_load_retains_and_replacing_releases(arena):
    registers = RegisterFile(arena)
    a = arena.allocate(Number(1))
    registers.load(0, a)
    assert arena.refcount(a) == 2
    arena.release(a)

    b = arena.allocate(Number(2))
    registers.load(0, b)
    arena.release(b)
    assert arena.is_free(a)
    assert registers.value(0) == Number(2)


def test_reloading_the_same_handle_keeps_one_reference(arena):
    registers = RegisterFile(arena)
    a = arena.allocate(Number(1))
    registers.load(3, a)
    registers.load(3, a)
    assert arena.refcount(a) == 2


def test_clear_all_releases_everything(arena):
    registers = RegisterFile(arena)
    for i in range(3):
        h = arena.allocate(Number(i))
        registers.load(i, h)
        arena.release(h)
    assert arena.in_use() == 3
    registers.clear_all()
    assert arena.in_use() == 0
