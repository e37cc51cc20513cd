import io

import pytest

from calcvm.errors import (
    DivisionByZero,
    DuplicateDeclaration,
    ImmutableAssignment,
    UndeclaredVariable,
)
from calcvm.interpreter import Interpreter
from calcvm.types.value import Null, Number

# -----------------------------------------------------
# Variables
# -----------------------------------------------------

def test_immutable_variable_cannot_be_assigned(interp):
    with pytest.raises(ImmutableAssignment) as info:
        interp.eval("var x = 1; x = 2")
    assert info.value.name == "x"
    assert interp.eval("x") == Number(1)


def test_mutable_variable(interp):
    assert interp.eval("mut x = 1; x = 2; x == 2") == Number(1)


def test_compound_assignment(interp):
    program = """
    mut x = 10
    x += 5
    x -= 3
    x *= 2
    x /= 4
    x %= 4
    x
    """
    assert interp.eval(program) == Number(2)


def test_var_without_value_is_zero(interp):
    assert interp.eval("var x x") == Number(0)


def test_declaration_returns_null(interp):
    assert interp.eval("var x = 3") is Null


@pytest.mark.parametrize("source", ["y + 1", "z = 1", "z += 1"])
def test_undeclared_variable(interp, source):
    with pytest.raises(UndeclaredVariable):
        interp.eval(source)


def test_redeclaration_in_same_scope(interp):
    interp.eval("var x = 1")
    with pytest.raises(DuplicateDeclaration):
        interp.eval("mut x = 2")


def test_shadowing_in_block(interp, out):
    interp.eval("var x = 1 if 1 { var x = 2 ! x } ! x")
    assert out.getvalue() == "2\n1\n"


def test_equal_values_do_not_alias_observably(interp):
    interp.eval("mut a = 5 mut b = 5")
    # Same cell underneath...
    assert interp.runtime.lookup("a") == interp.runtime.lookup("b")
    # ...but rebinding one leaves the other alone
    assert interp.eval("a += 1 b") == Number(5)
    assert interp.eval("a") == Number(6)


# -----------------------------------------------------
# Block scoping
# -----------------------------------------------------

def test_if_body_locals_vanish(interp):
    with pytest.raises(UndeclaredVariable):
        interp.eval("if 1 { var inner = 5 } inner")


def test_while_body_locals_vanish(interp):
    with pytest.raises(UndeclaredVariable):
        interp.eval("mut i = 0 while i < 1 { var t = 1 i += 1 } t")


def test_while_body_gets_fresh_scope_each_iteration(interp):
    # Redeclaring inside the body would fail if the scope were reused
    assert interp.eval("mut i = 0 while i < 3 { var t = i i += 1 } i") == Number(3)


# -----------------------------------------------------
# Control flow
# -----------------------------------------------------

def test_while_sum(interp):
    assert interp.eval("mut i = 0 mut s = 0 while i < 5 { i += 1 s += i } s") == Number(15)


def test_break_inside_if_ends_loop_once(interp, out):
    result = interp.eval(
        """
        mut i = 0
        while i < 10 {
            i += 1
            if i == 3 { break }
            ! i
        }
        ! 100
        i
        """
    )
    assert result == Number(3)
    assert out.getvalue() == "1\n2\n100\n"


def test_continue_skips_rest_of_iteration(interp, out):
    interp.eval(
        """
        mut i = 0
        while i < 5 {
            i += 1
            if i % 2 == 0 { continue }
            ! i
        }
        """
    )
    assert out.getvalue() == "1\n3\n5\n"


def test_break_only_leaves_innermost_loop(interp):
    program = """
    mut outer = 0
    mut total = 0
    while outer < 3 {
        outer += 1
        mut inner = 0
        while 1 {
            inner += 1
            if inner > 2 { break }
            total += 1
        }
    }
    total
    """
    assert interp.eval(program) == Number(6)


def test_if_elseif_else(interp):
    interp.eval(
        """
        fun sign(n) {
            if n < 0 { return -1 }
            elseif n == 0 { return 0 }
            else { return 1 }
        }
        """
    )
    assert interp.eval("sign(-5)") == Number(-1)
    assert interp.eval("sign(0)") == Number(0)
    assert interp.eval("sign(9)") == Number(1)


def test_only_first_matching_branch_runs(interp, out):
    interp.eval("if 0 { ! 1 } elseif 2 { ! 2 } elseif 3 { ! 3 } else { ! 4 }")
    assert out.getvalue() == "2\n"


def test_no_branch_taken(interp, out):
    interp.eval("if 0 { ! 1 } elseif 0 { ! 2 }")
    assert out.getvalue() == ""


def test_functions_are_truthy(interp, out):
    interp.eval("fun f() { } if f { ! 1 } if f() { ! 2 }")
    assert out.getvalue() == "1\n"


def test_output_formats(interp, out):
    interp.eval("fun f() { } ! 42 ! -3 ! f ! f()")
    assert out.getvalue() == "42\n-3\nFunction\nNull\n"


def test_return_at_top_level_ends_group(interp, out):
    assert interp.eval("! 1 return 5 ! 9") == Number(5)
    assert out.getvalue() == "1\n"


def test_stray_break_at_top_level_ends_group(interp, out):
    assert interp.eval("! 1 break ! 2") is Null
    assert out.getvalue() == "1\n"


# -----------------------------------------------------
# Failure semantics
# -----------------------------------------------------

def test_error_keeps_earlier_bindings(interp):
    with pytest.raises(DivisionByZero):
        interp.eval("var a = 1 var b = 1 / 0 var c = 3")
    assert interp.eval("a") == Number(1)
    with pytest.raises(UndeclaredVariable):
        interp.eval("c")
    assert len(interp.runtime.scopes) == 1


def test_error_inside_nested_blocks_restores_scopes(interp):
    with pytest.raises(DivisionByZero):
        interp.eval("mut i = 0 while 1 { if i == 2 { var x = 1 / 0 } i += 1 }")
    assert len(interp.runtime.scopes) == 1
    assert interp.eval("i") == Number(2)


def test_fresh_runtime_has_no_hidden_state():
    program = """
    mut n = 0
    fun bump(x) { return x + 1 }
    while n < 4 { n = bump(n) ! n }
    var done = n * 10
    """
    runs = []
    for _ in range(2):
        out = io.StringIO()
        itp = Interpreter(out=out)
        itp.eval(program)
        numbers = {k: v for k, v in itp.variables().items() if isinstance(v, Number)}
        runs.append((out.getvalue(), numbers, itp.runtime.stats()))
    assert runs[0] == runs[1]
    assert runs[0][1] == {"n": Number(4), "done": Number(40)}
