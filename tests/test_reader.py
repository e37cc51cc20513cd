import pytest

from calcvm.ast import (
    AssignOp,
    Assignment,
    BinaryOp,
    Break,
    Continue,
    FunctionCall,
    FunctionDeclaration,
    Identifier,
    IfStatement,
    NumberLiteral,
    Operator,
    Output,
    Return,
    UnaryOp,
    VariableDeclaration,
    WhileStatement,
)
from calcvm.errors import CalcSyntaxError
from calcvm.reader import parse
from calcvm.reader.lexer import bracket_depth, lex
from calcvm.reader.parser import parse_expression

# -----------------------------------------------------
# Lexer
# -----------------------------------------------------

@pytest.mark.parametrize(
    "source,expected",
    [
        ("var x = 1", [("keyword", "var"), ("name", "x"), ("assign", "="), ("number", "1")]),
        ("x+=2", [("name", "x"), ("assign", "+="), ("number", "2")]),
        ("a == b", [("name", "a"), ("operator", "=="), ("name", "b")]),
        ("a ~= b", [("name", "a"), ("operator", "~="), ("name", "b")]),
        ("~a", [("operator", "~"), ("name", "a")]),
        ("x <= 3 >= 4", [("name", "x"), ("operator", "<="), ("number", "3"), ("operator", ">="), ("number", "4")]),
        ("! f(1, 2)", [("bang", "!"), ("name", "f"), ("lparen", "("), ("number", "1"),
                       ("comma", ","), ("number", "2"), ("rparen", ")")]),
        ("{ ; }", [("lbrace", "{"), ("semi", ";"), ("rbrace", "}")]),
        ("whilex while", [("name", "whilex"), ("keyword", "while")]),
        ("1 # the rest\n2", [("number", "1"), ("number", "2")]),
        ("1 #[[ spans\nlines ]] 2", [("number", "1"), ("number", "2")]),
    ],
)
def test_lex(source, expected):
    assert list(lex(source)) == expected


@pytest.mark.parametrize("source", ["1 $ 2", "x @", "#[[ never closed"])
def test_lex_errors(source):
    with pytest.raises(CalcSyntaxError):
        list(lex(source))


@pytest.mark.parametrize(
    "source,depth",
    [
        ("fun f() {", 1),
        ("fun f() { }", 0),
        ("g(1,", 1),
        ("# { not counted", 0),
        ("#[[ still open {", 1),
        ("}", -1),
    ],
)
def test_bracket_depth(source, depth):
    assert bracket_depth(source) == depth


# -----------------------------------------------------
# Expressions
# -----------------------------------------------------

def test_precedence():
    assert parse_expression("1 + 2 * 3") == BinaryOp(
        NumberLiteral(1), Operator.ADD, BinaryOp(NumberLiteral(2), Operator.MUL, NumberLiteral(3))
    )


def test_left_associative():
    assert parse_expression("8 - 3 - 2") == BinaryOp(
        BinaryOp(NumberLiteral(8), Operator.SUB, NumberLiteral(3)), Operator.SUB, NumberLiteral(2)
    )


def test_comparison_binds_tighter_than_logic():
    assert parse_expression("a < 1 | b") == BinaryOp(
        BinaryOp(Identifier("a"), Operator.LT, NumberLiteral(1)), Operator.OR, Identifier("b")
    )


def test_unary_binds_tightest():
    assert parse_expression("-a * b") == BinaryOp(
        UnaryOp(Operator.NEG, Identifier("a")), Operator.MUL, Identifier("b")
    )
    assert parse_expression("~~x") == UnaryOp(Operator.NOT, UnaryOp(Operator.NOT, Identifier("x")))


def test_call_arguments():
    assert parse_expression("f(1, g(x))") == FunctionCall(
        "f", (NumberLiteral(1), FunctionCall("g", (Identifier("x"),)))
    )
    assert parse_expression("f()") == FunctionCall("f", ())


# -----------------------------------------------------
# Statements
# -----------------------------------------------------

def test_statements_need_no_separator():
    assert parse("var x = 1 x = 2 ! x") == [
        VariableDeclaration(False, "x", NumberLiteral(1)),
        Assignment("x", AssignOp.ASSIGN, NumberLiteral(2)),
        Output(Identifier("x")),
    ]


def test_declarations():
    assert parse("var a mut b = 2; b *= 3") == [
        VariableDeclaration(False, "a", NumberLiteral(0)),
        VariableDeclaration(True, "b", NumberLiteral(2)),
        Assignment("b", AssignOp.MUL, NumberLiteral(3)),
    ]


def test_function_declaration():
    [decl] = parse("fun add(a, b) { return a + b }")
    assert decl == FunctionDeclaration(
        "add", ("a", "b"), (Return(BinaryOp(Identifier("a"), Operator.ADD, Identifier("b"))),)
    )


def test_function_without_parameter_list():
    [decl] = parse("fun hello { ! 1 }")
    assert decl.params == ()


def test_if_chain():
    [stmt] = parse("if a { 1 } elseif b { 2 } elseif c { } else { 4 }")
    assert isinstance(stmt, IfStatement)
    assert stmt.body == (NumberLiteral(1),)
    assert [cond for cond, _ in stmt.else_ifs] == [Identifier("b"), Identifier("c")]
    assert stmt.else_ifs[1][1] == ()
    assert stmt.else_body == (NumberLiteral(4),)


def test_while_with_break_and_continue():
    [stmt] = parse("while 1 { break continue }")
    assert stmt == WhileStatement(NumberLiteral(1), (Break(), Continue()))


@pytest.mark.parametrize("source", ["fun f() { return }", "fun f() { return; }"])
def test_bare_return(source):
    [decl] = parse(source)
    assert decl.body == (Return(None),)


@pytest.mark.parametrize(
    "source",
    [
        "var = 1",
        "mut x",
        "var x += 1",
        "1 +",
        "(1 + 2",
        "if 1 { 2",
        "fun f(a, ) { }",
        "fun (a) { }",
        "f(1 2)",
        "}",
        "else { 1 }",
        "2147483648",
        "-2147483648",  # the minus is a separate operator
    ],
)
def test_syntax_errors(source):
    with pytest.raises(CalcSyntaxError):
        parse(source)


def test_largest_literal():
    assert parse_expression("2147483647") == NumberLiteral(2147483647)
