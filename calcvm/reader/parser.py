"""
  Recursive-descent parser for calcvm.

Turns the token stream from `lex` into the AST in calcvm.ast. Binary operators
are parsed by precedence climbing (all left-associative):

    |                1
    &                2
    == ~=            3
    < <= > >=        4
    + -              5
    * / %            6
    unary - ~        7

Statements need no terminator: an expression ends at the first token that
cannot continue it, so `var x = 1 x = 2` is two statements. `;` may be used
to separate statements explicitly.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from calcvm import Node
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
from calcvm.reader.lexer import lex
from calcvm.types.value import INT32_MAX

BINARY_OPERATORS: dict[str, Operator] = {
    "|": Operator.OR,
    "&": Operator.AND,
    "==": Operator.EQ,
    "~=": Operator.NE,
    "<": Operator.LT,
    "<=": Operator.LE,
    ">": Operator.GT,
    ">=": Operator.GE,
    "+": Operator.ADD,
    "-": Operator.SUB,
    "*": Operator.MUL,
    "/": Operator.DIV,
    "%": Operator.MOD,
}

UNARY_OPERATORS: dict[str, Operator] = {
    "-": Operator.NEG,
    "~": Operator.NOT,
}

PRECEDENCE: dict[Operator, int] = {
    Operator.OR: 1,
    Operator.AND: 2,
    Operator.EQ: 3,
    Operator.NE: 3,
    Operator.LT: 4,
    Operator.LE: 4,
    Operator.GT: 4,
    Operator.GE: 4,
    Operator.ADD: 5,
    Operator.SUB: 5,
    Operator.MUL: 6,
    Operator.DIV: 6,
    Operator.MOD: 6,
}
UNARY_PRECEDENCE = 7

ASSIGN_OPERATORS: dict[str, AssignOp] = {op.value: op for op in AssignOp}


class TokenStream:
    def __init__(self, token_iter: Iterable[tuple[str, str]]):
        self.tokens: Iterator[tuple[str, str]] = iter(token_iter)
        self.buffer: list[tuple[str, str]] = []

    def peek(self, offset: int = 0) -> tuple[Optional[str], Optional[str]]:
        while len(self.buffer) <= offset:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None
        return self.buffer[offset]

    def advance(self) -> tuple[Optional[str], Optional[str]]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None))

    def at(self, kind: str, text: str | None = None) -> bool:
        tok_type, tok_val = self.peek()
        return tok_type == kind and (text is None or tok_val == text)

    def expect(self, kind: str, text: str | None = None) -> str:
        tok_type, tok_val = self.advance()
        if tok_type is None:
            raise CalcSyntaxError(f"Expected {text or kind}, got end of input")
        if tok_type != kind or (text is not None and tok_val != text):
            raise CalcSyntaxError(f"Expected {text or kind}, got {tok_val!r}")
        return tok_val

    # ------------------------
    # Statements
    # ------------------------
    def parse_program(self) -> list[Node]:
        statements = []
        while (statement := self.parse_statement()) is not None:
            statements.append(statement)
        return statements

    def parse_statement(self) -> Optional[Node]:
        """Parse the next statement, or return None at end of input or before `}`."""
        while self.at("semi"):
            self.advance()

        tok_type, tok_val = self.peek()
        if tok_type is None or tok_type == "rbrace":
            return None

        if tok_type == "keyword":
            return self._parse_keyword_statement(tok_val)

        if tok_type == "bang":
            self.advance()
            return Output(self.parse_expr())

        if tok_type == "name" and self.peek(1)[0] == "assign":
            self.advance()
            _, op_text = self.advance()
            return Assignment(tok_val, ASSIGN_OPERATORS[op_text], self.parse_expr())

        return self.parse_expr()

    def _parse_keyword_statement(self, keyword: str) -> Node:
        self.advance()  # consume the keyword

        if keyword in ("var", "mut"):
            name = self.expect("name")
            if self.at("assign"):
                _, op_text = self.advance()
                if op_text != "=":
                    raise CalcSyntaxError(
                        f"Unexpected {op_text!r} in declaration of {name!r}"
                    )
                return VariableDeclaration(keyword == "mut", name, self.parse_expr())
            if keyword == "mut":
                raise CalcSyntaxError(f"Mutable variable {name!r} needs an initial value")
            return VariableDeclaration(False, name, NumberLiteral(0))

        if keyword == "fun":
            name = self.expect("name")
            params = self._parse_params() if self.at("lparen") else ()
            return FunctionDeclaration(name, params, self.parse_block())

        if keyword == "if":
            condition = self.parse_expr()
            body = self.parse_block()
            else_ifs = []
            else_body = None
            while self.at("keyword", "elseif"):
                self.advance()
                branch_condition = self.parse_expr()
                else_ifs.append((branch_condition, self.parse_block()))
            if self.at("keyword", "else"):
                self.advance()
                else_body = self.parse_block()
            return IfStatement(condition, body, tuple(else_ifs), else_body)

        if keyword == "while":
            condition = self.parse_expr()
            return WhileStatement(condition, self.parse_block())

        if keyword == "break":
            return Break()

        if keyword == "continue":
            return Continue()

        if keyword == "return":
            tok_type, _ = self.peek()
            if tok_type in (None, "rbrace", "semi"):
                return Return(None)
            return Return(self.parse_expr())

        raise CalcSyntaxError(f"Unexpected keyword {keyword!r}")

    def _parse_params(self) -> tuple[str, ...]:
        self.expect("lparen")
        params = []
        if not self.at("rparen"):
            params.append(self.expect("name"))
            while self.at("comma"):
                self.advance()
                params.append(self.expect("name"))
        self.expect("rparen")
        return tuple(params)

    def parse_block(self) -> tuple:
        """{ statement* }"""
        self.expect("lbrace")
        body = []
        while (statement := self.parse_statement()) is not None:
            body.append(statement)
        self.expect("rbrace")
        return tuple(body)

    # ------------------------
    # Expressions
    # ------------------------
    def parse_expr(self, min_prec: int = 1) -> Node:
        left = self._parse_unary()
        while True:
            tok_type, tok_val = self.peek()
            if tok_type != "operator" or tok_val not in BINARY_OPERATORS:
                break
            op = BINARY_OPERATORS[tok_val]
            prec = PRECEDENCE[op]
            if prec < min_prec:
                break
            self.advance()
            right = self.parse_expr(prec + 1)
            left = BinaryOp(left, op, right)
        return left

    def _parse_unary(self) -> Node:
        tok_type, tok_val = self.peek()
        if tok_type == "operator" and tok_val in UNARY_OPERATORS:
            self.advance()
            return UnaryOp(UNARY_OPERATORS[tok_val], self.parse_expr(UNARY_PRECEDENCE))
        return self._parse_primary()

    def _parse_primary(self) -> Node:
        tok_type, tok_val = self.advance()
        if tok_type is None:
            raise CalcSyntaxError("Unexpected end of input in expression")

        if tok_type == "number":
            value = int(tok_val)
            if value > INT32_MAX:
                raise CalcSyntaxError(f"Number {tok_val} does not fit in 32 bits")
            return NumberLiteral(value)

        if tok_type == "name":
            if self.at("lparen"):
                return FunctionCall(tok_val, self._parse_args())
            return Identifier(tok_val)

        if tok_type == "lparen":
            expr = self.parse_expr()
            self.expect("rparen")
            return expr

        raise CalcSyntaxError(f"Unexpected token {tok_val!r}")

    def _parse_args(self) -> tuple:
        self.expect("lparen")
        args = []
        if not self.at("rparen"):
            args.append(self.parse_expr())
            while self.at("comma"):
                self.advance()
                args.append(self.parse_expr())
        self.expect("rparen")
        return tuple(args)


def parse(source: str) -> list[Node]:
    """Parse a whole program (one top-level statement group)."""
    stream = TokenStream(lex(source))
    statements = stream.parse_program()
    tok_type, tok_val = stream.peek()
    if tok_type is not None:
        raise CalcSyntaxError(f"Unexpected token {tok_val!r}")
    return statements


def parse_expression(source: str) -> Node:
    """Parse exactly one expression."""
    stream = TokenStream(lex(source))
    expr = stream.parse_expr()
    tok_type, tok_val = stream.peek()
    if tok_type is not None:
        raise CalcSyntaxError(f"Unexpected token {tok_val!r} after expression")
    return expr
