"""Abstract syntax tree for calcvm programs.

The parser emits these nodes and the evaluator walks them directly; there is no
intermediate bytecode. Expression nodes produce values, statement nodes produce
control-flow signals. A bare expression is also accepted where a statement is
expected.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Operator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    AND = "&"
    OR = "|"
    EQ = "=="
    NE = "~="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    # Unary
    NEG = "neg"
    NOT = "~"


class AssignOp(Enum):
    ASSIGN = "="
    ADD = "+="
    SUB = "-="
    MUL = "*="
    DIV = "/="
    MOD = "%="

    @property
    def operator(self) -> Operator | None:
        """The binary operator combining old and new value (None for plain `=`)."""
        return _ASSIGN_OPERATORS.get(self)


_ASSIGN_OPERATORS = {
    AssignOp.ADD: Operator.ADD,
    AssignOp.SUB: Operator.SUB,
    AssignOp.MUL: Operator.MUL,
    AssignOp.DIV: Operator.DIV,
    AssignOp.MOD: Operator.MOD,
}


# --- Expressions ---

@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class NumberLiteral:
    value: int


@dataclass(frozen=True)
class BinaryOp:
    left: object
    op: Operator
    right: object


@dataclass(frozen=True)
class UnaryOp:
    op: Operator
    operand: object


@dataclass(frozen=True)
class FunctionCall:
    name: str
    args: tuple = ()


# --- Statements ---

@dataclass(frozen=True)
class VariableDeclaration:
    mutable: bool
    name: str
    value: object


@dataclass(frozen=True)
class Assignment:
    name: str
    op: AssignOp
    value: object


@dataclass(frozen=True)
class FunctionDeclaration:
    name: str
    params: tuple
    body: tuple


@dataclass(frozen=True)
class IfStatement:
    condition: object
    body: tuple
    else_ifs: tuple = ()  # ((condition, body), ...)
    else_body: tuple | None = None


@dataclass(frozen=True)
class WhileStatement:
    condition: object
    body: tuple


@dataclass(frozen=True)
class Break:
    pass


@dataclass(frozen=True)
class Continue:
    pass


@dataclass(frozen=True)
class Return:
    value: object | None = None


@dataclass(frozen=True)
class Output:
    value: object


EXPRESSION_NODES = (Identifier, NumberLiteral, BinaryOp, UnaryOp, FunctionCall)


def is_expression(node) -> bool:
    return isinstance(node, EXPRESSION_NODES)


def children(node) -> list:
    """Direct child nodes of `node`, in source order."""
    match node:
        case BinaryOp(left=left, right=right):
            return [left, right]
        case UnaryOp(operand=operand):
            return [operand]
        case FunctionCall(args=args):
            return list(args)
        case VariableDeclaration(value=value) | Assignment(value=value) | Output(value=value):
            return [value]
        case Return(value=value):
            return [] if value is None else [value]
        case FunctionDeclaration(body=body):
            return list(body)
        case WhileStatement(condition=condition, body=body):
            return [condition, *body]
        case IfStatement(condition=condition, body=body, else_ifs=else_ifs, else_body=else_body):
            nodes = [condition, *body]
            for branch_condition, branch_body in else_ifs:
                nodes.append(branch_condition)
                nodes.extend(branch_body)
            nodes.extend(else_body or ())
            return nodes
    return []
