"""Linear equation solver.

Independent of the evaluator: it reads expression trees produced by the
parser, pulls out the coefficient of every variable and solves the resulting
system with numpy. Numbers here are floats; integer program semantics do not
apply.
"""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from calcvm import Node
from calcvm.ast import BinaryOp, Identifier, NumberLiteral, Operator, UnaryOp, children
from calcvm.errors import CalcSyntaxError, NoSolution, NonLinearExpression
from calcvm.reader.parser import parse_expression

logger = logging.getLogger(__name__)

Equation = tuple[dict[str, float], float]


def find_vars(node: Node) -> list[str]:
    """Names of all identifiers in `node`, each once, in order of first appearance."""
    seen: dict[str, None] = {}

    def walk(n: Node) -> None:
        if isinstance(n, Identifier):
            seen.setdefault(n.name)
            return
        for child in children(n):
            walk(child)

    walk(node)
    return list(seen)


def extract_coefficients(node: Node, sign: float = 1.0) -> Equation:
    """Split a linear expression into ({name: coefficient}, constant term).

    Supports + - and unary minus, multiplication where one side is constant and
    division by a constant. Anything else raises NonLinearExpression.
    """
    coefficients: dict[str, float] = {}
    constant = 0.0

    def walk(n: Node, s: float) -> None:
        nonlocal constant
        match n:
            case NumberLiteral(value=value):
                constant += s * value
            case Identifier(name=name):
                coefficients[name] = coefficients.get(name, 0.0) + s
            case UnaryOp(op=Operator.NEG, operand=operand):
                walk(operand, -s)
            case BinaryOp(left=left, op=Operator.ADD, right=right):
                walk(left, s)
                walk(right, s)
            case BinaryOp(left=left, op=Operator.SUB, right=right):
                walk(left, s)
                walk(right, -s)
            case BinaryOp(left=left, op=Operator.MUL, right=right):
                if not find_vars(right):
                    walk(left, s * _constant_value(right))
                elif not find_vars(left):
                    walk(right, s * _constant_value(left))
                else:
                    raise NonLinearExpression("Product of two variable terms is not linear")
            case BinaryOp(left=left, op=Operator.DIV, right=right):
                if find_vars(right):
                    raise NonLinearExpression("Division by a variable term is not linear")
                divisor = _constant_value(right)
                if divisor == 0:
                    raise NoSolution("Division by zero in equation")
                walk(left, s / divisor)
            case _:
                raise NonLinearExpression(f"Unsupported term in equation: {n!r}")

    walk(node, sign)
    return coefficients, constant


def _constant_value(node: Node) -> float:
    _, value = extract_coefficients(node)
    return value


def formulate_equation(left: Node, right: Node) -> Equation:
    """Rewrite `left = right` as sum(coefficient * name) = constant."""
    coefficients, constant = extract_coefficients(left)
    right_coefficients, right_constant = extract_coefficients(right, -1.0)
    for name, coefficient in right_coefficients.items():
        coefficients[name] = coefficients.get(name, 0.0) + coefficient
    return coefficients, -(constant + right_constant)


def solve_equations(equations: Iterable[Equation]) -> dict[str, float]:
    """Solve a system of linear equations for every variable it mentions.

    Raises NoSolution when the system is inconsistent or does not pin down a
    unique value for each variable.
    """
    equations = list(equations)
    names: list[str] = []
    for coefficients, _ in equations:
        for name in coefficients:
            if name not in names:
                names.append(name)
    if not names:
        raise NoSolution("No variables to solve for")

    matrix = np.zeros((len(equations), len(names)))
    constants = np.zeros(len(equations))
    for row, (coefficients, constant) in enumerate(equations):
        for name, coefficient in coefficients.items():
            matrix[row, names.index(name)] = coefficient
        constants[row] = constant

    rank = np.linalg.matrix_rank(matrix)
    if rank < len(names):
        raise NoSolution(
            f"System of {len(equations)} equations does not determine {len(names)} variables"
        )
    solution, *_ = np.linalg.lstsq(matrix, constants, rcond=None)
    if not np.allclose(matrix @ solution, constants):
        raise NoSolution("System of equations is inconsistent")
    logger.debug("solved %d equations: %s", len(equations), solution)
    return {name: float(value) for name, value in zip(names, solution)}


def parse_equation(text: str) -> Equation:
    """Parse "lhs = rhs" and formulate it."""
    if text.count("=") != 1:
        raise CalcSyntaxError(f"An equation needs exactly one '=': {text!r}")
    left, right = text.split("=")
    return formulate_equation(parse_expression(left), parse_expression(right))


def solve(texts: Iterable[str]) -> dict[str, float]:
    """Solve equations given as source text, e.g. ["2*x + 3 = 7"]."""
    return solve_equations(parse_equation(text) for text in texts)
