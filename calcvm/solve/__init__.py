from calcvm.solve.linear import (
    extract_coefficients,
    find_vars,
    formulate_equation,
    parse_equation,
    solve,
    solve_equations,
)

__all__ = [
    "extract_coefficients",
    "find_vars",
    "formulate_equation",
    "parse_equation",
    "solve",
    "solve_equations",
]
