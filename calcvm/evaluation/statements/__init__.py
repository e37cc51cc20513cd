"""Registry of statement handlers for the calcvm evaluator.

Maps AST statement node types to the handler implementing them. Every handler
takes (node, runtime, evaluate_fn, execute_block_fn) and returns a Signal.
"""

from calcvm import ast
from calcvm.evaluation.statements.declaration_statement import (
    variable_declaration_statement,
    function_declaration_statement,
)
from calcvm.evaluation.statements.assignment_statement import assignment_statement
from calcvm.evaluation.statements.if_statement import if_statement
from calcvm.evaluation.statements.while_statement import (
    while_statement,
    break_statement,
    continue_statement,
)
from calcvm.evaluation.statements.return_statement import return_statement
from calcvm.evaluation.statements.output_statement import output_statement

STATEMENTS = {
    ast.VariableDeclaration: variable_declaration_statement,
    ast.FunctionDeclaration: function_declaration_statement,
    ast.Assignment: assignment_statement,
    ast.IfStatement: if_statement,
    ast.WhileStatement: while_statement,
    ast.Break: break_statement,
    ast.Continue: continue_statement,
    ast.Return: return_statement,
    ast.Output: output_statement,
}
