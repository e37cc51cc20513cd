

class CalcError(Exception):
    """ Base class for all calcvm errors"""
    pass


class CalcSyntaxError(CalcError):
    """ Raised when source text cannot be tokenized or parsed"""

    def __init__(self, message: str, position: int | None = None):
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)
        self.position = position


class CalcRuntimeError(CalcError):
    """ Base class for errors raised while evaluating a program"""
    pass


class UndeclaredVariable(CalcRuntimeError):
    """ Raised when a name is used before it is declared"""

    def __init__(self, name: str):
        super().__init__(f"Variable '{name}' is not declared")
        self.name = name


class DuplicateDeclaration(CalcRuntimeError):
    """ Raised when a name is declared twice in the same scope"""

    def __init__(self, name: str):
        super().__init__(f"Variable '{name}' is already declared in this scope")
        self.name = name


class ImmutableAssignment(CalcRuntimeError):
    """ Raised when assigning to a variable declared with `var`"""

    def __init__(self, name: str):
        super().__init__(f"Variable '{name}' is not mutable")
        self.name = name


class TypeMismatch(CalcRuntimeError):
    """ Raised when an operator receives something other than numbers"""


class DivisionByZero(CalcRuntimeError):
    """ Raised on integer division by zero"""

    def __init__(self):
        super().__init__("Division by zero")


class ModuloByZero(CalcRuntimeError):
    """ Raised on integer modulo by zero"""

    def __init__(self):
        super().__init__("Modulo by zero")


class ArityMismatch(CalcRuntimeError):
    """ Raised when the number of arguments passed to a function is incorrect"""

    def __init__(self, name: str, expected: int, got: int):
        super().__init__(
            f"Function '{name}' expects {expected} arguments, but {got} were provided"
        )
        self.name = name
        self.expected = expected
        self.got = got


class NotCallable(CalcRuntimeError):
    """ Raised when calling a name that is not bound to a function"""

    def __init__(self, name: str):
        super().__init__(f"'{name}' is not a function")
        self.name = name


class RegisterOverflow(CalcRuntimeError):
    """ Raised when a call passes more arguments than there are registers"""

    def __init__(self, count: int, available: int):
        super().__init__(
            f"Cannot pass {count} arguments through {available} registers"
        )
        self.count = count
        self.available = available


class OutOfMemory(CalcRuntimeError):
    """ Raised when the arena has no free cell left"""

    def __init__(self, capacity: int):
        super().__init__(f"Memory full: all {capacity} cells are in use")
        self.capacity = capacity


class StackOverflow(CalcRuntimeError):
    """ Raised when calls nest deeper than the configured call depth"""

    def __init__(self, name: str, depth: int):
        super().__init__(f"Call to '{name}' exceeds the maximum call depth of {depth}")
        self.name = name
        self.depth = depth


class InvalidHandle(CalcRuntimeError):
    """ Raised when a handle points at a cell nobody holds any more"""


class SolverError(CalcError):
    """ Base class for equation solver errors"""
    pass


class NoSolution(SolverError):
    """ Raised when a system of linear equations has no unique solution"""


class NonLinearExpression(SolverError):
    """ Raised when an equation contains a term the solver cannot linearise"""
