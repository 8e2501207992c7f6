"""
Error types raised by the loader and the interpreter.

Every error is fatal: the engine raises, and only the command-line front end
turns an error into a non-zero exit status.
"""

from typing import Optional


class VMError(Exception):
    """Base exception for all stack VM errors."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class LoadError(VMError):
    """Program text could not be turned into a function table."""

    kind = "load error"

    def __init__(self, message: str, line: Optional[int] = None,
                 filename: str = "<input>"):
        super().__init__(message)
        self.line = line
        self.filename = filename

    def __str__(self):
        if self.line is not None:
            return f"{self.filename}:{self.line}: {self.message}"
        return f"{self.filename}: {self.message}"


class MalformedOperandError(LoadError):
    """Operand missing, extra, or not of the required type."""
    kind = "malformed operand"


class UnknownOpcodeError(LoadError):
    """Instruction keyword outside the fixed opcode set."""
    kind = "unknown opcode"


class DuplicateFunctionError(LoadError):
    """Two function headers share a name."""
    kind = "duplicate function"


class RuntimeFault(VMError):
    """Error raised while executing an instruction."""

    kind = "runtime error"

    def __init__(self, message: str, function_id: Optional[int] = None,
                 pc: Optional[int] = None):
        super().__init__(message)
        self.function_id = function_id
        self.pc = pc

    def locate(self, function_id: int, pc: int) -> 'RuntimeFault':
        """Attach the frame position, keeping the innermost one."""
        if self.function_id is None:
            self.function_id = function_id
            self.pc = pc
        return self

    def __str__(self):
        if self.function_id is not None:
            return f"{self.message} (fn {self.function_id}, pc {self.pc})"
        return self.message


class StackUnderflowError(RuntimeFault):
    kind = "stack underflow"


class UnboundVariableError(RuntimeFault):
    kind = "unbound variable"


class UnknownFunctionError(RuntimeFault):
    kind = "unknown function"


class UnbalancedReturnError(RuntimeFault):
    kind = "unbalanced return"


class ArithmeticOverflowError(RuntimeFault):
    kind = "arithmetic overflow"


class CallDepthError(RuntimeFault):
    """Call chain grew past the configured maximum depth."""
    kind = "call depth exceeded"


class StepLimitError(RuntimeFault):
    """Run executed more instructions than the configured budget."""
    kind = "step limit exceeded"
