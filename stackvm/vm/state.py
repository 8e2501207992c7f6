"""
Runtime state for one program run.

Holds the operand stack, the flat variable store, the frame stack (whose
function ids form the call history) and the output sink.
"""

import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, TextIO

from .functions import FunctionTable
from .opcodes import fits_int32
from ..errors import (
    StackUnderflowError, UnboundVariableError, ArithmeticOverflowError,
)


@dataclass
class Frame:
    """Execution context of one active source call."""
    function_id: int
    pc: int = 0


class RuntimeState:
    """Mutable state shared by every frame of a run."""

    def __init__(self, functions: FunctionTable, output: Optional[TextIO] = None):
        self.functions = functions
        self.output = output if output is not None else sys.stdout
        self.stack: List[int] = []
        self.variables: Dict[str, int] = {}
        self.frames: List[Frame] = []
        self.halted = False
        self.steps = 0

    # ====== Stack ======
    def push(self, value: int):
        if not fits_int32(value):
            raise ArithmeticOverflowError(f"result {value} does not fit in 32 bits")
        self.stack.append(value)

    def pop(self) -> int:
        if not self.stack:
            raise StackUnderflowError("pop on empty stack")
        return self.stack.pop()

    # ====== Variables ======
    def set_variable(self, name: str, value: int):
        self.variables[name] = value

    def get_variable(self, name: str) -> int:
        try:
            return self.variables[name]
        except KeyError:
            raise UnboundVariableError(f"variable '{name}' is not set") from None

    # ====== Call history ======
    @property
    def call_history(self) -> List[int]:
        """Function ids of the active call chain, outermost first."""
        return [frame.function_id for frame in self.frames]

    @property
    def depth(self) -> int:
        return len(self.frames)

    @property
    def current(self) -> Optional[Frame]:
        return self.frames[-1] if self.frames else None

    # ====== Output ======
    def write(self, text: str):
        self.output.write(text)
        self.output.flush()
