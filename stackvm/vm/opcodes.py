"""
Stack VM opcode definitions.

Defines the fixed instruction set, the operand each opcode takes, and the
typed instruction record that program lines are parsed into.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Dict, Optional, Union


INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class OperandKind(Enum):
    """Operand types."""
    NONE = auto()     # no operand
    INTEGER = auto()  # signed 32-bit literal
    TARGET = auto()   # instruction index within the current body
    FUNCTION = auto() # function id
    NAME = auto()     # variable name


class Op(Enum):
    """Opcodes understood by the dispatcher."""
    PUSH = 'push'
    POP = 'pop'
    ADD = 'add'
    SUB = 'sub'
    MUL = 'mul'
    SET = 'set'
    GET = 'get'
    JUMP = 'jump'
    JUMPIF = 'jumpif'
    CALL = 'call'
    RET = 'ret'
    HALT = 'halt'
    PRINT = 'print'


@dataclass(frozen=True)
class Opcode:
    """Represents an opcode and the operand it expects."""
    op: Op
    operand: OperandKind = OperandKind.NONE

    @property
    def name(self) -> str:
        return self.op.value

    def __repr__(self):
        return f"Opcode({self.name}, {self.operand.name})"


class OpcodeTable:
    """Stack VM opcode table."""

    OPCODES: Dict[str, Opcode] = {
        # Stack and arithmetic
        'push': Opcode(Op.PUSH, OperandKind.INTEGER),
        'pop': Opcode(Op.POP),
        'add': Opcode(Op.ADD),
        'sub': Opcode(Op.SUB),
        'mul': Opcode(Op.MUL),

        # Variables
        'set': Opcode(Op.SET, OperandKind.NAME),
        'get': Opcode(Op.GET, OperandKind.NAME),

        # Control flow
        'jump': Opcode(Op.JUMP, OperandKind.TARGET),
        'jumpif': Opcode(Op.JUMPIF, OperandKind.TARGET),
        'call': Opcode(Op.CALL, OperandKind.FUNCTION),
        'ret': Opcode(Op.RET),
        'halt': Opcode(Op.HALT),

        # Shorthand for `call 0`
        'print': Opcode(Op.PRINT),
    }

    @classmethod
    def get(cls, name: str) -> Optional[Opcode]:
        """Get opcode by keyword, or None if the keyword is unknown."""
        return cls.OPCODES.get(name)


@dataclass(frozen=True)
class Instruction:
    """A single parsed program line."""
    opcode: Opcode
    operand: Union[int, str, None] = None
    line: Optional[int] = None  # 1-based source line

    @property
    def op(self) -> Op:
        return self.opcode.op

    def __str__(self):
        if self.operand is None:
            return self.opcode.name
        return f"{self.opcode.name} {self.operand}"


def fits_int32(value: int) -> bool:
    """Check that value is representable as a signed 32-bit integer."""
    return INT32_MIN <= value <= INT32_MAX
