"""Stack VM execution engine: opcodes, function table, runtime state and interpreter."""

from .opcodes import Op, Opcode, OpcodeTable, OperandKind, Instruction
from .functions import (
    FunctionTable, NativeFunction, SourceFunction, BUILTINS, PRINT_ID, ENTRY_ID,
)
from .state import Frame, RuntimeState
from .interpreter import Interpreter, DEFAULT_MAX_CALL_DEPTH

__all__ = [
    'Op', 'Opcode', 'OpcodeTable', 'OperandKind', 'Instruction',
    'FunctionTable', 'NativeFunction', 'SourceFunction', 'BUILTINS',
    'PRINT_ID', 'ENTRY_ID',
    'Frame', 'RuntimeState',
    'Interpreter', 'DEFAULT_MAX_CALL_DEPTH',
]
