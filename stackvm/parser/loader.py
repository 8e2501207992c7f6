"""
Program loader - turns program text into a function table.

Handles:
- Function headers of the form `fn <name>:`
- Instruction lines (opcode plus at most one operand)
- Operand validation (32-bit integers, jump targets, names)
- Function id assignment (0 is the built-in print, 1 the entry function)
"""

import re
from typing import Dict, List, Tuple

from ..errors import (
    MalformedOperandError, UnknownOpcodeError, DuplicateFunctionError,
)
from ..vm.functions import FunctionTable, SourceFunction, ENTRY_ID
from ..vm.opcodes import Instruction, OpcodeTable, OperandKind, fits_int32


MAIN_NAME = "<main>"

HEADER_RE = re.compile(r'^fn\s+([A-Za-z_][A-Za-z0-9_]*)\s*:$')
INTEGER_RE = re.compile(r'^[+-]?[0-9]+$')

# (line number, stripped text)
SourceLine = Tuple[int, str]


class Loader:
    """Splits program text into function bodies and parses their instructions."""

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

    def error(self, exc_type, message: str, line: int):
        """Raise a load error with location information."""
        raise exc_type(message, line=line, filename=self.filename)

    def load(self) -> FunctionTable:
        """
        Build the function table for the program.

        Lines before the first header (if any are non-blank) form an
        implicit entry function with id 1; headed functions are numbered
        after it in order of appearance. Without such a preamble the first
        headed function is the entry.

        Returns:
            FunctionTable with the built-in print at id 0

        Raises:
            LoadError: malformed operand, unknown opcode or duplicate name
        """
        sources: Dict[int, SourceFunction] = {}
        next_id = ENTRY_ID
        for name, lines in self.split_functions():
            sources[next_id] = SourceFunction(
                name, tuple(self.parse_instruction(text, line) for line, text in lines))
            next_id += 1
        return FunctionTable.build(sources)

    def split_functions(self) -> List[Tuple[str, List[SourceLine]]]:
        """Split the source into (name, lines) regions, dropping blank lines."""
        regions: List[Tuple[str, List[SourceLine]]] = []
        preamble: List[SourceLine] = []
        current = preamble
        seen = {}

        for line_num, raw in enumerate(self.source.split('\n'), start=1):
            text = raw.strip()
            if not text:
                continue
            header = HEADER_RE.match(text)
            if header:
                name = header.group(1)
                if name in seen:
                    self.error(DuplicateFunctionError,
                               f"function '{name}' already defined on line {seen[name]}",
                               line_num)
                seen[name] = line_num
                current = []
                regions.append((name, current))
            else:
                current.append((line_num, text))

        if preamble or not regions:
            regions.insert(0, (MAIN_NAME, preamble))
        return regions

    def parse_instruction(self, text: str, line: int) -> Instruction:
        """Parse one stripped, non-blank line into an instruction."""
        tokens = text.split()
        keyword, args = tokens[0], tokens[1:]

        opcode = OpcodeTable.get(keyword)
        if opcode is None:
            self.error(UnknownOpcodeError, f"unknown opcode '{keyword}'", line)

        if opcode.operand is OperandKind.NONE:
            if args:
                self.error(MalformedOperandError,
                           f"'{keyword}' takes no operand, got '{' '.join(args)}'", line)
            return Instruction(opcode, None, line)

        if len(args) != 1:
            what = "missing operand" if not args else f"too many operands: '{' '.join(args)}'"
            self.error(MalformedOperandError, f"'{keyword}': {what}", line)

        return Instruction(opcode, self.parse_operand(keyword, opcode.operand, args[0], line), line)

    def parse_operand(self, keyword: str, kind: OperandKind, token: str, line: int):
        if kind is OperandKind.NAME:
            return token

        if not INTEGER_RE.match(token):
            self.error(MalformedOperandError,
                       f"'{keyword}' expects an integer, got '{token}'", line)
        value = int(token)
        if not fits_int32(value):
            self.error(MalformedOperandError,
                       f"'{keyword}' operand {value} does not fit in 32 bits", line)
        if kind is OperandKind.TARGET and value < 0:
            self.error(MalformedOperandError,
                       f"'{keyword}' target {value} is negative", line)
        return value


def load(source: str, filename: str = "<input>") -> FunctionTable:
    """Load program text into a function table."""
    return Loader(source, filename).load()
