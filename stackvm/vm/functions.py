"""
Function table: maps function ids to native or source functions.

Id 0 is always the built-in print. The table is built once per load and is
never modified afterwards.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterator, Tuple, Union

from .opcodes import Instruction
from ..errors import StackUnderflowError, UnknownFunctionError


PRINT_ID = 0
ENTRY_ID = 1


@dataclass(frozen=True)
class NativeFunction:
    """A host operation exposed through the call mechanism."""
    name: str
    operation: Callable  # operation(state) -> None

    kind = 'native'

    def __repr__(self):
        return f"NativeFunction({self.name})"


@dataclass(frozen=True)
class SourceFunction:
    """A user-defined function body."""
    name: str
    body: Tuple[Instruction, ...]

    kind = 'source'

    def __len__(self):
        return len(self.body)

    def __repr__(self):
        return f"SourceFunction({self.name}, {len(self.body)} instructions)"


Function = Union[NativeFunction, SourceFunction]


def builtin_print(state) -> None:
    """Write the top of the stack, without popping it, followed by a newline."""
    if not state.stack:
        raise StackUnderflowError("print on empty stack")
    state.write(f"{state.stack[-1]}\n")


BUILTINS: Dict[int, NativeFunction] = {
    PRINT_ID: NativeFunction('print', builtin_print),
}


class FunctionTable:
    """Immutable id -> function mapping."""

    def __init__(self, functions: Dict[int, Function], entry_id: int = ENTRY_ID):
        if entry_id not in functions:
            raise ValueError(f"entry function {entry_id} not in table")
        self._functions = MappingProxyType(dict(functions))
        self.entry_id = entry_id

    @classmethod
    def build(cls, sources: Dict[int, SourceFunction],
              natives: Dict[int, NativeFunction] = None,
              entry_id: int = ENTRY_ID) -> 'FunctionTable':
        """Combine native and source functions, rejecting id clashes."""
        functions: Dict[int, Function] = dict(BUILTINS if natives is None else natives)
        for function_id, function in sources.items():
            if function_id in functions:
                raise ValueError(f"function id {function_id} already taken by "
                                 f"{functions[function_id].name}")
            functions[function_id] = function
        return cls(functions, entry_id)

    def lookup(self, function_id: int) -> Function:
        """Get the function for an id; fails if the id is absent."""
        try:
            return self._functions[function_id]
        except KeyError:
            raise UnknownFunctionError(f"no function with id {function_id}") from None

    @property
    def entry(self) -> Function:
        return self._functions[self.entry_id]

    def find(self, name: str) -> int:
        """Get the id of a function by name."""
        for function_id, function in self._functions.items():
            if function.name == name:
                return function_id
        raise KeyError(name)

    def __contains__(self, function_id) -> bool:
        return function_id in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._functions))

    def items(self):
        return [(function_id, self._functions[function_id]) for function_id in self]
