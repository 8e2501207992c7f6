"""
Function table listing.

Renders a loaded program as text, one block per function id.
"""

from typing import List

from .vm.functions import FunctionTable, SourceFunction


def format_program(functions: FunctionTable) -> str:
    """Render every function in id order with indexed instructions."""
    lines: List[str] = []
    for function_id, function in functions.items():
        marker = " (entry)" if function_id == functions.entry_id else ""
        lines.append(f"[{function_id}] {function.name} ({function.kind}){marker}")
        if isinstance(function, SourceFunction):
            for index, instruction in enumerate(function.body):
                lines.append(f"  {index:4d}  {instruction}")
    return "\n".join(lines) + "\n"
