# Stack VM Test Configuration
# ===========================

"""
Test fixtures and helpers for stack VM tests.

- ExecutionResult: output, final state and error of one run
- run_source(): load and run program text, capturing output
- AssertProgram: fluent API for checking output, final stack and errors
"""

import pytest
import sys
from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import Dict, List, Optional, Type

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from stackvm.errors import VMError
from stackvm.runner import StackVM
from stackvm.vm import RuntimeState


@dataclass
class ExecutionResult:
    """Result of running a program."""
    output: str = ""
    state: Optional[RuntimeState] = None
    error: Optional[VMError] = None

    @property
    def success(self) -> bool:
        return self.error is None


def run_source(source: str, **options) -> ExecutionResult:
    """Run program text, capturing output and any VM error."""
    output = StringIO()
    vm = StackVM(output=output, **options)
    try:
        state = vm.run_string(source)
    except VMError as e:
        return ExecutionResult(output=output.getvalue(), error=e)
    return ExecutionResult(output=output.getvalue(), state=state)


def program(*lines: str) -> str:
    """Join instruction lines into program text."""
    return "\n".join(lines) + "\n"


class AssertProgram:
    """
    Fluent assertions on a program run.

    Example:
        AssertProgram("push 1\\npush 2\\nadd\\ncall 0\\nhalt\\n").outputs("3\\n")
    """

    def __init__(self, source: str, **options):
        self.source = source
        self.options = options

    def run(self) -> ExecutionResult:
        return run_source(self.source, **self.options)

    def outputs(self, expected: str) -> ExecutionResult:
        """Assert the run succeeds and writes exactly the expected text."""
        result = self.run()
        if result.error is not None:
            pytest.fail(f"Program failed: {result.error.kind}: {result.error}")
        assert result.output == expected
        return result

    def leaves_stack(self, expected: List[int]) -> ExecutionResult:
        """Assert the run succeeds and ends with the given operand stack."""
        result = self.run()
        if result.error is not None:
            pytest.fail(f"Program failed: {result.error.kind}: {result.error}")
        assert result.state.stack == expected
        return result

    def leaves_variables(self, expected: Dict[str, int]) -> ExecutionResult:
        """Assert the run succeeds and ends with the given variable store."""
        result = self.run()
        if result.error is not None:
            pytest.fail(f"Program failed: {result.error.kind}: {result.error}")
        assert result.state.variables == expected
        return result

    def raises(self, error_type: Type[VMError], match: Optional[str] = None) -> VMError:
        """Assert the run fails with the given error type."""
        result = self.run()
        if result.error is None:
            pytest.fail(f"Expected {error_type.__name__}, program succeeded "
                        f"with output {result.output!r}")
        assert isinstance(result.error, error_type), \
            f"Expected {error_type.__name__}, got {type(result.error).__name__}: {result.error}"
        if match is not None:
            assert match in str(result.error)
        return result.error


@pytest.fixture
def write_program(tmp_path):
    """Write program text to a temporary file and return its path."""
    def _write(source: str, name: str = "program.txt") -> str:
        path = tmp_path / name
        path.write_text(source, encoding='utf-8')
        return str(path)
    return _write
