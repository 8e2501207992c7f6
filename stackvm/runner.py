"""
Main stack VM runner.

Coordinates loading program text and running it through the interpreter.
"""

import sys
from typing import Optional, TextIO

from .errors import VMError
from .listing import format_program
from .parser import load
from .vm import FunctionTable, Interpreter, RuntimeState, DEFAULT_MAX_CALL_DEPTH


class StackVM:
    """Main stack VM class."""

    def __init__(self, verbose: bool = False, trace: bool = False,
                 max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
                 max_steps: Optional[int] = None, output: Optional[TextIO] = None):
        self.verbose = verbose
        self.trace = trace
        self.max_call_depth = max_call_depth
        self.max_steps = max_steps
        self.output = output

    def log(self, message: str):
        """Print log message if verbose mode is enabled."""
        if self.verbose:
            print(f"[stackvm] {message}", file=sys.stderr)

    def load_string(self, source: str, filename: str = "<input>") -> FunctionTable:
        """Load program text into a function table."""
        functions = load(source, filename)
        self.log(f"Loaded {len(functions)} functions, entry is {functions.entry_id}")
        return functions

    def run_string(self, source: str, filename: str = "<input>") -> RuntimeState:
        """
        Load and run program text.

        Args:
            source: Program text
            filename: Name used in load error messages

        Returns:
            Final runtime state

        Raises:
            VMError: on any load or runtime error
        """
        functions = self.load_string(source, filename)
        interpreter = Interpreter(functions, output=self.output,
                                  max_call_depth=self.max_call_depth,
                                  max_steps=self.max_steps, trace=self.trace)
        state = interpreter.run()
        self.log(f"{'Halted' if state.halted else 'Finished'} after {state.steps} steps")
        return state

    def read_file(self, input_path: str) -> str:
        self.log(f"Reading {input_path}...")
        with open(input_path, 'r', encoding='utf-8') as f:
            return f.read()

    def run_file(self, input_path: str) -> bool:
        """
        Run a program file.

        Args:
            input_path: Path to the program text

        Returns:
            True if the run halted or finished normally, False otherwise
        """
        try:
            source = self.read_file(input_path)
            self.run_string(source, input_path)
            return True

        except FileNotFoundError:
            print(f"Error: File not found: {input_path}", file=sys.stderr)
            return False
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error: Cannot read {input_path}: {e}", file=sys.stderr)
            return False
        except VMError as e:
            print(f"Error: {e.kind}: {e}", file=sys.stderr)
            if self.verbose:
                import traceback
                traceback.print_exc()
            return False

    def list_file(self, input_path: str) -> bool:
        """Print the function table of a program file instead of running it."""
        try:
            functions = self.load_string(self.read_file(input_path), input_path)
        except FileNotFoundError:
            print(f"Error: File not found: {input_path}", file=sys.stderr)
            return False
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error: Cannot read {input_path}: {e}", file=sys.stderr)
            return False
        except VMError as e:
            print(f"Error: {e.kind}: {e}", file=sys.stderr)
            return False

        (self.output or sys.stdout).write(format_program(functions))
        return True


def main(argv=None):
    """Command-line interface for the VM."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Stack VM - Run a stack-oriented instruction program'
    )
    parser.add_argument('input', help='Program text file')
    parser.add_argument('--verbose', action='store_true',
                       help='Verbose output')
    parser.add_argument('--trace', action='store_true',
                       help='Log every executed instruction to stderr')
    parser.add_argument('--max-depth', type=int, default=DEFAULT_MAX_CALL_DEPTH,
                       metavar='N',
                       help=f'Maximum call depth (default: {DEFAULT_MAX_CALL_DEPTH})')
    parser.add_argument('--max-steps', type=int, default=None, metavar='N',
                       help='Abort after executing N instructions')
    parser.add_argument('--list', action='store_true',
                       help='Print the loaded function table instead of running')

    args = parser.parse_args(argv)

    vm = StackVM(verbose=args.verbose, trace=args.trace,
                 max_call_depth=args.max_depth, max_steps=args.max_steps)

    if args.list:
        success = vm.list_file(args.input)
    else:
        success = vm.run_file(args.input)

    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
