"""
Stack VM interpreter: instruction dispatcher and call controller.

Calls are driven by an explicit frame stack rather than host recursion, so
the call depth is bounded by max_call_depth instead of Python's own stack.
"""

import sys
from typing import Optional, TextIO

from .functions import FunctionTable, NativeFunction, PRINT_ID
from .opcodes import Instruction, Op
from .state import Frame, RuntimeState
from ..errors import (
    RuntimeFault, UnbalancedReturnError, CallDepthError, StepLimitError,
)


DEFAULT_MAX_CALL_DEPTH = 1000


class Interpreter:
    """Executes a function table against a runtime state."""

    def __init__(self, functions: FunctionTable, output: Optional[TextIO] = None,
                 max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
                 max_steps: Optional[int] = None, trace: bool = False):
        self.functions = functions
        self.output = output
        self.max_call_depth = max_call_depth
        self.max_steps = max_steps
        self.trace = trace

    def log(self, message: str):
        """Print trace message if tracing is enabled."""
        if self.trace:
            print(f"[trace] {message}", file=sys.stderr)

    def run(self, entry_id: Optional[int] = None) -> RuntimeState:
        """
        Run a program from its entry function.

        Args:
            entry_id: Function to start from (defaults to the table's entry)

        Returns:
            The final runtime state (stack, variables, halted flag)

        Raises:
            RuntimeFault: on any fatal runtime error
        """
        state = RuntimeState(self.functions, self.output)
        self.call(state, self.functions.entry_id if entry_id is None else entry_id)
        return state

    # ====== Call controller ======
    def call(self, state: RuntimeState, function_id: int):
        """Call a function and return once its frame has returned or the run halted."""
        base = state.depth
        self.enter(state, function_id)
        self._run_frames(state, base)

    def enter(self, state: RuntimeState, function_id: int):
        """
        Start a call.

        Native functions run to completion here. Source functions get a new
        frame at pc 0 which the frame loop then executes.
        """
        function = state.functions.lookup(function_id)
        if state.depth >= self.max_call_depth:
            raise CallDepthError(f"call depth limit of {self.max_call_depth} exceeded")

        frame = Frame(function_id)
        state.frames.append(frame)
        if isinstance(function, NativeFunction):
            try:
                function.operation(state)
            finally:
                state.frames.pop()

    def _run_frames(self, state: RuntimeState, base: int):
        while state.depth > base and not state.halted:
            frame = state.frames[-1]
            body = state.functions.lookup(frame.function_id).body
            if frame.pc >= len(body):
                # Falling off the end is an implicit ret
                state.frames.pop()
                continue

            instruction = body[frame.pc]
            frame.pc += 1
            try:
                self._count_step(state)
                self.execute(state, frame, instruction)
            except RuntimeFault as e:
                raise e.locate(frame.function_id, frame.pc - 1)

    def _count_step(self, state: RuntimeState):
        state.steps += 1
        if self.max_steps is not None and state.steps > self.max_steps:
            raise StepLimitError(f"step limit of {self.max_steps} exceeded")

    # ====== Dispatcher ======
    def execute(self, state: RuntimeState, frame: Frame, instruction: Instruction):
        """
        Execute one instruction in the given frame.

        frame.pc must already point past the instruction; jumps overwrite it.
        Calling a source function only pushes its frame; the frame loop
        runs the body.
        """
        if self.trace:
            self.log(f"fn {frame.function_id} pc {frame.pc - 1}: {instruction}  stack={state.stack}")
        op = instruction.op

        if op is Op.PUSH:
            state.push(instruction.operand)
        elif op is Op.POP:
            state.pop()
        elif op is Op.ADD:
            x = state.pop()
            y = state.pop()
            state.push(x + y)
        elif op is Op.SUB:
            x = state.pop()
            y = state.pop()
            state.push(x - y)
        elif op is Op.MUL:
            x = state.pop()
            y = state.pop()
            state.push(x * y)
        elif op is Op.SET:
            state.set_variable(instruction.operand, state.pop())
        elif op is Op.GET:
            state.push(state.get_variable(instruction.operand))
        elif op is Op.JUMP:
            frame.pc = instruction.operand
        elif op is Op.JUMPIF:
            if state.pop() == 0:
                frame.pc = instruction.operand
        elif op is Op.CALL:
            self.enter(state, instruction.operand)
        elif op is Op.PRINT:
            self.enter(state, PRINT_ID)
        elif op is Op.RET:
            if not state.frames:
                raise UnbalancedReturnError("ret outside of any call")
            state.frames.pop()
        elif op is Op.HALT:
            state.halted = True
            state.frames.clear()
        else:
            raise RuntimeFault(f"unhandled opcode {instruction.opcode.name}")
