"""
Tests for stack and arithmetic instructions.

- push / pop
- add, sub, mul and their operand order
- built-in print (call 0 and the print shorthand)
- 32-bit overflow
"""

import pytest
from .conftest import AssertProgram, program
from stackvm.errors import StackUnderflowError, ArithmeticOverflowError


PAIRS = [(1, 2), (0, 0), (-5, 3), (7, -7), (100, 42), (123456, -654)]


class TestConcreteScenario:

    def test_add_and_print(self):
        """push 1, push 2, add, print, halt writes 3."""
        AssertProgram("push 1\npush 2\nadd\ncall 0\nhalt\n").outputs("3\n")


class TestArithmetic:
    """Binary operations pop x (top) then y and push x op y."""

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_add(self, a, b):
        AssertProgram(program(f"push {a}", f"push {b}", "add", "call 0", "halt")) \
            .outputs(f"{a + b}\n")

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_sub_is_top_minus_second(self, a, b):
        AssertProgram(program(f"push {a}", f"push {b}", "sub", "call 0", "halt")) \
            .outputs(f"{b - a}\n")

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_mul(self, a, b):
        AssertProgram(program(f"push {a}", f"push {b}", "mul", "call 0", "halt")) \
            .outputs(f"{a * b}\n")

    def test_result_replaces_operands(self):
        AssertProgram(program("push 9", "push 4", "push 3", "sub")).leaves_stack([9, -1])

    @pytest.mark.parametrize("op", ["add", "sub", "mul"])
    def test_binary_op_needs_two_values(self, op):
        AssertProgram(program("push 1", op)).raises(StackUnderflowError)

    @pytest.mark.parametrize("op", ["add", "sub", "mul"])
    def test_binary_op_on_empty_stack(self, op):
        AssertProgram(op).raises(StackUnderflowError)


class TestOverflow:

    def test_add_overflow(self):
        AssertProgram(program("push 2147483647", "push 1", "add")) \
            .raises(ArithmeticOverflowError)

    def test_sub_underflow(self):
        AssertProgram(program("push 1", "push -2147483648", "sub")) \
            .raises(ArithmeticOverflowError)

    def test_mul_overflow(self):
        AssertProgram(program("push 65536", "push 65536", "mul")) \
            .raises(ArithmeticOverflowError)

    def test_edge_values_fit(self):
        AssertProgram(program("push 2147483646", "push 1", "add")).leaves_stack([2147483647])


class TestStack:

    def test_push_order(self):
        AssertProgram(program("push 1", "push 2", "push 3")).leaves_stack([1, 2, 3])

    def test_pop_discards_top(self):
        AssertProgram(program("push 1", "push 2", "pop")).leaves_stack([1])

    def test_pop_on_empty_stack(self):
        AssertProgram("pop").raises(StackUnderflowError)


class TestPrint:

    def test_print_does_not_pop(self):
        result = AssertProgram(program("push 8", "call 0", "call 0")).outputs("8\n8\n")
        assert result.state.stack == [8]

    def test_print_shorthand(self):
        AssertProgram(program("push -3", "print")).outputs("-3\n")

    def test_print_only_writes_requested_lines(self):
        AssertProgram(program("push 1", "push 2", "call 0", "halt")).outputs("2\n")

    def test_print_on_empty_stack(self):
        AssertProgram("call 0").raises(StackUnderflowError)

    def test_output_written_before_failure_is_kept(self):
        result = AssertProgram(program("push 4", "call 0", "pop", "pop")).run()
        assert isinstance(result.error, StackUnderflowError)
        assert result.output == "4\n"
