"""
Stack VM - Runs programs written in a tiny stack-oriented instruction language.

This package provides the program loader, the function table, and an
interpreter with integer arithmetic, a flat variable store, jumps, and
native/source function calls.
"""

__version__ = "0.1.0"
__author__ = "Stack VM Project"
