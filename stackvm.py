#!/usr/bin/env python3
"""
Stack VM entry point.

Usage: python stackvm.py program.txt [--trace] [--max-depth N]
"""

from stackvm.runner import main

if __name__ == '__main__':
    main()
