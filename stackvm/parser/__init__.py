"""Program loader - builds the function table from program text."""

from .loader import Loader, load, MAIN_NAME

__all__ = ['Loader', 'load', 'MAIN_NAME']
