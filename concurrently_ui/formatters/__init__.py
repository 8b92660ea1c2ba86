"""Formatters package for console output, log markers and status glyphs.

Usage:
    output = OutputFormatter(no_color=False)
    output.print(f"{output.symbols.Check} Task completed!")
"""

from .colors import ColorFormatter, Colors
from .output import OutputFormatter
from .symbols import Symbol, Symbols, SymbolsFormatter

__all__ = [
    "ColorFormatter",
    "Colors",
    "OutputFormatter",
    "Symbol",
    "Symbols",
    "SymbolsFormatter",
]
