"""Symbol definitions with unicode/ASCII fallbacks.

Provides a clean API for accessing glyphs that automatically fall back
to ASCII when the terminal encoding cannot display them or colors are disabled.

Usage:
    symbols = SymbolsFormatter()
    print(symbols.Check)  # Returns "✓" or "+"
    print(symbols.spinner_frames)  # Braille frames or "|/-\\"
"""

import platform
import sys
from dataclasses import dataclass
from functools import cached_property


@dataclass(frozen=True)
class Symbol:
    """A symbol with unicode and ASCII fallback."""

    unicode: str
    ascii: str


class Symbols:
    """Symbol definitions as class attributes."""

    # Status indicators
    Check = Symbol("✓", "+")
    Cross = Symbol("✗", "x")
    Play = Symbol("▶", ">")
    Pending = Symbol("⟳", "~")

    # Layout
    Selection = Symbol("▶", ">")
    Separator = Symbol("│", "|")

    # Spinner animation, one frame per tick
    SpinnerFrames = (
        Symbol("⠋", "|"),
        Symbol("⠙", "/"),
        Symbol("⠹", "-"),
        Symbol("⠸", "\\"),
        Symbol("⠼", "|"),
        Symbol("⠴", "/"),
        Symbol("⠦", "-"),
        Symbol("⠧", "\\"),
        Symbol("⠇", "|"),
        Symbol("⠏", "/"),
    )


class SymbolsFormatter:
    """Provides symbols with automatic unicode/ASCII fallback based on terminal support.

    Unicode is disabled when no_color=True or when the terminal doesn't support it.
    """

    def __init__(self, no_color: bool = False):
        """Initialize the symbols formatter.

        Args:
            no_color: If True, always use ASCII symbols instead of unicode
        """
        self._no_color = no_color

    @cached_property
    def supports_unicode(self) -> bool:
        """Detect if terminal supports unicode glyph display."""
        if self._no_color:
            return False

        if platform.system() == "Windows":
            return False

        if not hasattr(sys.stdout, "encoding") or sys.stdout.encoding is None:
            return False

        encoding = sys.stdout.encoding.lower()
        unicode_encodings = ["utf-8", "utf8", "utf-16", "utf16"]

        return any(enc in encoding for enc in unicode_encodings)

    def _resolve(self, symbol: Symbol) -> str:
        """Resolve a symbol to unicode or ASCII based on support."""
        return symbol.unicode if self.supports_unicode else symbol.ascii

    @property
    def Check(self) -> str:
        return self._resolve(Symbols.Check)

    @property
    def Cross(self) -> str:
        return self._resolve(Symbols.Cross)

    @property
    def Play(self) -> str:
        return self._resolve(Symbols.Play)

    @property
    def Pending(self) -> str:
        return self._resolve(Symbols.Pending)

    @property
    def Selection(self) -> str:
        return self._resolve(Symbols.Selection)

    @property
    def Separator(self) -> str:
        return self._resolve(Symbols.Separator)

    @cached_property
    def spinner_frames(self) -> tuple[str, ...]:
        """Resolved spinner frames in animation order."""
        return tuple(self._resolve(frame) for frame in Symbols.SpinnerFrames)
