"""Views for the task supervisor: interactive full-screen and plain streaming."""

from .adapter import StatusGlyph, UIAdapter
from .interactive import InteractiveUI, ScrollState
from .raw import RawUI

__all__ = [
    "InteractiveUI",
    "RawUI",
    "ScrollState",
    "StatusGlyph",
    "UIAdapter",
]
