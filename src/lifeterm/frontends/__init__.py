"""Frontend interfaces for the terminal simulator."""

from .terminal import TerminalRenderer, RenderError
from .cli import TerminalGameOfLife

__all__ = ["TerminalRenderer", "RenderError", "TerminalGameOfLife"]
