"""Output abstraction layer."""

from .banner import banner_lines, print_banner
from .console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "banner_lines",
    "print_banner",
]
