"""Boxed section banners printed before each packaging step."""

from __future__ import annotations

from relpack.output.console import ConsoleProtocol, Style

__all__ = ["BANNER_WIDTH", "banner_lines", "print_banner"]

BANNER_WIDTH = 65


def banner_lines(title: str) -> list[str]:
    """Three lines: a rule of '#', the padded title, another rule.

    Titles longer than the box are not truncated; the box just grows.
    """
    rule = "#" * BANNER_WIDTH
    return [rule, f"# {title.ljust(BANNER_WIDTH - 4)} #", rule]


def print_banner(console: ConsoleProtocol, title: str) -> None:
    for line in banner_lines(title):
        console.print(line, Style.HEADER)
