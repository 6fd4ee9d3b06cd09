# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing status lines for the add pipeline.

Every stage reports through :func:`info`, :func:`ok`, :func:`warn` and
:func:`fail`. Lines go to a Rich console chosen by the emoji and colour
preferences of the invocation.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Final

from rich.console import Console
from rich.text import Text

PREFIXES: Final[dict[str, str]] = {
    "info": "ℹ️ ",
    "ok": "✅ ",
    "warn": "⚠️ ",
    "fail": "❌ ",
}
STYLES: Final[dict[str, str]] = {
    "info": "cyan",
    "ok": "green",
    "warn": "yellow",
    "fail": "red",
}


@lru_cache(maxsize=4)
def get_console(*, color: bool, emoji: bool) -> Console:
    """Return the shared console for one colour/emoji combination.

    The console writes to whatever ``sys.stdout`` is at print time, so output
    captured by a test runner is still collected.
    """

    return Console(no_color=not color, emoji=emoji, highlight=False, soft_wrap=True)


def _print_line(level: str, msg: str, *, use_emoji: bool, use_color: bool | None) -> None:
    prefix = PREFIXES[level] if use_emoji else ""
    color = use_color is not False
    text = Text(f"{prefix}{msg}")
    if color:
        text.stylize(STYLES[level])
    get_console(color=color, emoji=use_emoji).print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Report progress of a pipeline stage."""

    _print_line("info", msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Report a completed write."""

    _print_line("ok", msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Report a recoverable problem, such as a failed codegen run."""

    _print_line("warn", msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Report the error that aborted the pipeline."""

    _print_line("fail", msg, use_emoji=use_emoji, use_color=use_color)


__all__ = ["fail", "get_console", "info", "ok", "warn"]
