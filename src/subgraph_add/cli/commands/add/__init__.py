# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``add`` command package."""

from __future__ import annotations

import typer

from .command import main

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the ``add`` command on the Typer application.

    Args:
        app: Typer application receiving the command.
    """

    app.command(name="add", help="Add a contract as a new data source.")(main)
