# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Console reporting shared by CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

import typer
from rich.text import Text

from ..errors import SubgraphAddError
from ..logging import fail, get_console, info, ok, warn
from ..manifest import render_node
from ..pipeline import AddResult, CodegenStatus


@dataclass(slots=True)
class CLILogger:
    """Report pipeline progress and outcomes honouring ``--emoji`` and ``--debug``."""

    use_emoji: bool
    debug_enabled: bool = False

    def fail(self, message: str) -> None:
        fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        ok(message, use_emoji=self.use_emoji)

    def info(self, message: str) -> None:
        info(message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        typer.echo(message)

    def debug(self, event: str, **fields: object) -> None:
        """Print ``event`` followed by highlighted ``key=value`` fields under ``--debug``."""

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        text.append(event, style="dim")
        for key, value in fields.items():
            text.append(f" {key}", style="bold magenta")
            text.append("=", style="dim")
            text.append(str(value), style="bold green")
        get_console(color=True, emoji=self.use_emoji).print(text)

    def abort(self, error: SubgraphAddError) -> typer.Exit:
        """Report ``error`` and return the exit carrying its status."""

        self.fail(str(error))
        return typer.Exit(code=error.exit_code)

    def report(self, result: AddResult, *, dry_run: bool) -> None:
        """Summarise collision handling and codegen for ``result``.

        A dry run also prints the data source that would have been appended.
        """

        collisions = result.collisions
        self.debug(
            "resolved",
            contract=result.contract_name,
            network=result.network,
            only_collisions=collisions.only_collisions,
            merged_all=result.merged_all,
        )
        for original, renamed in collisions.renamed_events:
            self.warn(f"Event {original} collides with an existing entity; renamed to {renamed}")
        if collisions.collision_entities:
            self.warn(f"Merged events into existing entities: {', '.join(collisions.collision_entities)}")
        if result.merged_all:
            self.warn(f"All events of {result.contract_name} were merged; reusing the first data source's mapping")

        if dry_run:
            self.warn(f"DRY RUN: would add data source {result.contract_name} to {result.manifest_path}")
            self.echo(render_node([result.data_source]).rstrip("\n"))
            return
        if result.codegen is CodegenStatus.FAILED:
            self.warn("Data source added, but codegen failed; run it manually")
        elif result.codegen is CodegenStatus.SKIPPED:
            self.info("Codegen skipped")


def build_cli_logger(*, emoji: bool, debug: bool = False) -> CLILogger:
    return CLILogger(use_emoji=emoji, debug_enabled=debug)


__all__: Final = [
    "CLILogger",
    "build_cli_logger",
]
