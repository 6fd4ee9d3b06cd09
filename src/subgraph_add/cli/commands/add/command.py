# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command adding a contract as a new data source."""

from __future__ import annotations

import typer

from ....errors import SubgraphAddError
from ...shared import build_cli_logger
from .models import (
    ABI_OPTION,
    ADDRESS_ARGUMENT,
    CODEGEN_OPTION,
    CONTRACT_NAME_OPTION,
    DEBUG_OPTION,
    DEFAULT_MANIFEST,
    DRY_RUN_OPTION,
    EMOJI_OPTION,
    ETHERSCAN_API_KEY_OPTION,
    MANIFEST_ARGUMENT,
    MERGE_ENTITIES_OPTION,
    NETWORK_FILE_OPTION,
    NETWORK_OPTION,
    AddCLIOptions,
)
from .services import perform_add


def main(
    address: ADDRESS_ARGUMENT = None,
    manifest: MANIFEST_ARGUMENT = DEFAULT_MANIFEST,
    abi: ABI_OPTION = None,
    contract_name: CONTRACT_NAME_OPTION = None,
    merge_entities: MERGE_ENTITIES_OPTION = None,
    network: NETWORK_OPTION = None,
    network_file: NETWORK_FILE_OPTION = None,
    etherscan_api_key: ETHERSCAN_API_KEY_OPTION = None,
    codegen: CODEGEN_OPTION = None,
    dry_run: DRY_RUN_OPTION = False,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Add a contract to the subgraph manifest as a new data source.

    Raises:
        typer.Exit: Always raised to terminate the command with an exit status.
    """

    options = AddCLIOptions.from_cli(
        address=address,
        manifest=manifest,
        abi=abi,
        contract_name=contract_name,
        merge_entities=merge_entities,
        network=network,
        network_file=network_file,
        etherscan_api_key=etherscan_api_key,
        codegen=codegen,
        dry_run=dry_run,
        emoji=emoji,
        debug=debug,
    )
    logger = build_cli_logger(emoji=options.emoji, debug=options.debug)
    try:
        result = perform_add(options, logger=logger)
    except SubgraphAddError as exc:
        raise logger.abort(exc) from exc

    logger.report(result, dry_run=options.dry_run)
    raise typer.Exit(code=0)


__all__ = ["main"]
