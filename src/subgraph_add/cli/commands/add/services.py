# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helper services used by the ``add`` CLI command."""

from __future__ import annotations

from ....config_loader import load_config
from ....pipeline import AddRequest, AddResult, add_data_source
from ...shared import CLILogger
from .models import AddCLIOptions


def perform_add(options: AddCLIOptions, *, logger: CLILogger) -> AddResult:
    """Load configuration and run the add pipeline for ``options``.

    Args:
        options: Normalised CLI options.
        logger: Logger receiving debug details of the resolved configuration.

    Returns:
        AddResult: Outcome reported by :func:`add_data_source`.

    Raises:
        SubgraphAddError: Propagated from configuration loading or any stage.
    """

    config = load_config(options.project_root, overrides=options.config_overrides())
    logger.debug(
        "configuration",
        contract=config.contract_name,
        manifest=options.manifest,
        merge_entities=config.merge_entities,
        dry_run=options.dry_run,
    )
    request = AddRequest(
        address=options.address,
        manifest_path=options.manifest,
        abi_path=options.abi,
        config=config,
        dry_run=options.dry_run,
        use_emoji=options.emoji,
    )
    return add_data_source(request)


__all__ = ["perform_add"]
