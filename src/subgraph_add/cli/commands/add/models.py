# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Option declarations and normalised options for the ``add`` command."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer

from ....config import DEFAULT_MANIFEST

ADDRESS_ARGUMENT = Annotated[
    str | None,
    typer.Argument(help="Address of the contract to add.", show_default=False),
]
MANIFEST_ARGUMENT = Annotated[
    Path,
    typer.Argument(help="Subgraph manifest to update."),
]
ABI_OPTION = Annotated[
    Path | None,
    typer.Option("--abi", help="Path to the contract ABI (default: download from the block explorer)."),
]
CONTRACT_NAME_OPTION = Annotated[
    str | None,
    typer.Option("--contract-name", help="Name of the contract (default: Contract)."),
]
MERGE_ENTITIES_OPTION = Annotated[
    bool | None,
    typer.Option(
        "--merge-entities/--no-merge-entities",
        help="Merge events into existing entities with the same name instead of renaming them.",
        show_default=False,
    ),
]
NETWORK_OPTION = Annotated[
    str | None,
    typer.Option("--network", help="Network of the contract (default: network of the first data source)."),
]
NETWORK_FILE_OPTION = Annotated[
    Path | None,
    typer.Option("--network-file", help="Networks config file path (default: networks.json)."),
]
ETHERSCAN_API_KEY_OPTION = Annotated[
    str | None,
    typer.Option("--etherscan-api-key", help="API key for the block explorer."),
]
CODEGEN_OPTION = Annotated[
    bool | None,
    typer.Option("--codegen/--no-codegen", help="Run the codegen script afterwards.", show_default=False),
]
DRY_RUN_OPTION = Annotated[
    bool,
    typer.Option("--dry-run", help="Show the data source that would be added without writing files."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Print debug details."),
]


@dataclass(slots=True)
class AddCLIOptions:
    """Capture CLI options supplied to the ``add`` command."""

    address: str | None
    manifest: Path
    abi: Path | None
    contract_name: str | None
    merge_entities: bool | None
    network: str | None
    network_file: Path | None
    etherscan_api_key: str | None
    codegen: bool | None
    dry_run: bool
    emoji: bool
    debug: bool

    @classmethod
    def from_cli(
        cls,
        *,
        address: str | None,
        manifest: Path,
        abi: Path | None,
        contract_name: str | None,
        merge_entities: bool | None,
        network: str | None,
        network_file: Path | None,
        etherscan_api_key: str | None,
        codegen: bool | None,
        dry_run: bool,
        emoji: bool,
        debug: bool,
    ) -> AddCLIOptions:
        """Return options with paths resolved against the working directory."""

        cleaned_address = address.strip() if address else None
        return cls(
            address=cleaned_address or None,
            manifest=manifest.resolve(),
            abi=abi.resolve() if abi is not None else None,
            contract_name=contract_name,
            merge_entities=merge_entities,
            network=network,
            network_file=network_file.resolve() if network_file is not None else None,
            etherscan_api_key=etherscan_api_key,
            codegen=codegen,
            dry_run=dry_run,
            emoji=emoji,
            debug=debug,
        )

    @property
    def project_root(self) -> Path:
        return self.manifest.parent

    def config_overrides(self) -> dict[str, Any]:
        """Return the configuration fields set explicitly on the command line."""

        return {
            "contract_name": self.contract_name,
            "merge_entities": self.merge_entities,
            "network": self.network,
            "network_file": self.network_file,
            "etherscan_api_key": self.etherscan_api_key,
            "codegen": self.codegen,
        }


__all__ = [
    "ABI_OPTION",
    "ADDRESS_ARGUMENT",
    "AddCLIOptions",
    "CODEGEN_OPTION",
    "CONTRACT_NAME_OPTION",
    "DEBUG_OPTION",
    "DEFAULT_MANIFEST",
    "DRY_RUN_OPTION",
    "EMOJI_OPTION",
    "ETHERSCAN_API_KEY_OPTION",
    "MANIFEST_ARGUMENT",
    "MERGE_ENTITIES_OPTION",
    "NETWORK_FILE_OPTION",
    "NETWORK_OPTION",
]
