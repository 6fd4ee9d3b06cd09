# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the data-source scaffolder."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONTRACT_NAME: Final[str] = "Contract"
# Names become AssemblyScript class, import and handler identifiers.
CONTRACT_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
DEFAULT_MANIFEST: Final[Path] = Path("subgraph.yaml")
DEFAULT_NETWORK_FILE: Final[Path] = Path("networks.json")


class ManifestIndent(BaseModel):
    """Indentation override used when serialising the manifest back to YAML.

    When no override is configured the layout measured in the manifest is kept.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    mapping: int = Field(default=2, ge=1)
    sequence: int = Field(default=4, ge=1)
    offset: int = Field(default=2, ge=0)


class AddConfig(BaseModel):
    """Settings controlling how a new data source is added to a manifest."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    contract_name: str = DEFAULT_CONTRACT_NAME
    merge_entities: bool = False
    network: str | None = None
    network_file: Path = DEFAULT_NETWORK_FILE
    etherscan_api_key: str | None = None
    codegen: bool = True
    manifest_indent: ManifestIndent | None = None

    @field_validator("contract_name")
    @classmethod
    def _require_identifier(cls, value: str) -> str:
        stripped = value.strip()
        if not CONTRACT_NAME_PATTERN.fullmatch(stripped):
            raise ValueError(
                f"contract_name {value!r} must start with a letter or underscore and contain only letters, digits "
                "and underscores"
            )
        return stripped

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible mapping of the configuration."""

        return self.model_dump(mode="json")


__all__ = [
    "AddConfig",
    "CONTRACT_NAME_PATTERN",
    "DEFAULT_CONTRACT_NAME",
    "DEFAULT_MANIFEST",
    "DEFAULT_NETWORK_FILE",
    "ManifestIndent",
]
