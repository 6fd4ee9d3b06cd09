# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exception hierarchy raised by the data-source integration pipeline."""

from __future__ import annotations

from pathlib import Path


class SubgraphAddError(RuntimeError):
    """Base error for failures that should terminate the command.

    Attributes:
        exit_code: Process exit status the CLI reports for this failure.
    """

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(SubgraphAddError):
    """Raised when configuration input is invalid."""


class PreconditionError(SubgraphAddError):
    """Raised when the command cannot start because an input is unusable."""


class MissingAddressError(PreconditionError):
    """Raised when no contract address was supplied."""

    def __init__(self) -> None:
        super().__init__("No contract address provided")


class ContractNameExistsError(PreconditionError):
    """Raised when the new contract name is already used by a data source or template."""

    def __init__(self, contract_name: str) -> None:
        super().__init__(
            f"Datasource or template with name {contract_name} already exists, please choose a different name"
        )
        self.contract_name = contract_name


class PackageManagerNotFoundError(PreconditionError):
    """Raised when neither Yarn nor NPM is available to run codegen."""

    def __init__(self) -> None:
        super().__init__("Neither Yarn nor NPM were found on your system. Please install one of them.")


class EventEntityCollisionError(SubgraphAddError):
    """Raised when a prefixed event name would collide with an existing entity."""

    def __init__(self, contract_name: str, event_name: str) -> None:
        super().__init__(
            f"Contract name ('{contract_name}') + event name ('{event_name}') entity already exists. "
            "Choose a different contract name."
        )
        self.contract_name = contract_name
        self.event_name = event_name


class AbiLoadError(SubgraphAddError):
    """Raised when a local ABI file cannot be read or has an unknown shape."""


class AbiNotFoundError(AbiLoadError):
    """Raised when the explorer service reports no verified ABI for an address."""

    def __init__(self, network: str, address: str, detail: str | None = None) -> None:
        suffix = f": {detail}" if detail else ""
        super().__init__(f"ABI not found for {address} on network '{network}'{suffix}")
        self.network = network
        self.address = address


class AbiFetchError(AbiLoadError):
    """Raised when the explorer service cannot be reached."""

    def __init__(self, network: str, address: str, detail: str) -> None:
        super().__init__(f"Failed to fetch ABI for {address} on network '{network}': {detail}")
        self.network = network
        self.address = address


class ManifestError(SubgraphAddError):
    """Raised when the manifest cannot be loaded or lacks required structure."""


class ManifestWriteError(ManifestError):
    """Raised when the manifest cannot be written back to disk."""

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"Failed to write manifest {path}: {detail}")
        self.path = path


class CodegenError(SubgraphAddError):
    """Raised when the external codegen step fails."""


__all__ = [
    "AbiFetchError",
    "AbiLoadError",
    "AbiNotFoundError",
    "CodegenError",
    "ConfigError",
    "ContractNameExistsError",
    "EventEntityCollisionError",
    "ManifestError",
    "ManifestWriteError",
    "MissingAddressError",
    "PackageManagerNotFoundError",
    "PreconditionError",
    "SubgraphAddError",
]
