# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Add a contract as a new data source to an existing subgraph manifest.

Stages run strictly in order and each one is a barrier: name pre-check, ABI
acquisition, collision resolution, generated-file writes, manifest write,
networks file update and finally codegen. An exception in any stage skips
every later stage; files already written are left in place.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any, Final

from ruamel.yaml.comments import CommentedMap

from .abi import ABIDescriptor, load_abi
from .codegen import detect_package_manager, run_codegen
from .collisions import CollisionResult, resolve_collisions
from .config import AddConfig, DEFAULT_MANIFEST
from .datasource import MappingDefaults, apply_merge_all, build_data_source
from .errors import CodegenError, ContractNameExistsError, ManifestError, MissingAddressError
from .explorer import fetch_abi
from .logging import info, ok, warn
from .manifest import DATA_SOURCES_KEY, SCHEMA_FILE_PATH, TEMPLATES_KEY, ManifestTree, load_manifest
from .mutator import persist_manifest
from .networks import update_networks_file
from .registry import NameRegistry, scan_names
from .scaffold import write_abi, write_mapping, write_schema, write_test_files

DEFAULT_SCHEMA_FILE: Final[str] = "./schema.graphql"

AbiFetcher = Callable[[str, str, str], ABIDescriptor]


class CodegenStatus(StrEnum):
    """How the codegen stage ended."""

    RAN = "ran"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(slots=True)
class AddRequest:
    """Inputs of a single ``add`` invocation."""

    address: str | None
    manifest_path: Path = DEFAULT_MANIFEST
    abi_path: Path | None = None
    config: AddConfig = field(default_factory=AddConfig)
    dry_run: bool = False
    use_emoji: bool = True
    abi_fetcher: AbiFetcher | None = None


@dataclass(slots=True)
class AddResult:
    """Outcome of an ``add`` invocation."""

    contract_name: str
    network: str
    address: str
    data_source: CommentedMap
    collisions: CollisionResult
    merged_all: bool
    manifest_path: Path
    written: list[Path] = field(default_factory=list)
    codegen: CodegenStatus = CodegenStatus.SKIPPED
    codegen_message: str | None = None


def check_contract_name(registry: NameRegistry, contract_name: str) -> None:
    """Reject ``contract_name`` when a data source or template already uses it.

    Raises:
        ContractNameExistsError: If the name is taken.
    """

    if registry.has_contract(contract_name):
        raise ContractNameExistsError(contract_name)


def resolve_network(tree: ManifestTree, override: str | None) -> str:
    """Return ``override`` or the network of the first data source.

    Raises:
        ManifestError: If neither is available.
    """

    network = override or tree.get_in((DATA_SOURCES_KEY, 0, "network"))
    if not network:
        raise ManifestError("Cannot determine the network: the manifest has no data source; pass --network")
    return str(network)


def acquire_abi(request: AddRequest, network: str, address: str) -> ABIDescriptor:
    """Load the ABI from ``request.abi_path`` or fetch it from the explorer."""

    contract_name = request.config.contract_name
    if request.abi_path is not None:
        return load_abi(contract_name, request.abi_path)
    if request.abi_fetcher is not None:
        return request.abi_fetcher(contract_name, network, address)
    info(f"Fetching ABI for {address} on {network}", use_emoji=request.use_emoji)
    return fetch_abi(contract_name, network, address, api_key=request.config.etherscan_api_key)


def _first_node(tree: ManifestTree) -> Mapping[str, Any] | None:
    for key in (DATA_SOURCES_KEY, TEMPLATES_KEY):
        nodes = tree.sequence(key)
        if nodes and isinstance(nodes[0], Mapping):
            return nodes[0]
    return None


def _resolve_relative(root: Path, path: Path | str) -> Path:
    candidate = Path(path)
    return candidate if candidate.is_absolute() else root / candidate


def add_data_source(request: AddRequest) -> AddResult:
    """Run the whole add pipeline for ``request``.

    Returns:
        AddResult: The synthesized data source and what was written.

    Raises:
        SubgraphAddError: For any precondition, collision, acquisition or
            persistence failure. Codegen failures are reported in the result.
    """

    if not request.address:
        raise MissingAddressError()
    address = request.address
    config = request.config
    contract_name = config.contract_name

    tree = load_manifest(request.manifest_path, indent=config.manifest_indent)
    registry = scan_names(tree)
    check_contract_name(registry, contract_name)
    network = resolve_network(tree, config.network)

    abi = acquire_abi(request, network, address)
    collisions = resolve_collisions(abi, registry.entities, contract_name, merge_entities=config.merge_entities)
    resolved_abi = collisions.apply_to(abi)

    data_source = build_data_source(
        contract_name,
        network,
        address,
        resolved_abi,
        defaults=MappingDefaults.from_node(_first_node(tree)),
    )
    merged_all = config.merge_entities and collisions.only_collisions
    if merged_all:
        apply_merge_all(data_source, tree.sequence(DATA_SOURCES_KEY))

    result = AddResult(
        contract_name=contract_name,
        network=network,
        address=address,
        data_source=data_source,
        collisions=collisions,
        merged_all=merged_all,
        manifest_path=request.manifest_path,
    )
    if request.dry_run:
        return result

    root = request.manifest_path.parent
    schema_path = _resolve_relative(root, str(tree.get_in(SCHEMA_FILE_PATH, DEFAULT_SCHEMA_FILE)))
    result.written.append(write_abi(resolved_abi, root))
    result.written.append(write_schema(resolved_abi, schema_path, collisions.collision_entities))
    result.written.append(write_mapping(resolved_abi, root, collisions.collision_entities))
    result.written.append(write_test_files(resolved_abi, root))

    persist_manifest(tree.working_copy(), data_source, request.manifest_path)
    result.written.append(request.manifest_path)
    ok(f"Added data source {contract_name} to {request.manifest_path}", use_emoji=request.use_emoji)

    networks_path = _resolve_relative(root, config.network_file)
    update_networks_file(network, contract_name, address, networks_path)
    result.written.append(networks_path)

    if not config.codegen:
        return result
    manager = detect_package_manager()
    info(f"Running codegen with {manager.value}", use_emoji=request.use_emoji)
    try:
        run_codegen(root, manager)
    except CodegenError as exc:
        warn(str(exc), use_emoji=request.use_emoji)
        result.codegen = CodegenStatus.FAILED
        result.codegen_message = str(exc)
        return result
    result.codegen = CodegenStatus.RAN
    return result


__all__ = [
    "AbiFetcher",
    "AddRequest",
    "AddResult",
    "CodegenStatus",
    "acquire_abi",
    "add_data_source",
    "check_contract_name",
    "resolve_network",
]
