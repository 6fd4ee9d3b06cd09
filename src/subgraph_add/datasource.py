# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Synthesize the manifest node describing a newly added contract."""

from __future__ import annotations

import copy
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final

from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.scalarstring import DoubleQuotedScalarString

from .abi import ABIDescriptor, ABIEntry
from .errors import ManifestError

DEFAULT_KIND: Final[str] = "ethereum/contract"
DEFAULT_API_VERSION: Final[str] = "0.0.7"
DEFAULT_LANGUAGE: Final[str] = "wasm/assemblyscript"
TUPLE_TYPE: Final[str] = "tuple"

_KEBAB_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_WORD = re.compile(r"[^A-Za-z0-9]+")


@dataclass(frozen=True, slots=True)
class MappingDefaults:
    """Values a new data source inherits from the manifest it joins."""

    kind: str = DEFAULT_KIND
    api_version: str = DEFAULT_API_VERSION
    language: str = DEFAULT_LANGUAGE

    @property
    def protocol(self) -> str:
        return self.kind.split("/", 1)[0]

    @classmethod
    def from_node(cls, node: Mapping[str, Any] | None) -> MappingDefaults:
        """Return defaults taken from an existing data source or template."""

        if not node:
            return cls()
        mapping = node.get("mapping") if isinstance(node.get("mapping"), Mapping) else {}
        return cls(
            kind=str(node.get("kind") or DEFAULT_KIND),
            api_version=str(mapping.get("apiVersion") or DEFAULT_API_VERSION),
            language=str(mapping.get("language") or DEFAULT_LANGUAGE),
        )


def kebab_case(name: str) -> str:
    """Return ``name`` as lower-case words joined by hyphens (``MyToken`` -> ``my-token``)."""

    spaced = _KEBAB_BOUNDARY.sub("-", name)
    return _NON_WORD.sub("-", spaced).strip("-").lower()


def abi_file(contract_name: str) -> str:
    return f"./abis/{contract_name}.json"


def mapping_file(contract_name: str) -> str:
    return f"./src/{kebab_case(contract_name)}.ts"


def render_type(parameter: Mapping[str, Any]) -> str:
    """Return the canonical Solidity type of an ABI parameter, expanding tuples."""

    raw_type = str(parameter.get("type", ""))
    if not raw_type.startswith(TUPLE_TYPE):
        return raw_type
    components = parameter.get("components") or ()
    inner = ",".join(render_type(component) for component in components)
    return f"({inner}){raw_type[len(TUPLE_TYPE):]}"


def event_signature(event: ABIEntry) -> str:
    """Return the manifest signature of ``event``, e.g. ``Transfer(indexed address,uint256)``."""

    parts = []
    for parameter in event.get("inputs") or ():
        rendered = render_type(parameter)
        parts.append(f"indexed {rendered}" if parameter.get("indexed") else rendered)
    return f"{event.get('name')}({','.join(parts)})"


def handler_names(event_names: Iterable[str]) -> list[str]:
    """Return ``handle<Event>`` names, suffixing repeated (overloaded) events."""

    seen: dict[str, int] = {}
    names: list[str] = []
    for event_name in event_names:
        count = seen.get(event_name, 0)
        seen[event_name] = count + 1
        suffix = str(count) if count else ""
        names.append(f"handle{event_name}{suffix}")
    return names


def unique_entities(abi: ABIDescriptor) -> list[str]:
    return list(dict.fromkeys(abi.event_names()))


def build_data_source(
    contract_name: str,
    network: str,
    address: str,
    abi: ABIDescriptor,
    *,
    defaults: MappingDefaults | None = None,
) -> CommentedMap:
    """Return a new data-source node for ``contract_name``.

    One event handler is generated per event left in ``abi`` (after collision
    resolution) and each distinct event name becomes an entity.
    """

    settings = defaults or MappingDefaults()
    events = list(abi.events())

    source = CommentedMap()
    source["address"] = DoubleQuotedScalarString(address)
    source["abi"] = contract_name

    abis = CommentedSeq()
    abi_ref = CommentedMap()
    abi_ref["name"] = contract_name
    abi_ref["file"] = abi_file(contract_name)
    abis.append(abi_ref)

    handlers = CommentedSeq()
    for event, handler in zip(events, handler_names(str(event.get("name")) for event in events), strict=True):
        entry = CommentedMap()
        entry["event"] = event_signature(event)
        entry["handler"] = handler
        handlers.append(entry)

    mapping = CommentedMap()
    mapping["kind"] = f"{settings.protocol}/events"
    mapping["apiVersion"] = settings.api_version
    mapping["language"] = settings.language
    mapping["entities"] = CommentedSeq(unique_entities(abi))
    mapping["abis"] = abis
    mapping["eventHandlers"] = handlers
    mapping["file"] = mapping_file(contract_name)

    node = CommentedMap()
    node["kind"] = settings.kind
    node["name"] = contract_name
    node["network"] = network
    node["source"] = source
    node["mapping"] = mapping
    return node


def apply_merge_all(data_source: CommentedMap, existing: Sequence[Mapping[str, Any]]) -> CommentedMap:
    """Reuse the first existing data source's mapping for an all-merged contract.

    ``mapping`` and ``source.abi`` are replaced by copies from ``existing[0]``;
    the new node keeps its own ``source.address``.

    Raises:
        ManifestError: If there is no existing data source to copy from.
    """

    if not existing:
        raise ManifestError("Cannot merge all events: the manifest declares no data source to reuse")
    first = existing[0]
    first_source = first.get("source")
    first_mapping = first.get("mapping")
    if not isinstance(first_source, Mapping) or not isinstance(first_mapping, Mapping):
        raise ManifestError(f"Data source '{first.get('name')}' has no source or mapping to reuse")
    data_source["source"]["abi"] = copy.deepcopy(first_source.get("abi"))
    data_source["mapping"] = copy.deepcopy(first_mapping)
    return data_source


__all__ = [
    "DEFAULT_API_VERSION",
    "DEFAULT_KIND",
    "DEFAULT_LANGUAGE",
    "MappingDefaults",
    "abi_file",
    "apply_merge_all",
    "build_data_source",
    "event_signature",
    "handler_names",
    "kebab_case",
    "mapping_file",
    "render_type",
    "unique_entities",
]
