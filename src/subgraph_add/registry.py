# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Collect the entity and data-source names a manifest already declares."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .manifest import DATA_SOURCES_KEY, TEMPLATES_KEY, ManifestTree


@dataclass(frozen=True, slots=True)
class NameRegistry:
    """Names in use across ``dataSources`` and ``templates``.

    Attributes:
        entities: Every ``mapping.entities`` item, duplicates included.
        contract_names: The ``name`` of every data source and template.
    """

    entities: tuple[str, ...]
    contract_names: tuple[str, ...]

    def has_entity(self, name: str) -> bool:
        return name in self.entities

    def has_contract(self, name: str) -> bool:
        return name in self.contract_names


def scan_names(tree: ManifestTree) -> NameRegistry:
    """Return the :class:`NameRegistry` for ``tree`` without modifying it."""

    nodes = [*tree.sequence(DATA_SOURCES_KEY), *tree.sequence(TEMPLATES_KEY)]
    entities: list[str] = []
    contract_names: list[str] = []
    for node in nodes:
        if not isinstance(node, Mapping):
            continue
        name = node.get("name")
        if name is not None:
            contract_names.append(str(name))
        entities.extend(_entities_of(node))
    return NameRegistry(entities=tuple(entities), contract_names=tuple(contract_names))


def _entities_of(node: Mapping[str, Any]) -> Iterable[str]:
    mapping = node.get("mapping")
    if not isinstance(mapping, Mapping):
        return ()
    declared = mapping.get("entities") or ()
    return (str(entity) for entity in declared)


__all__ = ["NameRegistry", "scan_names"]
