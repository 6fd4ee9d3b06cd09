# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reconcile event names of a new contract with entities already in a manifest.

An event *collides* when its name is already an entity name. Colliding events
are either renamed to ``<Contract><Event>`` or, in merge mode, dropped so the
existing entity of the same name handles them. A collision whose prefixed name
is also taken cannot be resolved and aborts the whole operation.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field

from .abi import ABIDescriptor, ABIEntry, is_event
from .errors import EventEntityCollisionError


@dataclass(frozen=True, slots=True)
class CollisionResult:
    """Outcome of collision resolution.

    Attributes:
        abi_data: ABI entries after renaming or dropping colliding events.
        collision_entities: Event names merged into existing entities, each once.
        only_collisions: ``True`` when no event escaped collision (vacuously
            ``True`` for an ABI without events).
        renamed_events: ``(original, prefixed)`` pairs for renamed events.
    """

    abi_data: tuple[ABIEntry, ...]
    collision_entities: tuple[str, ...] = field(default_factory=tuple)
    only_collisions: bool = True
    renamed_events: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def apply_to(self, abi: ABIDescriptor) -> ABIDescriptor:
        """Return ``abi`` carrying the resolved entries."""

        return abi.with_entries(self.abi_data)


def resolve_collisions(
    abi: ABIDescriptor,
    existing_entities: Collection[str],
    contract_name: str,
    *,
    merge_entities: bool,
) -> CollisionResult:
    """Resolve event/entity name collisions for ``abi``.

    The input descriptor is never modified; entries are copied into a new
    sequence so an aborted resolution leaves no trace.

    Args:
        abi: Descriptor fetched or loaded for the new contract.
        existing_entities: Entity names declared by the manifest.
        contract_name: Name of the data source being added.
        merge_entities: Drop colliding events instead of renaming them.

    Returns:
        CollisionResult: Transformed entries plus collision metadata.

    Raises:
        EventEntityCollisionError: If ``contract_name + event`` is already an
            entity, or when renaming would duplicate another event of ``abi``.
    """

    taken = frozenset(existing_entities)
    free_event_names = {
        str(entry.get("name")) for entry in abi.entries if is_event(entry) and entry.get("name") not in taken
    }

    kept: list[ABIEntry] = []
    merged: list[str] = []
    renamed: list[tuple[str, str]] = []
    only_collisions = True

    for entry in abi.entries:
        if not is_event(entry):
            kept.append(dict(entry))
            continue

        name = str(entry.get("name"))
        if name not in taken:
            only_collisions = False
            kept.append(dict(entry))
            continue

        prefixed = f"{contract_name}{name}"
        if prefixed in taken:
            raise EventEntityCollisionError(contract_name, name)

        if merge_entities:
            if name not in merged:
                merged.append(name)
            continue

        if prefixed in free_event_names:
            raise EventEntityCollisionError(contract_name, name)
        kept.append({**entry, "name": prefixed})
        renamed.append((name, prefixed))

    return CollisionResult(
        abi_data=tuple(kept),
        collision_entities=tuple(merged),
        only_collisions=only_collisions,
        renamed_events=tuple(renamed),
    )


__all__ = ["CollisionResult", "resolve_collisions"]
