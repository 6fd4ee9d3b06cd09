# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""ABI descriptors and the local ABI file source."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Final

from .errors import AbiLoadError

ABIEntry = dict[str, Any]

EVENT_TYPE: Final[str] = "event"
ARTIFACT_ABI_KEY: Final[str] = "abi"


@dataclass(slots=True)
class ABIDescriptor:
    """Contract interface description with entries kept in file order."""

    contract_name: str
    entries: list[ABIEntry] = field(default_factory=list)

    def events(self) -> Iterator[ABIEntry]:
        """Yield the entries whose ``type`` is ``event``."""

        return (entry for entry in self.entries if is_event(entry))

    def event_names(self) -> list[str]:
        return [str(entry.get("name", "")) for entry in self.events()]

    def with_entries(self, entries: Sequence[ABIEntry]) -> ABIDescriptor:
        """Return a copy of the descriptor holding ``entries``."""

        return replace(self, entries=list(entries))

    def to_json(self) -> str:
        return json.dumps(self.entries, indent=2) + "\n"


def is_event(entry: Mapping[str, Any]) -> bool:
    return entry.get("type") == EVENT_TYPE


def parse_abi(contract_name: str, payload: Any, *, source: str) -> ABIDescriptor:
    """Build a descriptor from decoded JSON.

    ``payload`` is either the entry list itself or a compiler artifact
    carrying it under ``abi``.

    Raises:
        AbiLoadError: If the payload has neither shape.
    """

    if isinstance(payload, Mapping) and ARTIFACT_ABI_KEY in payload:
        payload = payload[ARTIFACT_ABI_KEY]
    if not isinstance(payload, list) or not all(isinstance(entry, Mapping) for entry in payload):
        raise AbiLoadError(f"{source}: ABI must be a list of entries or an artifact with an 'abi' list")
    return ABIDescriptor(contract_name=contract_name, entries=[dict(entry) for entry in payload])


def load_abi(contract_name: str, path: Path) -> ABIDescriptor:
    """Load the ABI for ``contract_name`` from the JSON file at ``path``.

    Raises:
        AbiLoadError: If the file is missing, unreadable or malformed.
    """

    if not path.exists():
        raise AbiLoadError(f"ABI file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as stream:
            payload = json.load(stream)
    except json.JSONDecodeError as exc:
        raise AbiLoadError(f"{path}: failed to parse ABI JSON") from exc
    except OSError as exc:
        raise AbiLoadError(f"Failed to read ABI file {path}: {exc}") from exc
    return parse_abi(contract_name, payload, source=str(path))


__all__ = [
    "ABIDescriptor",
    "ABIEntry",
    "EVENT_TYPE",
    "is_event",
    "load_abi",
    "parse_abi",
]
