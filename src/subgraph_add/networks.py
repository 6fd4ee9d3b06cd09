# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Maintain the ``networks.json`` address registry next to the manifest."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .errors import SubgraphAddError


def update_networks_file(network: str, contract_name: str, address: str, path: Path) -> dict[str, Any]:
    """Record ``address`` for ``contract_name`` on ``network`` in ``path``.

    A missing file is created. Other networks and contracts are preserved.

    Returns:
        dict[str, Any]: The document written to ``path``.

    Raises:
        SubgraphAddError: If the existing file is not a JSON object or the
            file cannot be written.
    """

    document: dict[str, Any] = {}
    if path.exists():
        try:
            loaded = json.loads(path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as exc:
            raise SubgraphAddError(f"{path}: failed to parse networks JSON") from exc
        if not isinstance(loaded, dict):
            raise SubgraphAddError(f"{path}: networks file must contain a JSON object")
        document = loaded

    network_entry = document.setdefault(network, {})
    if not isinstance(network_entry, dict):
        raise SubgraphAddError(f"{path}: entry for network '{network}' must be an object")
    contract_entry = network_entry.setdefault(contract_name, {})
    if not isinstance(contract_entry, dict):
        raise SubgraphAddError(f"{path}: entry for '{network}.{contract_name}' must be an object")
    contract_entry["address"] = address

    try:
        path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise SubgraphAddError(f"Failed to write networks file {path}: {exc}") from exc
    return document


__all__ = ["update_networks_file"]
