# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from subgraph_add.abi import ABIDescriptor
from subgraph_add.manifest import ManifestTree

GRAVITY_MANIFEST = """\
specVersion: 0.0.5
description: Gravatar for Ethereum
repository: https://github.com/graphprotocol/example-subgraph
schema:
  file: ./schema.graphql
dataSources:
  - kind: ethereum/contract
    name: Gravity
    network: mainnet # deployed at block 6175244
    source:
      address: "0x2E645469f354BB4F5c8a05B3b30A929361cf77eC"
      abi: Gravity
      startBlock: 6175244
    mapping:
      kind: ethereum/events
      apiVersion: 0.0.6
      language: wasm/assemblyscript
      entities:
        - Transfer
        - Gravatar
      abis:
        - name: Gravity
          file: ./abis/Gravity.json
      eventHandlers:
        - event: Transfer(indexed address,indexed address,uint256)
          handler: handleTransfer
        - event: NewGravatar(uint256,address,string,string)
          handler: handleNewGravatar
      file: ./src/gravity.ts
"""

TEMPLATES_BLOCK = """\
templates:
  - kind: ethereum/contract
    name: Exchange
    network: mainnet
    source:
      abi: Exchange
    mapping:
      kind: ethereum/events
      apiVersion: 0.0.6
      language: wasm/assemblyscript
      entities:
        - Swap
        - Transfer
      abis:
        - name: Exchange
          file: ./abis/Exchange.json
      eventHandlers:
        - event: Swap(indexed address,uint256)
          handler: handleSwap
      file: ./src/exchange.ts
"""

SCHEMA = """\
type Gravatar @entity {
  id: ID!
  owner: Bytes!
}

type Transfer @entity(immutable: true) {
  id: Bytes!
}
"""


TRANSFER_INPUTS = (("from", "address", True), ("to", "address", True), ("value", "uint256", False))
APPROVAL_INPUTS = (("owner", "address", True), ("spender", "address", True), ("value", "uint256", False))


class EntryFactory:
    """Build ABI entries for tests."""

    transfer_inputs = TRANSFER_INPUTS
    approval_inputs = APPROVAL_INPUTS

    @staticmethod
    def event(name: str, inputs: Sequence[tuple[str, str, bool]] = ()) -> dict[str, Any]:
        """Return an event entry with ``(name, type, indexed)`` inputs."""

        return {
            "type": "event",
            "name": name,
            "anonymous": False,
            "inputs": [{"name": arg, "type": kind, "indexed": indexed} for arg, kind, indexed in inputs],
        }

    @staticmethod
    def function(name: str) -> dict[str, Any]:
        return {"type": "function", "name": name, "inputs": [], "outputs": [], "stateMutability": "view"}


@pytest.fixture
def entries() -> EntryFactory:
    return EntryFactory()


@pytest.fixture
def manifest_text() -> str:
    return GRAVITY_MANIFEST


@pytest.fixture
def templates_text() -> str:
    return TEMPLATES_BLOCK


@pytest.fixture
def make_abi() -> Callable[..., ABIDescriptor]:
    """Return a factory building descriptors from entries."""

    def _make(*entries: dict[str, Any], contract_name: str = "Token") -> ABIDescriptor:
        return ABIDescriptor(contract_name=contract_name, entries=[dict(entry) for entry in entries])

    return _make


@pytest.fixture
def token_entries() -> list[dict[str, Any]]:
    factory = EntryFactory()
    return [
        factory.function("balanceOf"),
        factory.event("Transfer", TRANSFER_INPUTS),
        factory.function("totalSupply"),
        factory.event("Approval", APPROVAL_INPUTS),
    ]


@pytest.fixture
def gravity_tree() -> ManifestTree:
    return ManifestTree.from_text(GRAVITY_MANIFEST)


@pytest.fixture
def project(tmp_path: Path, token_entries: list[dict[str, Any]]) -> Path:
    """Create a subgraph project and return the manifest path."""

    manifest = tmp_path / "subgraph.yaml"
    manifest.write_text(GRAVITY_MANIFEST, encoding="utf-8")
    (tmp_path / "schema.graphql").write_text(SCHEMA, encoding="utf-8")
    abi_path = tmp_path / "Token.json"
    abi_path.write_text(json.dumps(token_entries), encoding="utf-8")
    return manifest
