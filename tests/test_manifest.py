# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the round-trip manifest accessor."""

from __future__ import annotations

from pathlib import Path

import pytest
from ruamel.yaml.comments import CommentedMap, CommentedSeq

from subgraph_add.config import ManifestIndent
from subgraph_add.errors import ManifestError, ManifestWriteError
from subgraph_add.manifest import (
    DATA_SOURCES_KEY,
    DOCUMENT_START,
    SCHEMA_FILE_PATH,
    ManifestTree,
    guess_indent,
    load_manifest,
    write_manifest,
)

FLUSH_LEFT_MANIFEST = """\
specVersion: 0.0.5
schema:
  file: ./schema.graphql
dataSources:
- kind: ethereum/contract
  name: Gravity
  network: mainnet
  source:
    address: "0x2E645469f354BB4F5c8a05B3b30A929361cf77eC"
    abi: Gravity
  mapping:
    kind: ethereum/events
    apiVersion: 0.0.6
    language: wasm/assemblyscript
    entities:
    - Gravatar
    abis:
    - name: Gravity
      file: ./abis/Gravity.json
    eventHandlers:
    - event: NewGravatar(uint256,address,string,string)
      handler: handleNewGravatar
    file: ./src/gravity.ts
"""


def test_round_trip_is_lossless(manifest_text: str) -> None:
    tree = ManifestTree.from_text(manifest_text)

    assert tree.dump() == manifest_text


def test_round_trip_with_templates(manifest_text: str, templates_text: str) -> None:
    text = manifest_text + templates_text

    assert ManifestTree.from_text(text).dump() == text


def test_round_trip_keeps_flush_left_sequences() -> None:
    tree = ManifestTree.from_text(FLUSH_LEFT_MANIFEST)

    assert tree.indent == ManifestIndent(mapping=2, sequence=2, offset=0)
    assert tree.dump() == FLUSH_LEFT_MANIFEST


def test_appended_node_follows_flush_left_layout() -> None:
    tree = ManifestTree.from_text(FLUSH_LEFT_MANIFEST)
    node = CommentedMap()
    node["kind"] = "ethereum/contract"
    node["name"] = "Token"
    node["entities"] = CommentedSeq(["Approval"])
    tree.get_in((DATA_SOURCES_KEY,)).append(node)

    dumped = tree.dump()

    assert dumped.startswith(FLUSH_LEFT_MANIFEST)
    assert dumped[len(FLUSH_LEFT_MANIFEST) :] == "- kind: ethereum/contract\n  name: Token\n  entities:\n  - Approval\n"


def test_round_trip_keeps_document_start_marker(manifest_text: str) -> None:
    text = DOCUMENT_START + "\n" + manifest_text
    tree = ManifestTree.from_text(text)

    assert tree.explicit_start is True
    assert tree.dump() == text
    assert tree.working_copy().dump() == text


def test_document_without_start_marker(gravity_tree: ManifestTree) -> None:
    assert gravity_tree.explicit_start is False
    assert not gravity_tree.dump().startswith(DOCUMENT_START)


def test_indent_override_wins(manifest_text: str) -> None:
    override = ManifestIndent(mapping=2, sequence=2, offset=0)
    tree = ManifestTree.from_text(manifest_text, indent=override)

    assert tree.indent == override
    assert "dataSources:\n- kind: ethereum/contract\n  name: Gravity\n" in tree.dump()


@pytest.mark.parametrize(
    ("sequence", "offset", "expected"),
    [
        (4, 2, ManifestIndent()),
        (2, 0, ManifestIndent(mapping=2, sequence=2, offset=0)),
        (3, 1, ManifestIndent(mapping=2, sequence=3, offset=1)),
        (4, None, ManifestIndent(mapping=4)),
        (None, None, ManifestIndent()),
        (2, 2, ManifestIndent()),
    ],
)
def test_guess_indent(sequence, offset, expected: ManifestIndent) -> None:
    assert guess_indent(sequence, offset) == expected


def test_get_in_reads_nested_values(gravity_tree: ManifestTree) -> None:
    assert gravity_tree.get_in(SCHEMA_FILE_PATH) == "./schema.graphql"
    assert gravity_tree.get_in((DATA_SOURCES_KEY, 0, "network")) == "mainnet"
    assert gravity_tree.get_in((DATA_SOURCES_KEY, 0, "source", "startBlock")) == 6175244
    assert gravity_tree.get_in((DATA_SOURCES_KEY, -1, "name")) == "Gravity"


def test_get_in_returns_default_for_missing_segments(gravity_tree: ManifestTree) -> None:
    assert gravity_tree.get_in(("templates", 0, "name")) is None
    assert gravity_tree.get_in((DATA_SOURCES_KEY, 5), default="none") == "none"
    assert gravity_tree.get_in(("specVersion", "nested")) is None


def test_set_in_updates_existing_value(gravity_tree: ManifestTree) -> None:
    gravity_tree.set_in((DATA_SOURCES_KEY, 0, "network"), "goerli")

    assert gravity_tree.get_in((DATA_SOURCES_KEY, 0, "network")) == "goerli"
    dumped = gravity_tree.dump()
    assert "network: goerli" in dumped
    assert "# deployed at block 6175244" in dumped


def test_set_in_creates_intermediate_mappings(gravity_tree: ManifestTree) -> None:
    gravity_tree.set_in(("features", "grafting", "enabled"), True)

    assert gravity_tree.get_in(("features", "grafting", "enabled")) is True
    assert list(gravity_tree.document)[-1] == "features"


@pytest.mark.parametrize(
    "path",
    [
        (),
        (DATA_SOURCES_KEY, 3),
        ("specVersion", "minor"),
    ],
)
def test_set_in_rejects_invalid_paths(gravity_tree: ManifestTree, path) -> None:
    with pytest.raises(ManifestError):
        gravity_tree.set_in(path, "value")


def test_working_copy_is_independent(gravity_tree: ManifestTree, manifest_text: str) -> None:
    copy = gravity_tree.working_copy()
    copy.set_in((DATA_SOURCES_KEY, 0, "name"), "Renamed")

    assert gravity_tree.get_in((DATA_SOURCES_KEY, 0, "name")) == "Gravity"
    assert gravity_tree.dump() == manifest_text


def test_sequence_requires_list() -> None:
    tree = ManifestTree.from_text("dataSources: nope\n")

    with pytest.raises(ManifestError, match="must be a list"):
        tree.sequence(DATA_SOURCES_KEY)


@pytest.mark.parametrize("text", ["- just\n- a list\n", "key: [unclosed\n"])
def test_from_text_rejects_non_mapping_documents(text: str) -> None:
    with pytest.raises(ManifestError):
        ManifestTree.from_text(text)


def test_load_manifest_missing(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="not found"):
        load_manifest(tmp_path / "subgraph.yaml")


def test_load_and_write_manifest(tmp_path: Path, manifest_text: str) -> None:
    path = tmp_path / "subgraph.yaml"
    path.write_text(manifest_text, encoding="utf-8")

    tree = load_manifest(path)
    target = tmp_path / "copy.yaml"
    write_manifest(tree, target)

    assert target.read_text(encoding="utf-8") == manifest_text


def test_write_manifest_reports_failures(tmp_path: Path, gravity_tree: ManifestTree) -> None:
    target = tmp_path / "missing-dir" / "subgraph.yaml"

    with pytest.raises(ManifestWriteError) as excinfo:
        write_manifest(gravity_tree, target)

    assert excinfo.value.path == target
