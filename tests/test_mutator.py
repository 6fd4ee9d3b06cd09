# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for appending data sources to a manifest."""

from __future__ import annotations

from pathlib import Path

import pytest

from subgraph_add.datasource import build_data_source
from subgraph_add.errors import ManifestError
from subgraph_add.manifest import DATA_SOURCES_KEY, ManifestTree, load_manifest
from subgraph_add.mutator import append_data_source, persist_manifest

ADDRESS = "0x1f9840a85d5aF5bf1D1762F925BDADdC4201F984"


@pytest.fixture
def token_source(make_abi, token_entries):
    return build_data_source("Token", "mainnet", ADDRESS, make_abi(*token_entries))


def test_append_keeps_existing_text(gravity_tree: ManifestTree, manifest_text: str, token_source) -> None:
    append_data_source(gravity_tree, token_source)

    dumped = gravity_tree.dump()
    assert dumped.startswith(manifest_text)
    assert "  - kind: ethereum/contract\n    name: Token\n" in dumped[len(manifest_text) :]
    assert [node["name"] for node in gravity_tree.sequence(DATA_SOURCES_KEY)] == ["Gravity", "Token"]


def test_append_before_templates(manifest_text: str, templates_text: str, token_source) -> None:
    tree = ManifestTree.from_text(manifest_text + templates_text)

    append_data_source(tree, token_source)

    dumped = tree.dump()
    assert dumped.startswith(manifest_text)
    assert dumped.endswith(templates_text)
    assert [node["name"] for node in tree.sequence("templates")] == ["Exchange"]


@pytest.mark.parametrize(
    "separator",
    ["\n", "\n# runtime-instantiated contracts\n", "\n\n# runtime-instantiated contracts\n\n"],
)
def test_append_keeps_lines_between_sections(
    manifest_text: str, templates_text: str, token_source, separator: str
) -> None:
    tree = ManifestTree.from_text(manifest_text + separator + templates_text)

    append_data_source(tree, token_source)

    dumped = tree.dump()
    assert dumped.startswith(manifest_text)
    assert dumped.endswith("      file: ./src/token.ts\n" + separator + templates_text)
    assert dumped.count("# runtime-instantiated contracts") == separator.count("#")


def test_append_keeps_end_of_line_comment_on_previous_source(
    manifest_text: str, templates_text: str, token_source
) -> None:
    commented = manifest_text.replace("file: ./src/gravity.ts\n", "file: ./src/gravity.ts # mapping\n")
    tree = ManifestTree.from_text(commented + "\n# runtime-instantiated contracts\n" + templates_text)

    append_data_source(tree, token_source)

    dumped = tree.dump()
    assert dumped.startswith(commented)
    assert dumped.endswith("      file: ./src/token.ts\n\n# runtime-instantiated contracts\n" + templates_text)
    assert dumped.count("# mapping") == 1


def test_append_creates_missing_data_sources(token_source) -> None:
    tree = ManifestTree.from_text("specVersion: 0.0.5\nschema:\n  file: ./schema.graphql\n")

    append_data_source(tree, token_source)

    assert list(tree.document) == ["specVersion", "schema", DATA_SOURCES_KEY]
    assert tree.get_in((DATA_SOURCES_KEY, 0, "name")) == "Token"


def test_append_rejects_non_list(token_source) -> None:
    tree = ManifestTree.from_text("dataSources: {}\n")

    with pytest.raises(ManifestError):
        append_data_source(tree, token_source)


def test_persist_manifest_writes_file(tmp_path: Path, manifest_text: str, gravity_tree: ManifestTree, token_source) -> None:
    path = tmp_path / "subgraph.yaml"

    persist_manifest(gravity_tree, token_source, path)

    reloaded = load_manifest(path)
    assert reloaded.get_in((DATA_SOURCES_KEY, 1, "source", "address")) == ADDRESS
    assert path.read_text(encoding="utf-8").startswith(manifest_text)
