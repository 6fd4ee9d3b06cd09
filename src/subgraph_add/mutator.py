# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Insert a synthesized data source into the manifest and persist it."""

from __future__ import annotations

from collections.abc import MutableSequence
from pathlib import Path
from typing import Any

from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import CommentMark
from ruamel.yaml.tokens import CommentToken

from .errors import ManifestError
from .manifest import DATA_SOURCES_KEY, ManifestTree, write_manifest

# Position of the end-of-line comment in ``ca.items`` entries.
_MAP_EOL = 2
_SEQ_EOL = 0

CommentSlot = tuple[CommentedMap | CommentedSeq, Any, int]


def _last_slot(node: Any) -> CommentSlot | None:
    """Return the end-of-line comment slot of the last scalar under ``node``."""

    if isinstance(node, CommentedMap) and node:
        key = list(node)[-1]
        return _last_slot(node[key]) or (node, key, _MAP_EOL)
    if isinstance(node, CommentedSeq) and node:
        index = len(node) - 1
        return _last_slot(node[index]) or (node, index, _SEQ_EOL)
    return None


def _trailing_slot(node: Any) -> CommentSlot | None:
    """Return the deepest slot at the end of ``node`` that holds a comment token."""

    if isinstance(node, CommentedMap) and node:
        key = list(node)[-1]
        position = _MAP_EOL
    elif isinstance(node, CommentedSeq) and node:
        key = len(node) - 1
        position = _SEQ_EOL
    else:
        return None
    nested = _trailing_slot(node[key])
    if nested is not None:
        return nested
    entry = node.ca.items.get(key)
    if entry and len(entry) > position and entry[position] is not None:
        return node, key, position
    return None


def _set_slot(slot: CommentSlot, token: CommentToken | None) -> None:
    container, key, position = slot
    entry = container.ca.items.setdefault(key, [None] * (4 if isinstance(container, CommentedMap) else 2))
    entry[position] = token
    if all(item is None for item in entry):
        del container.ca.items[key]


def _move_trailing_comment(previous: Any, data_source: CommentedMap) -> None:
    """Move blank lines and comments after ``previous`` below ``data_source``.

    The round-trip loader stores whatever sits between the last data source and
    the next top-level key on the last scalar of that data source. Its own
    end-of-line comment stays; the lines after it follow the appended node.
    """

    source = _trailing_slot(previous)
    target = _last_slot(data_source)
    if source is None or target is None:
        return
    container, key, position = source
    token: CommentToken = container.ca.items[key][position]
    head, newline, tail = token.value.partition("\n")
    if not newline or not tail:
        return
    if head.strip():
        token.value = head + newline
        moved = CommentToken(newline + tail, CommentMark(0), None)
    else:
        _set_slot(source, None)
        moved = token
    _set_slot(target, moved)


def append_data_source(tree: ManifestTree, data_source: CommentedMap) -> ManifestTree:
    """Append ``data_source`` to the end of ``dataSources`` in ``tree``.

    Existing entries and every other field are left as they are, including
    comments and blank lines separating ``dataSources`` from the next section.
    A manifest without ``dataSources`` gains the key at the end of the document.

    Raises:
        ManifestError: If ``dataSources`` exists but is not a list.
    """

    current = tree.get_in((DATA_SOURCES_KEY,))
    if current is None:
        tree.set_in((DATA_SOURCES_KEY,), CommentedSeq([data_source]))
        return tree
    if not isinstance(current, MutableSequence):
        raise ManifestError(f"Manifest field '{DATA_SOURCES_KEY}' must be a list")
    if current:
        _move_trailing_comment(current[-1], data_source)
    current.append(data_source)
    return tree


def persist_manifest(tree: ManifestTree, data_source: CommentedMap, path: Path) -> ManifestTree:
    """Append ``data_source`` to ``tree`` and write the result to ``path``."""

    updated = append_data_source(tree, data_source)
    write_manifest(updated, path)
    return updated


__all__ = ["append_data_source", "persist_manifest"]
