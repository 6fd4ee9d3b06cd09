# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Path-addressable access to a subgraph manifest loaded in round-trip mode.

The manifest is parsed with :mod:`ruamel.yaml` so key order, quoting, comments
and the document's own indentation survive a load/write cycle. Callers address
nodes with a sequence of mapping keys and sequence indices, for example
``("dataSources", 0, "network")``.
"""

from __future__ import annotations

import copy
import io
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from pathlib import Path
from typing import Any, Final

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError
from ruamel.yaml.util import load_yaml_guess_indent

from .config import ManifestIndent
from .errors import ManifestError, ManifestWriteError

PathKey = str | int
TreePath = Sequence[PathKey]

DATA_SOURCES_KEY: Final[str] = "dataSources"
TEMPLATES_KEY: Final[str] = "templates"
SCHEMA_FILE_PATH: Final[tuple[str, str]] = ("schema", "file")
DOCUMENT_START: Final[str] = "---"

_MISSING: Final[object] = object()


def _build_yaml(indent: ManifestIndent, *, explicit_start: bool = False) -> YAML:
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 4096
    yaml.explicit_start = explicit_start
    yaml.indent(mapping=indent.mapping, sequence=indent.sequence, offset=indent.offset)
    return yaml


def guess_indent(sequence: int | None, offset: int | None) -> ManifestIndent:
    """Return the layout matching indentation measured in a manifest.

    ``sequence`` is the distance from a parent key to block sequence item
    content and ``offset`` the spaces before the dash. Without block sequences
    only nested mapping indentation is known and ``offset`` is ``None``.
    """

    default = ManifestIndent()
    if sequence is None or sequence < 1:
        return default
    if offset is None:
        return ManifestIndent(mapping=sequence, sequence=default.sequence, offset=default.offset)
    if offset < 0 or sequence < offset + 2:
        return default
    return ManifestIndent(mapping=default.mapping, sequence=sequence, offset=offset)


class ManifestTree:
    """Ordered manifest document supporting reads and writes by path."""

    def __init__(
        self,
        document: CommentedMap,
        *,
        indent: ManifestIndent | None = None,
        explicit_start: bool = False,
    ) -> None:
        self._document = document
        self._indent = indent or ManifestIndent()
        self._explicit_start = explicit_start

    @property
    def document(self) -> CommentedMap:
        """Return the underlying round-trip mapping."""

        return self._document

    @property
    def indent(self) -> ManifestIndent:
        return self._indent

    @property
    def explicit_start(self) -> bool:
        """Return whether the document opens with a ``---`` marker."""

        return self._explicit_start

    @classmethod
    def from_text(cls, text: str, *, indent: ManifestIndent | None = None, source: str = "<string>") -> ManifestTree:
        """Parse ``text`` into a manifest tree.

        The indentation of ``text`` is measured and reused when dumping unless
        ``indent`` overrides it.

        Raises:
            ManifestError: If the text is not YAML or its root is not a mapping.
        """

        try:
            document, sequence, offset = load_yaml_guess_indent(text, yaml=_build_yaml(ManifestIndent()))
        except YAMLError as exc:
            raise ManifestError(f"Failed to parse manifest {source}: {exc}") from exc
        if not isinstance(document, CommentedMap):
            raise ManifestError(f"Manifest {source} must contain a mapping at the top level")
        return cls(
            document,
            indent=indent or guess_indent(sequence, offset),
            explicit_start=text.lstrip().startswith(DOCUMENT_START),
        )

    def get_in(self, path: TreePath, default: Any = None) -> Any:
        """Return the node at ``path`` or ``default`` when any segment is absent."""

        node: Any = self._document
        for key in path:
            node = _step(node, key)
            if node is _MISSING:
                return default
        return node

    def set_in(self, path: TreePath, value: Any) -> None:
        """Assign ``value`` at ``path``, creating intermediate mappings as needed.

        Raises:
            ManifestError: If ``path`` is empty, indexes past the end of a
                sequence, or traverses through a scalar.
        """

        if not path:
            raise ManifestError("Cannot replace the manifest root")
        node: Any = self._document
        for position, key in enumerate(path[:-1]):
            child = _step(node, key)
            if child is _MISSING or child is None:
                if not isinstance(node, MutableMapping):
                    raise ManifestError(f"Cannot create {_render_path(path[: position + 1])} inside a sequence")
                child = CommentedMap()
                node[key] = child
            node = child
        last = path[-1]
        if isinstance(node, MutableMapping) and isinstance(last, str):
            node[last] = value
            return
        if isinstance(node, MutableSequence) and isinstance(last, int):
            if not -len(node) <= last < len(node):
                raise ManifestError(f"Index out of range at {_render_path(path)}")
            node[last] = value
            return
        raise ManifestError(f"Cannot assign {_render_path(path)}: parent is not a container")

    def sequence(self, key: str) -> list[Any]:
        """Return the top-level sequence at ``key`` (empty when absent)."""

        value = self._document.get(key)
        if value is None:
            return []
        if not isinstance(value, MutableSequence):
            raise ManifestError(f"Manifest field '{key}' must be a list")
        return list(value)

    def working_copy(self) -> ManifestTree:
        """Return a deep copy that can be mutated without touching this tree."""

        return ManifestTree(copy.deepcopy(self._document), indent=self._indent, explicit_start=self._explicit_start)

    def dump(self) -> str:
        """Serialise the tree back to YAML text."""

        return render_node(self._document, indent=self._indent, explicit_start=self._explicit_start)


def render_node(node: Any, *, indent: ManifestIndent | None = None, explicit_start: bool = False) -> str:
    """Return ``node`` rendered as YAML in the manifest layout."""

    stream = io.StringIO()
    _build_yaml(indent or ManifestIndent(), explicit_start=explicit_start).dump(node, stream)
    return stream.getvalue()


def load_manifest(path: Path, *, indent: ManifestIndent | None = None) -> ManifestTree:
    """Load the manifest stored at ``path``.

    Raises:
        ManifestError: If the file is missing or cannot be parsed.
    """

    if not path.exists():
        raise ManifestError(f"Manifest not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Failed to read manifest {path}: {exc}") from exc
    return ManifestTree.from_text(text, indent=indent, source=str(path))


def write_manifest(tree: ManifestTree, path: Path) -> None:
    """Write ``tree`` to ``path``.

    Raises:
        ManifestWriteError: If the file cannot be written.
    """

    payload = tree.dump()
    try:
        path.write_text(payload, encoding="utf-8")
    except OSError as exc:
        raise ManifestWriteError(path, str(exc)) from exc


def _step(node: Any, key: PathKey) -> Any:
    if isinstance(node, Mapping) and isinstance(key, str):
        return node.get(key, _MISSING)
    if isinstance(node, Sequence) and not isinstance(node, str) and isinstance(key, int):
        if -len(node) <= key < len(node):
            return node[key]
    return _MISSING


def _render_path(path: TreePath) -> str:
    return ".".join(str(segment) for segment in path)


__all__ = [
    "DATA_SOURCES_KEY",
    "DOCUMENT_START",
    "SCHEMA_FILE_PATH",
    "TEMPLATES_KEY",
    "ManifestTree",
    "TreePath",
    "guess_indent",
    "load_manifest",
    "render_node",
    "write_manifest",
]
