# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Write the ABI, schema, mapping and test-helper files for a new contract.

Every writer takes the collision-resolved descriptor, so renamed events carry
their prefixed names and merged-away events produce nothing.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from .abi import ABIDescriptor, ABIEntry
from .datasource import handler_names, kebab_case, render_type
from .errors import SubgraphAddError

RESERVED_FIELDS: Final[frozenset[str]] = frozenset({"id", "blockNumber", "blockTimestamp", "transactionHash"})
_INT_TYPE = re.compile(r"^(u?)int(\d*)$")
_FIXED_BYTES = re.compile(r"^bytes\d+$")


@dataclass(frozen=True, slots=True)
class ValueKind:
    """How one Solidity type is represented in GraphQL and AssemblyScript."""

    graphql: str
    assemblyscript: str
    constructor: str | None


def value_kind(solidity_type: str) -> ValueKind:
    """Return the schema and mapping representation of ``solidity_type``."""

    if solidity_type.endswith("]"):
        element = value_kind(solidity_type[: solidity_type.rindex("[")])
        return ValueKind(f"[{element.graphql}!]", "ethereum.Value", None)
    if solidity_type.startswith("("):
        return ValueKind("Bytes", "ethereum.Value", None)
    if solidity_type == "address":
        return ValueKind("Bytes", "Address", "fromAddress")
    if solidity_type == "bool":
        return ValueKind("Boolean", "boolean", "fromBoolean")
    if solidity_type == "string":
        return ValueKind("String", "string", "fromString")
    if solidity_type == "bytes":
        return ValueKind("Bytes", "Bytes", "fromBytes")
    if _FIXED_BYTES.match(solidity_type):
        return ValueKind("Bytes", "Bytes", "fromFixedBytes")
    match = _INT_TYPE.match(solidity_type)
    if match:
        unsigned, bits = match.groups()
        if int(bits or 256) <= 32:
            return ValueKind("Int", "i32", "fromI32")
        return ValueKind("BigInt", "BigInt", "fromUnsignedBigInt" if unsigned else "fromSignedBigInt")
    return ValueKind("Bytes", "ethereum.Value", None)


def _field_name(event_name: str, parameter: Mapping[str, Any], index: int) -> str:
    name = str(parameter.get("name") or f"param{index}")
    if name in RESERVED_FIELDS:
        return f"{event_name}_{name}"
    return name


def _write(path: Path, content: str) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise SubgraphAddError(f"Failed to write {path}: {exc}") from exc
    return path


def _unique_events(abi: ABIDescriptor) -> list[ABIEntry]:
    seen: dict[str, ABIEntry] = {}
    for event in abi.events():
        seen.setdefault(str(event.get("name")), event)
    return list(seen.values())


def write_abi(abi: ABIDescriptor, root: Path) -> Path:
    """Write ``abis/<Contract>.json`` under ``root``."""

    path = root / "abis" / f"{abi.contract_name}.json"
    return _write(path, abi.to_json())


def render_schema(abi: ABIDescriptor, *, skip: Collection[str] = ()) -> str:
    """Return GraphQL entity definitions for the events of ``abi``."""

    blocks: list[str] = []
    for event in _unique_events(abi):
        event_name = str(event.get("name"))
        if event_name in skip:
            continue
        lines = [f"type {event_name} @entity(immutable: true) {{", "  id: Bytes!"]
        for index, parameter in enumerate(event.get("inputs") or ()):
            solidity_type = render_type(parameter)
            kind = value_kind(solidity_type)
            lines.append(f"  {_field_name(event_name, parameter, index)}: {kind.graphql}! # {solidity_type}")
        lines.extend(
            [
                "  blockNumber: BigInt!",
                "  blockTimestamp: BigInt!",
                "  transactionHash: Bytes!",
                "}",
            ]
        )
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def _declared_types(schema: str) -> set[str]:
    return set(re.findall(r"^\s*type\s+(\w+)", schema, flags=re.MULTILINE))


def write_schema(abi: ABIDescriptor, schema_path: Path, collision_entities: Collection[str]) -> Path:
    """Append entity types for the new events to ``schema_path``.

    Types named in ``collision_entities`` or already declared are skipped.
    """

    existing = schema_path.read_text(encoding="utf-8") if schema_path.exists() else ""
    skip = set(collision_entities) | _declared_types(existing)
    addition = render_schema(abi, skip=skip)
    if not addition:
        return schema_path
    if not existing or existing.endswith("\n\n"):
        separator = ""
    elif existing.endswith("\n"):
        separator = "\n"
    else:
        separator = "\n\n"
    return _write(schema_path, f"{existing}{separator}{addition}\n")


def render_mapping(abi: ABIDescriptor, collision_entities: Sequence[str] = ()) -> str:
    """Return an AssemblyScript mapping with one handler per event."""

    contract = abi.contract_name
    events = list(abi.events())
    unique = _unique_events(abi)
    lines: list[str] = []
    if unique:
        event_imports = ", ".join(f"{event.get('name')} as {event.get('name')}Event" for event in unique)
        entity_imports = ", ".join(str(event.get("name")) for event in unique)
        lines.append(f'import {{ {event_imports} }} from "../generated/{contract}/{contract}"')
        lines.append(f'import {{ {entity_imports} }} from "../generated/schema"')
    if collision_entities:
        lines.append(f"// Events handled by existing entities: {', '.join(collision_entities)}")

    names = handler_names(str(event.get("name")) for event in events)
    for event, handler in zip(events, names, strict=True):
        event_name = str(event.get("name"))
        body = [
            "",
            f"export function {handler}(event: {event_name}Event): void {{",
            f"  let entity = new {event_name}(event.transaction.hash.concatI32(event.logIndex.toI32()))",
        ]
        for index, parameter in enumerate(event.get("inputs") or ()):
            field = _field_name(event_name, parameter, index)
            param = str(parameter.get("name") or f"param{index}")
            body.append(f"  entity.{field} = event.params.{param}")
        body.extend(
            [
                "",
                "  entity.blockNumber = event.block.number",
                "  entity.blockTimestamp = event.block.timestamp",
                "  entity.transactionHash = event.transaction.hash",
                "",
                "  entity.save()",
                "}",
            ]
        )
        lines.extend(body)
    return "\n".join(lines) + "\n"


def write_mapping(abi: ABIDescriptor, root: Path, collision_entities: Sequence[str]) -> Path:
    """Write ``src/<kebab-contract>.ts`` under ``root``."""

    path = root / "src" / f"{kebab_case(abi.contract_name)}.ts"
    return _write(path, render_mapping(abi, collision_entities))


def render_test_utils(abi: ABIDescriptor) -> str:
    """Return matchstick helpers creating mock events for ``abi``."""

    contract = abi.contract_name
    unique = _unique_events(abi)
    lines = [
        'import { newMockEvent } from "matchstick-as"',
        'import { ethereum, Address, BigInt, Bytes } from "@graphprotocol/graph-ts"',
    ]
    if unique:
        names = ", ".join(str(event.get("name")) for event in unique)
        lines.append(f'import {{ {names} }} from "../generated/{contract}/{contract}"')
    for event in unique:
        event_name = str(event.get("name"))
        variable = f"{event_name[:1].lower()}{event_name[1:]}Event"
        inputs = list(event.get("inputs") or ())
        params = []
        pushes = []
        for index, parameter in enumerate(inputs):
            param = str(parameter.get("name") or f"param{index}")
            kind = value_kind(render_type(parameter))
            params.append(f"{param}: {kind.assemblyscript}")
            value = f"ethereum.Value.{kind.constructor}({param})" if kind.constructor else param
            pushes.append(
                f"  {variable}.parameters.push(\n"
                f'    new ethereum.EventParam("{param}", {value})\n'
                "  )"
            )
        lines.extend(
            [
                "",
                f"export function create{event_name}Event({', '.join(params)}): {event_name} {{",
                f"  let {variable} = changetype<{event_name}>(newMockEvent())",
                "",
                f"  {variable}.parameters = new Array()",
                *pushes,
                "",
                f"  return {variable}",
                "}",
            ]
        )
    return "\n".join(lines) + "\n"


def write_test_files(abi: ABIDescriptor, root: Path) -> Path:
    """Write ``tests/<kebab-contract>-utils.ts`` under ``root``."""

    path = root / "tests" / f"{kebab_case(abi.contract_name)}-utils.ts"
    return _write(path, render_test_utils(abi))


__all__ = [
    "ValueKind",
    "render_mapping",
    "render_schema",
    "render_test_utils",
    "value_kind",
    "write_abi",
    "write_mapping",
    "write_schema",
    "write_test_files",
]
