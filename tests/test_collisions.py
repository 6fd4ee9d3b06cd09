# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for event/entity collision resolution."""

from __future__ import annotations

import copy

import pytest

from subgraph_add.abi import is_event
from subgraph_add.collisions import resolve_collisions
from subgraph_add.errors import EventEntityCollisionError


def _event_names(entries) -> list[str]:
    return [entry["name"] for entry in entries if is_event(entry)]


def test_rename_mode_prefixes_colliding_events(make_abi, token_entries) -> None:
    abi = make_abi(*token_entries)

    result = resolve_collisions(abi, ["Transfer"], "Token", merge_entities=False)

    assert _event_names(result.abi_data) == ["TokenTransfer", "Approval"]
    assert result.collision_entities == ()
    assert result.only_collisions is False
    assert result.renamed_events == (("Transfer", "TokenTransfer"),)


def test_rename_keeps_other_fields_and_position(make_abi, token_entries) -> None:
    abi = make_abi(*token_entries)

    result = resolve_collisions(abi, ["Transfer"], "Token", merge_entities=False)

    renamed = result.abi_data[1]
    assert renamed["inputs"] == token_entries[1]["inputs"]
    assert list(renamed) == list(token_entries[1])
    assert [entry["name"] for entry in result.abi_data] == ["balanceOf", "TokenTransfer", "totalSupply", "Approval"]


def test_merge_mode_drops_colliding_events(make_abi, token_entries) -> None:
    abi = make_abi(*token_entries)

    result = resolve_collisions(abi, ["Transfer"], "Token", merge_entities=True)

    assert _event_names(result.abi_data) == ["Approval"]
    assert result.collision_entities == ("Transfer",)
    assert result.only_collisions is False
    assert [entry["name"] for entry in result.abi_data] == ["balanceOf", "totalSupply", "Approval"]


def test_merge_mode_all_events_collide(make_abi, entries) -> None:
    abi = make_abi(entries.event("Transfer", entries.transfer_inputs))

    result = resolve_collisions(abi, ["Transfer"], "Token", merge_entities=True)

    assert _event_names(result.abi_data) == []
    assert result.collision_entities == ("Transfer",)
    assert result.only_collisions is True


def test_merge_mode_records_each_name_once(make_abi, entries) -> None:
    abi = make_abi(
        entries.event("Transfer", entries.transfer_inputs),
        entries.event("Transfer", (("from", "address", True), ("value", "uint256", False))),
    )

    result = resolve_collisions(abi, ["Transfer"], "Token", merge_entities=True)

    assert result.collision_entities == ("Transfer",)
    assert result.abi_data == ()


def test_adjacent_colliding_events_are_all_removed(make_abi, entries) -> None:
    abi = make_abi(
        entries.event("Transfer"),
        entries.event("Approval"),
        entries.event("Mint"),
    )

    result = resolve_collisions(abi, ["Transfer", "Approval"], "Token", merge_entities=True)

    assert _event_names(result.abi_data) == ["Mint"]
    assert result.collision_entities == ("Transfer", "Approval")


@pytest.mark.parametrize("merge_entities", [False, True])
def test_prefixed_name_already_taken_is_fatal(make_abi, token_entries, merge_entities: bool) -> None:
    abi = make_abi(*token_entries)

    with pytest.raises(EventEntityCollisionError) as excinfo:
        resolve_collisions(abi, ["Transfer", "TokenTransfer"], "Token", merge_entities=merge_entities)

    assert excinfo.value.contract_name == "Token"
    assert excinfo.value.event_name == "Transfer"
    assert "'Token'" in str(excinfo.value)
    assert "'Transfer'" in str(excinfo.value)


def test_fatal_collision_leaves_descriptor_untouched(make_abi, entries) -> None:
    abi = make_abi(
        entries.event("Approval"),
        entries.event("Transfer"),
    )
    before = copy.deepcopy(abi.entries)

    with pytest.raises(EventEntityCollisionError):
        resolve_collisions(abi, ["Approval", "Transfer", "TokenTransfer"], "Token", merge_entities=False)

    assert abi.entries == before


def test_rename_that_duplicates_another_new_event_is_fatal(make_abi, entries) -> None:
    abi = make_abi(entries.event("Transfer"), entries.event("TokenTransfer"))

    with pytest.raises(EventEntityCollisionError):
        resolve_collisions(abi, ["Transfer"], "Token", merge_entities=False)


def test_merge_ignores_same_named_new_event(make_abi, entries) -> None:
    abi = make_abi(entries.event("Transfer"), entries.event("TokenTransfer"))

    result = resolve_collisions(abi, ["Transfer"], "Token", merge_entities=True)

    assert _event_names(result.abi_data) == ["TokenTransfer"]
    assert result.only_collisions is False


def test_descriptor_without_events_is_vacuously_only_collisions(make_abi, entries) -> None:
    abi = make_abi(entries.function("balanceOf"), entries.function("totalSupply"))

    result = resolve_collisions(abi, ["Transfer"], "Token", merge_entities=False)

    assert result.only_collisions is True
    assert [entry["name"] for entry in result.abi_data] == ["balanceOf", "totalSupply"]


def test_no_collisions_leaves_entries_equal(make_abi, token_entries) -> None:
    abi = make_abi(*token_entries)

    result = resolve_collisions(abi, ["Gravatar"], "Token", merge_entities=False)

    assert list(result.abi_data) == token_entries
    assert result.only_collisions is False


def test_apply_to_returns_new_descriptor(make_abi, token_entries) -> None:
    abi = make_abi(*token_entries)

    result = resolve_collisions(abi, ["Transfer"], "Token", merge_entities=True)
    resolved = result.apply_to(abi)

    assert resolved is not abi
    assert resolved.contract_name == "Token"
    assert resolved.event_names() == ["Approval"]
    assert abi.event_names() == ["Transfer", "Approval"]
