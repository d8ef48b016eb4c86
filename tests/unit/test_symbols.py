from __future__ import annotations

import pytest

from ddbexpr_py import SymbolTable, ValidationError
from ddbexpr_py.symbols import path_token


def test_bind_name_reuses_placeholder_for_same_key() -> None:
    table = SymbolTable()
    assert table.bind_name("a") == "#a"
    assert table.bind_name("a") == "#a"
    assert table.params == {"ExpressionAttributeNames": {"#a": "a"}}


def test_bind_name_disambiguates_keys_that_escape_to_the_same_placeholder() -> None:
    table = SymbolTable()
    assert table.bind_name("a-b") == "#ab"
    assert table.bind_name("ab") == "#ab_1"
    assert table.bind_name("a b") == "#ab_2"
    assert table.bind_name("ab") == "#ab_1"
    assert table.params["ExpressionAttributeNames"] == {"#ab": "a-b", "#ab_1": "ab", "#ab_2": "a b"}


def test_bind_path_escapes_each_segment_and_keeps_indexes() -> None:
    table = SymbolTable()
    assert table.bind_path("a.b[0]") == "#a.#b[0]"
    assert table.bind_path("a[1][2].c") == "#a[1][2].#c"
    assert table.bind_path("b.a") == "#b.#a"
    assert table.params["ExpressionAttributeNames"] == {"#a": "a", "#b": "b", "#c": "c"}


def test_bind_value_reuses_identical_values_only() -> None:
    table = SymbolTable(value_prefix="cond_")
    assert table.bind_value(42, "a") == ":cond_a"
    assert table.bind_value(42, "a") == ":cond_a"
    assert table.bind_value(43, "a") == ":cond_a_1"
    assert table.bind_value(1, "x") == ":cond_x"
    assert table.bind_value(True, "x") == ":cond_x_1"
    assert table.bind_value(1.0, "x") == ":cond_x_2"
    assert table.params["ExpressionAttributeValues"] == {
        ":cond_a": 42,
        ":cond_a_1": 43,
        ":cond_x": 1,
        ":cond_x_1": True,
        ":cond_x_2": 1.0,
    }


def test_bind_value_sanitizes_disambiguator() -> None:
    table = SymbolTable(value_prefix="val_")
    assert table.bind_value("x", "a.b[0]") == ":val_a_b_0"
    assert table.bind_value("y", "") == ":val_v"


def test_tables_are_created_lazily() -> None:
    table = SymbolTable()
    table.bind_name("a")
    assert "ExpressionAttributeValues" not in table.params

    table = SymbolTable()
    table.bind_value(1, "a")
    assert "ExpressionAttributeNames" not in table.params


def test_existing_params_are_preserved_and_extended() -> None:
    params = {
        "TableName": "tbl",
        "ExpressionAttributeNames": {"#a": "other"},
        "ExpressionAttributeValues": {":a": 1},
    }
    table = SymbolTable(params)
    assert table.bind_name("a") == "#a_1"
    assert table.bind_name("other") == "#other"
    assert table.bind_value(2, "a") == ":a_1"
    assert table.params is params
    assert params == {
        "TableName": "tbl",
        "ExpressionAttributeNames": {"#a": "other", "#a_1": "a", "#other": "other"},
        "ExpressionAttributeValues": {":a": 1, ":a_1": 2},
    }


def test_rejects_non_mapping_tables() -> None:
    table = SymbolTable({"ExpressionAttributeNames": ["#a"]})
    with pytest.raises(ValidationError, match="ExpressionAttributeNames must be a mapping"):
        table.bind_name("a")


def test_resolve_follows_escaping_rules() -> None:
    table = SymbolTable(value_prefix="cond_")

    assert table.resolve("a", "name") == "#a"
    assert table.resolve("a", "value", "p") == ":cond_p"
    assert table.resolve(":#foo", "value", "q") == ":cond_q"
    assert table.resolve("::foo", "name", "r") == ":cond_r"
    assert table.resolve("size(#a.b)", "value") == "size(#a.#b)"
    assert table.resolve(7, "value", "s") == ":cond_s"

    assert table.params["ExpressionAttributeNames"] == {"#a": "a", "#b": "b"}
    assert table.params["ExpressionAttributeValues"] == {
        ":cond_p": "a",
        ":cond_q": "#foo",
        ":cond_r": ":foo",
        ":cond_s": 7,
    }


def test_resolve_double_hash_names_attribute_with_literal_hash() -> None:
    table = SymbolTable()
    assert table.resolve("##foo", "name") == "#foo"
    assert table.resolve("foo", "name") == "#foo_1"
    assert table.params["ExpressionAttributeNames"] == {"#foo": "#foo", "#foo_1": "foo"}


def test_path_token() -> None:
    assert path_token("a.b[0]") == "a_b_0"
    assert path_token("#a") == "a"
    assert path_token("size(#a)") == "size_a"
