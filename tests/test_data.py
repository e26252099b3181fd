"""Tests for data loading and tag resolution."""

from __future__ import annotations

import json

import pytest

from json2docx.data import MISSING, load_data, resolve, stringify
from json2docx.exceptions import DataError, DataLookupError


class TestResolve:

    def test_plain_key(self):
        assert resolve({"name": "Ann"}, "name") == "Ann"

    def test_key_with_spaces(self):
        assert resolve({"full name": "Ann Lee"}, "full name") == "Ann Lee"

    def test_null_value_is_found(self):
        assert resolve({"name": None}, "name") is None

    def test_missing_key(self):
        assert resolve({"name": "Ann"}, "surname") is MISSING

    def test_nested_path(self):
        data = {"client": {"address": {"city": "Oslo"}}}
        assert resolve(data, "client.address.city") == "Oslo"

    def test_index(self):
        assert resolve({"items": ["a", "b"]}, "items[1]") == "b"

    def test_projection_wraps_matches(self):
        data = {"items": [{"name": "a"}, {"name": "b"}]}
        assert resolve(data, "items[*].name") == ["a", "b"]

    def test_projection_single_match_unwrapped(self):
        data = {"items": [{"name": "a"}]}
        assert resolve(data, "items[*].name") == "a"

    def test_filter_single_match_unwrapped(self):
        data = {"items": [{"name": "a", "vip": True}, {"name": "b", "vip": False}]}
        assert resolve(data, "items[?vip].name") == "a"

    def test_plain_list_value_kept(self):
        assert resolve({"items": ["a"]}, "items") == ["a"]

    def test_root_prefix(self):
        data = {"client": {"name": "ACME"}, "items": [1, 2]}
        assert resolve(data, "$.client.name") == "ACME"
        assert resolve(data, "$.items[1]") == 2
        assert resolve(data, "$") is data

    def test_empty_list_is_a_match(self):
        assert resolve({"items": []}, "items") == []

    def test_invalid_expression(self):
        with pytest.raises(DataLookupError):
            resolve({"a": 1}, "a[")

    def test_scope_can_be_any_json_value(self):
        assert resolve([1, 2], "[0]") == 1


class TestStringify:

    @pytest.mark.parametrize("value, expected", [
        (None, ""),
        ("text", "text"),
        (True, "true"),
        (False, "false"),
        (42, "42"),
        (1.5, "1.5"),
    ])
    def test_scalars(self, value, expected):
        assert stringify(value) == expected

    def test_object_is_indented_json(self):
        text = stringify({"name": "Ünal"})
        assert json.loads(text) == {"name": "Ünal"}
        assert "Ünal" in text
        assert "\n" in text


class TestLoadData:

    def test_dict(self):
        assert load_data({"a": 1}) == {"a": 1}

    def test_json_text(self):
        assert load_data('{"a": 1}') == {"a": 1}

    def test_json_bytes(self):
        assert load_data(b'{"a": 1}') == {"a": 1}

    def test_path(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('{"name": "Åsa"}', encoding="utf-8")
        assert load_data(path) == {"name": "Åsa"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataError):
            load_data(tmp_path / "missing.json")

    def test_invalid_json(self):
        with pytest.raises(DataError, match="invalid JSON"):
            load_data("{not json")

    def test_root_must_be_object(self):
        with pytest.raises(DataError, match="JSON object"):
            load_data("[1, 2]")
