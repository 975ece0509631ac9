"""Tests for field resolution and copy-on-write assignment."""

from __future__ import annotations

import copy

from docpipe.engine.fields import MISSING, assign, is_missing, resolve

DOC = {
    "name": "Grace",
    "nickname": None,
    "tags": ["laboris", "ad"],
    "company": {"location": {"country": "USA"}},
}


class TestResolve:
    def test_top_level(self):
        assert resolve(DOC, "name") == "Grace"

    def test_nested_mapping(self):
        assert resolve(DOC, "company.location.country") == "USA"

    def test_array_index(self):
        assert resolve(DOC, "tags.1") == "ad"

    def test_index_out_of_range_is_missing(self):
        assert resolve(DOC, "tags.5") is MISSING

    def test_missing_field_is_missing_not_none(self):
        assert resolve(DOC, "age") is MISSING
        assert resolve(DOC, "nickname") is None

    def test_path_through_scalar_is_missing(self):
        assert resolve(DOC, "name.first") is MISSING

    def test_non_digit_segment_on_array_is_missing(self):
        assert resolve(DOC, "tags.first") is MISSING


class TestMissingSentinel:
    def test_is_falsy_and_singleton(self):
        assert not MISSING
        assert copy.deepcopy(MISSING) is MISSING
        assert is_missing(MISSING)
        assert not is_missing(None)


class TestAssign:
    def test_does_not_mutate_input(self):
        original = copy.deepcopy(DOC)
        out = assign(DOC, "company.location.country", "France")
        assert out["company"]["location"]["country"] == "France"
        assert DOC == original

    def test_creates_intermediate_mappings(self):
        assert assign({}, "a.b.c", 1) == {"a": {"b": {"c": 1}}}

    def test_replaces_scalar_intermediate(self):
        assert assign({"a": 5}, "a.b", 1) == {"a": {"b": 1}}

    def test_digit_segment_writes_array_element(self):
        doc = {"tags": ["enim", "id"]}
        assert assign(doc, "tags.0", "ad") == {"tags": ["ad", "id"]}
        assert doc == {"tags": ["enim", "id"]}

    def test_digit_segment_past_end_pads_with_none(self):
        assert assign({"tags": ["a"]}, "tags.2", "c") == {"tags": ["a", None, "c"]}

    def test_nested_document_inside_array(self):
        doc = {"friends": [{"name": "Kitty"}, {"name": "Hays"}]}
        out = assign(doc, "friends.1.name", "Grace")
        assert out["friends"] == [{"name": "Kitty"}, {"name": "Grace"}]
        assert doc["friends"][1] == {"name": "Hays"}
