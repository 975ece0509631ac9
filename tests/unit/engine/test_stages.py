"""Tests for sort, limit, count and the reshaping stages."""

from __future__ import annotations

from docpipe.engine.stages import (
    apply_add_fields,
    apply_count,
    apply_limit,
    apply_project,
    apply_sort,
    apply_unwind,
)
from docpipe.models.builders import add_fields, count, field, if_null, limit, lit, project, size, sort, unwind


class TestSort:
    def test_stable_on_ties(self):
        docs = [{"k": 1, "i": 0}, {"k": 0, "i": 1}, {"k": 1, "i": 2}, {"k": 0, "i": 3}]
        assert [d["i"] for d in apply_sort(sort(k=1), docs)] == [1, 3, 0, 2]
        assert [d["i"] for d in apply_sort(sort(k=-1), docs)] == [0, 2, 1, 3]

    def test_secondary_key_breaks_ties(self):
        docs = [
            {"_id": "b", "userCount": 2},
            {"_id": "c", "userCount": 5},
            {"_id": "a", "userCount": 2},
        ]
        out = apply_sort(sort(userCount=-1, _id=1), docs)
        assert [d["_id"] for d in out] == ["c", "a", "b"]

    def test_absent_sorts_first_in_both_directions(self):
        docs = [{"i": 0, "v": 2}, {"i": 1}, {"i": 2, "v": 1}]
        assert [d["i"] for d in apply_sort(sort(v=1), docs)] == [1, 2, 0]
        assert [d["i"] for d in apply_sort(sort(v=-1), docs)] == [1, 0, 2]

    def test_mixed_types_follow_type_order(self):
        docs = [{"v": "a"}, {"v": 3}, {"v": None}, {"v": True}]
        assert [d["v"] for d in apply_sort(sort(v=1), docs)] == [None, 3, "a", True]

    def test_nested_path(self):
        docs = [{"c": {"t": "B"}}, {"c": {"t": "A"}}]
        assert [d["c"]["t"] for d in apply_sort(sort(("c.t", 1)), docs)] == ["A", "B"]

    def test_input_untouched(self):
        docs = [{"v": 2}, {"v": 1}]
        apply_sort(sort(v=1), docs)
        assert docs == [{"v": 2}, {"v": 1}]


class TestLimitAndCount:
    def test_limit_takes_prefix(self):
        docs = [{"i": i} for i in range(5)]
        assert apply_limit(limit(2), docs) == docs[:2]
        assert apply_limit(limit(10), docs) == docs

    def test_limit_non_positive_is_empty(self):
        assert apply_limit(limit(0), [{"i": 1}]) == []
        assert apply_limit(limit(-3), [{"i": 1}]) == []

    def test_count_emits_single_document(self):
        assert apply_count(count("activeUsers"), [{}, {}, {}]) == [{"activeUsers": 3}]

    def test_count_of_empty_input_is_zero(self):
        assert apply_count(count("n"), []) == [{"n": 0}]


class TestProject:
    def test_keeps_listed_fields_only(self):
        docs = [{"_id": 1, "name": "Grace", "age": 20, "eyeColor": "green"}]
        assert apply_project(project("name", "age"), docs) == [{"name": "Grace", "age": 20}]

    def test_absent_fields_are_omitted(self):
        assert apply_project(project("name", "age"), [{"name": "Hays"}]) == [{"name": "Hays"}]

    def test_nested_paths_keep_structure(self):
        docs = [{"company": {"title": "X", "phone": "1"}, "name": "A"}]
        assert apply_project(project("company.title"), docs) == [{"company": {"title": "X"}}]


class TestUnwind:
    def test_one_output_per_element(self):
        docs = [{"_id": 1, "tags": ["a", "b", "c"]}, {"_id": 2, "tags": ["d"]}]
        out = apply_unwind(unwind("tags"), docs)
        assert out == [
            {"_id": 1, "tags": "a"},
            {"_id": 1, "tags": "b"},
            {"_id": 1, "tags": "c"},
            {"_id": 2, "tags": "d"},
        ]
        assert docs[0]["tags"] == ["a", "b", "c"]

    def test_empty_null_and_absent_drop_document(self):
        docs = [{"tags": []}, {"tags": None}, {}]
        assert apply_unwind(unwind("tags"), docs) == []

    def test_scalar_passes_through(self):
        assert apply_unwind(unwind("tags"), [{"tags": "solo"}]) == [{"tags": "solo"}]

    def test_nested_array(self):
        docs = [{"profile": {"langs": ["en", "fr"]}}]
        out = apply_unwind(unwind("profile.langs"), docs)
        assert [d["profile"]["langs"] for d in out] == ["en", "fr"]


class TestAddFields:
    def test_size_with_if_null(self):
        docs = [{"tags": ["a", "b"]}, {"tags": None}, {}]
        out = apply_add_fields(add_fields(numberOfTags=size(if_null("tags", []))), docs)
        assert [d["numberOfTags"] for d in out] == [2, 0, 0]
        assert "numberOfTags" not in docs[0]

    def test_nested_assignment_and_constants(self):
        out = apply_add_fields(add_fields({"meta.source": lit("seed")}), [{"meta": {"v": 1}}])
        assert out == [{"meta": {"v": 1, "source": "seed"}}]

    def test_expressions_see_original_document(self):
        out = apply_add_fields(add_fields(a=lit(1), b=field("a")), [{"a": 5}])
        assert out == [{"a": 1, "b": 5}]

    def test_digit_path_updates_array_element(self):
        out = apply_add_fields(add_fields({"tags.0": lit("first")}), [{"tags": ["enim", "id"]}])
        assert out == [{"tags": ["first", "id"]}]
