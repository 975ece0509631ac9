"""Tests for the named playground queries over the sample users."""

from __future__ import annotations

import pytest

from docpipe.core.exceptions import QueryNotFoundError
from docpipe.engine.executor import PipelineExecutor
from docpipe.queries.playground import QUERIES, get_query, list_queries
from tests.fakes import sample_users


@pytest.fixture(scope="module")
def run():
    users = sample_users()
    executor = PipelineExecutor()

    def _run(name):
        return executor.execute(users, get_query(name))

    return _run


def test_active_users(run):
    assert run("active_users") == [{"activeUsers": 4}]


def test_average_age(run):
    assert run("average_age") == [{"_id": None, "averageAge": pytest.approx(28.625)}]


def test_top_favorite_fruits_ties_keep_first_seen_order(run):
    assert run("top_favorite_fruits") == [
        {"_id": "banana", "count": 3},
        {"_id": "apple", "count": 3},
        {"_id": "strawberry", "count": 2},
    ]


def test_gender_count(run):
    result = {r["_id"]: r["genderCount"] for r in run("gender_count")}
    assert result == {"female": 6, "male": 2}


def test_top_country(run):
    assert run("top_country") == [{"_id": "USA", "userCount": 3}]


def test_eye_colors(run):
    assert run("eye_colors") == [{"_id": "blue"}, {"_id": "brown"}, {"_id": "green"}]


def test_average_tags_ignores_users_without_tags(run):
    [result] = run("average_tags_per_user")
    assert result["averageNumberOfTags"] == pytest.approx(16 / 6)


def test_average_tags_counts_missing_as_zero(run):
    [result] = run("average_tags_per_user_with_empty")
    assert result["averageNumberOfTags"] == pytest.approx(2.0)


def test_tag_and_phone_counts(run):
    assert run("enim_tag_count") == [{"userWithEnimTag": 3}]
    assert run("phone_940_users") == [{"usersWithSpecialPhoneNumber": 3}]
    assert run("second_tag_ad") == [{"secondTagAd": 2}]


def test_inactive_velit_users(run):
    assert run("inactive_velit_users") == [
        {"name": "Aurelia", "age": 20},
        {"name": "Alison", "age": 33},
    ]


def test_recent_registrations(run):
    result = run("recent_registrations")
    assert [r["name"] for r in result] == ["Alison", "Kitty", "Stanton", "Grace"]
    assert set(result[0]) == {"name", "registered", "favoriteFruit"}


def test_users_by_fruit(run):
    assert run("users_by_fruit") == [
        {"_id": "apple", "users": ["Kitty", "Grace", "Deana"]},
        {"_id": "banana", "users": ["Aurelia", "Alison", "Stanton"]},
        {"_id": "strawberry", "users": ["Hays", "Karyn"]},
    ]


def test_enim_and_id_users(run):
    assert [r["name"] for r in run("enim_and_id_users")] == ["Aurelia", "Grace"]


def test_usa_companies(run):
    assert run("usa_companies") == [
        {"_id": "YURTURE", "userCount": 2},
        {"_id": "OPTICON", "userCount": 1},
    ]


def test_registrations_per_year(run):
    assert run("registrations_per_year") == [
        {"_id": 2014, "registrations": 2},
        {"_id": 2015, "registrations": 2},
        {"_id": 2016, "registrations": 1},
        {"_id": 2017, "registrations": 1},
        {"_id": 2018, "registrations": 2},
    ]


@pytest.mark.parametrize("name", sorted(QUERIES))
def test_every_query_handles_empty_collection(name):
    result = PipelineExecutor().execute([], get_query(name))
    assert all(isinstance(doc, dict) for doc in result)


def test_list_queries_sorted_with_descriptions():
    listed = list_queries()
    assert [name for name, _ in listed] == sorted(QUERIES)
    assert all(description for _, description in listed)


def test_unknown_query():
    with pytest.raises(QueryNotFoundError, match="no_such_query"):
        get_query("no_such_query")
