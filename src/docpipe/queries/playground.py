"""Named aggregation queries over the ``users`` collection.

Each entry answers one question about the sample dataset (people with
``isActive``, ``age``, ``gender``, ``eyeColor``, ``favoriteFruit``,
``tags``, ``registered`` and a nested ``company``). Most are written in the
Mongo shell literal form and parsed once at import.
"""

from __future__ import annotations

from docpipe.core.exceptions import QueryNotFoundError
from docpipe.models.builders import (
    add_fields,
    avg,
    field,
    group,
    if_null,
    pipeline,
    size,
)
from docpipe.models.literals import parse_pipeline
from docpipe.models.pipeline import Pipeline

_LITERAL_QUERIES: list[tuple[str, str, list[dict]]] = [
    (
        "active_users",
        "How many users are active?",
        [
            {"$match": {"isActive": True}},
            {"$count": "activeUsers"},
        ],
    ),
    (
        "average_age",
        "What is the average age of all users?",
        [
            {"$group": {"_id": None, "averageAge": {"$avg": "$age"}}},
        ],
    ),
    (
        "top_favorite_fruits",
        "Top 5 most common favorite fruits among all users.",
        [
            {"$group": {"_id": "$favoriteFruit", "count": {"$sum": 1}}},
            {"$sort": {"count": -1}},
            {"$limit": 5},
        ],
    ),
    (
        "gender_count",
        "Total number of males and females.",
        [
            {"$group": {"_id": "$gender", "genderCount": {"$sum": 1}}},
        ],
    ),
    (
        "top_country",
        "Which country has the highest number of registered users?",
        [
            {"$group": {"_id": "$company.location.country", "userCount": {"$sum": 1}}},
            {"$sort": {"userCount": -1}},
            {"$limit": 1},
        ],
    ),
    (
        "eye_colors",
        "All unique eye colors present in the collection.",
        [
            {"$group": {"_id": "$eyeColor"}},
            {"$sort": {"_id": 1}},
        ],
    ),
    (
        "average_tags_per_user",
        "Average number of tags per user (users without tags do not count).",
        [
            {"$unwind": "$tags"},
            {"$group": {"_id": "$_id", "numberOfTags": {"$sum": 1}}},
            {"$group": {"_id": None, "averageNumberOfTags": {"$avg": "$numberOfTags"}}},
        ],
    ),
    (
        "enim_tag_count",
        "How many users have 'enim' as one of their tags?",
        [
            {"$match": {"tags": "enim"}},
            {"$count": "userWithEnimTag"},
        ],
    ),
    (
        "inactive_velit_users",
        "Names and ages of inactive users tagged 'velit'.",
        [
            {"$match": {"isActive": False, "tags": "velit"}},
            {"$project": {"name": 1, "age": 1}},
        ],
    ),
    (
        "phone_940_users",
        "How many users have a company phone starting with '+1 (940)'?",
        [
            {"$match": {"company.phone": {"$regex": r"^\+1 \(940\)"}}},
            {"$count": "usersWithSpecialPhoneNumber"},
        ],
    ),
    (
        "recent_registrations",
        "Who registered most recently?",
        [
            {"$sort": {"registered": -1}},
            {"$limit": 4},
            {"$project": {"name": 1, "registered": 1, "favoriteFruit": 1}},
        ],
    ),
    (
        "users_by_fruit",
        "Users categorized by favorite fruit.",
        [
            {"$group": {"_id": "$favoriteFruit", "users": {"$push": "$name"}}},
            {"$sort": {"_id": 1}},
        ],
    ),
    (
        "second_tag_ad",
        "How many users have 'ad' as their second tag?",
        [
            {"$match": {"tags.1": "ad"}},
            {"$count": "secondTagAd"},
        ],
    ),
    (
        "enim_and_id_users",
        "Users who have both 'enim' and 'id' as tags.",
        [
            {"$match": {"tags": {"$all": ["enim", "id"]}}},
            {"$project": {"name": 1, "tags": 1}},
        ],
    ),
    (
        "usa_companies",
        "Companies located in the USA with their user counts.",
        [
            {"$match": {"company.location.country": "USA"}},
            {"$group": {"_id": "$company.title", "userCount": {"$sum": 1}}},
            {"$sort": {"userCount": -1, "_id": 1}},
        ],
    ),
    (
        "registrations_per_year",
        "Number of users registered in each year.",
        [
            {"$group": {"_id": {"$year": "$registered"}, "registrations": {"$sum": 1}}},
            {"$sort": {"_id": 1}},
        ],
    ),
]


def _build_catalogue() -> dict[str, Pipeline]:
    catalogue = {
        name: parse_pipeline(stages, name=name, description=description)
        for name, description, stages in _LITERAL_QUERIES
    }
    # users without a tags array count as zero tags here
    catalogue["average_tags_per_user_with_empty"] = pipeline(
        add_fields(numberOfTags=size(if_null("tags", []))),
        group(None, averageNumberOfTags=avg(field("numberOfTags"))),
        name="average_tags_per_user_with_empty",
        description="Average number of tags per user, counting missing tags as zero.",
    )
    return catalogue


QUERIES: dict[str, Pipeline] = _build_catalogue()


def get_query(name: str) -> Pipeline:
    """Look up a catalogue pipeline by name."""
    try:
        return QUERIES[name]
    except KeyError:
        raise QueryNotFoundError(
            f"Unknown query {name!r}; available: {', '.join(sorted(QUERIES))}"
        ) from None


def list_queries() -> list[tuple[str, str]]:
    """(name, description) pairs sorted by name."""
    return sorted((name, p.description) for name, p in QUERIES.items())
