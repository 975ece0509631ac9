"""Shared test doubles: memory source and a small users collection."""

from __future__ import annotations

from datetime import datetime, timezone

from docpipe.persistence.memory_backend import MemoryCollectionSource


def _user(uid, name, active, age, gender, eye, fruit, country, title, phone, registered, tags):
    doc = {
        "_id": uid,
        "name": name,
        "isActive": active,
        "age": age,
        "gender": gender,
        "eyeColor": eye,
        "favoriteFruit": fruit,
        "registered": registered,
        "company": {"title": title, "phone": phone, "location": {"country": country}},
    }
    if tags is not None:
        doc["tags"] = tags
    return doc


def sample_users() -> list[dict]:
    """Eight users: 4 active, 6 female / 2 male, one without tags, one with []."""
    utc = timezone.utc
    return [
        _user(1, "Aurelia", False, 20, "female", "green", "banana", "USA", "YURTURE",
              "+1 (940) 501-3963", datetime(2015, 2, 11, tzinfo=utc), ["enim", "id", "velit", "ad"]),
        _user(2, "Kitty", False, 38, "female", "blue", "apple", "Italy", "DIGITALUS",
              "+1 (949) 568-3470", datetime(2018, 1, 23, tzinfo=utc), ["ut", "consequat"]),
        _user(3, "Hays", False, 24, "male", "green", "strawberry", "France", "EXIAND",
              "+1 (801) 583-3393", datetime(2015, 2, 23, tzinfo=utc), ["amet", "ad", "elit"]),
        _user(4, "Karyn", True, 39, "female", "green", "strawberry", "Germany", "RODEMCO",
              "+1 (801) 505-3760", datetime(2014, 3, 11, tzinfo=utc), ["cillum"]),
        _user(5, "Alison", False, 33, "female", "brown", "banana", "USA", "OPTICON",
              "+1 (940) 520-2963", datetime(2018, 1, 28, tzinfo=utc), ["velit", "enim"]),
        _user(6, "Grace", True, 20, "female", "blue", "apple", "USA", "YURTURE",
              "+1 (972) 591-2354", datetime(2016, 5, 2, tzinfo=utc), ["laboris", "ad", "enim", "id"]),
        _user(7, "Stanton", True, 29, "male", "brown", "banana", "Germany", "MEDIFAX",
              "+1 (963) 514-2373", datetime(2017, 11, 24, tzinfo=utc), []),
        _user(8, "Deana", True, 26, "female", "brown", "apple", "Italy", "ORBIXTAR",
              "+1 (940) 475-2330", datetime(2014, 7, 17, tzinfo=utc), None),
    ]


__all__ = ["MemoryCollectionSource", "sample_users"]
