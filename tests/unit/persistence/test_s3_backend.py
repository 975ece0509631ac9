"""Unit tests for S3CollectionSource using moto."""

from __future__ import annotations

import json

import boto3
import pytest
from moto import mock_aws

from docpipe.core.exceptions import CollectionLoadError, CollectionNotFoundError
from docpipe.persistence.s3_backend import S3CollectionSource

BUCKET = "test-collections"


@pytest.fixture
def s3():
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield client


@pytest.fixture
def source(s3):
    return S3CollectionSource(bucket=BUCKET, prefix="playground/", region="us-east-1")


def put(s3, key, body):
    s3.put_object(Bucket=BUCKET, Key=key, Body=body.encode("utf-8"))


class TestLoad:
    def test_loads_json_array(self, s3, source):
        put(s3, "playground/users.json", json.dumps([{"_id": {"$oid": "x"}, "age": 20}]))
        assert source.load("users") == [{"_id": "x", "age": 20}]

    def test_falls_back_to_json_lines(self, s3, source):
        put(s3, "playground/events.jsonl", '{"n": 1}\n{"n": 2}\n')
        assert source.load("events") == [{"n": 1}, {"n": 2}]

    def test_missing_collection(self, source):
        with pytest.raises(CollectionNotFoundError, match="s3://test-collections/playground/"):
            source.load("users")

    def test_invalid_content(self, s3, source):
        put(s3, "playground/users.json", '{"not": "an array"}')
        with pytest.raises(CollectionLoadError):
            source.load("users")

    def test_missing_bucket(self, s3):
        source = S3CollectionSource(bucket="no-such-bucket", region="us-east-1")
        with pytest.raises(CollectionLoadError):
            source.load("users")


class TestNames:
    def test_lists_collections_under_prefix(self, s3, source):
        put(s3, "playground/users.json", "[]")
        put(s3, "playground/events.jsonl", "")
        put(s3, "playground/nested/deep.json", "[]")
        put(s3, "playground/readme.txt", "hi")
        put(s3, "other/orders.json", "[]")
        assert source.names() == ["events", "users"]

    def test_empty_bucket(self, source):
        assert source.names() == []
