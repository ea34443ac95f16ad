"""Shared fixtures: moto-backed S3, credentials files and a recording fake client."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

SRC = "test-source"
DST = "test-archive"
NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def days_ago(n: float) -> datetime:
    return NOW - timedelta(days=n)


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake ambient credentials so nothing can reach a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def s3(aws_credentials):
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=SRC)
        client.create_bucket(Bucket=DST)
        yield client


@pytest.fixture
def cred_file(tmp_path):
    path = tmp_path / "credentials"
    path.write_text(
        "[default]\n"
        "aws_access_key_id = AKIADEFAULT\n"
        "aws_secret_access_key = secret-default\n"
        "\n"
        "[archiver]\n"
        "aws_access_key_id = AKIAARCHIVER\n"
        "aws_secret_access_key = secret-archiver\n"
        "aws_session_token = token-archiver\n"
        "\n"
        "[broken]\n"
        "aws_secret_access_key = only-a-secret\n",
        encoding="utf-8",
    )
    return path


class FakeS3:
    """
    In-memory stand-in for the handful of S3 client calls the archiver makes.
    Records every store call; keys in fail_copy / fail_delete raise ClientError.
    """

    def __init__(self, objects, fail_copy=(), fail_delete=(), copy_error_code="ObjectNotInActiveTierError"):
        self.objects = dict(objects)  # key -> last_modified, in listing order
        self.fail_copy = set(fail_copy)
        self.fail_delete = set(fail_delete)
        self.copy_error_code = copy_error_code
        self.calls = []
        self.dest = {}

    def get_paginator(self, name):
        assert name == "list_objects_v2"
        return _FakePaginator(self)

    def copy_object(self, CopySource, Bucket, Key):
        self.calls.append(("copy", CopySource["Bucket"], CopySource["Key"], Bucket, Key))
        if CopySource["Key"] in self.fail_copy:
            raise ClientError(
                {"Error": {"Code": self.copy_error_code, "Message": "simulated copy failure"}},
                "CopyObject",
            )
        self.dest[Key] = self.objects[CopySource["Key"]]
        return {}

    def delete_object(self, Bucket, Key):
        self.calls.append(("delete", Bucket, Key))
        if Key in self.fail_delete:
            raise ClientError(
                {"Error": {"Code": "InternalError", "Message": "simulated delete failure"}},
                "DeleteObject",
            )
        self.objects.pop(Key, None)
        return {}

    def store_calls(self, kind=None):
        return [c for c in self.calls if kind is None or c[0] == kind]


class _FakePaginator:
    def __init__(self, fake):
        self.fake = fake

    def paginate(self, Bucket, PaginationConfig=None):
        self.fake.calls.append(("list", Bucket))
        size = (PaginationConfig or {}).get("PageSize", 1000)
        items = list(self.fake.objects.items())
        if not items:
            yield {"IsTruncated": False}
            return
        for i in range(0, len(items), size):
            chunk = items[i : i + size]
            yield {
                "Contents": [{"Key": k, "LastModified": lm} for k, lm in chunk],
                "IsTruncated": i + size < len(items),
            }


@pytest.fixture
def fake_s3():
    return FakeS3
