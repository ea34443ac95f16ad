from __future__ import annotations
import logging
from datetime import datetime
from typing import Iterator, NamedTuple, Optional
import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .errors import CopyError, DeleteError, ItemError

log = logging.getLogger(__name__)

KNOWN_ERROR_CODES = frozenset(
    {
        "ObjectNotInActiveTierError",
        "InvalidObjectState",
        "NoSuchKey",
        "NoSuchBucket",
        "AccessDenied",
    }
)


class ObjectRecord(NamedTuple):
    key: str
    last_modified: datetime


class ErrorClass(NamedTuple):
    kind: str  # "known" | "unknown"
    code: Optional[str]
    message: str

    @property
    def known(self) -> bool:
        return self.kind == "known"

    def __str__(self) -> str:
        return f"{self.code} {self.message}" if self.code else self.message


def get_s3_client(
    session: Optional[boto3.Session] = None,
    total_max_attempts: int = 1,
    retries_mode: str = "standard",
    connect_timeout: int = 10,
    read_timeout: int = 60,
):
    """
    Create an S3 client from a resolved session with timeouts applied.
    `total_max_attempts` counts the first call, so the default of 1 sends every
    request once: a failed call is reported, not repeated.
    """
    cfg = Config(
        retries={"total_max_attempts": total_max_attempts, "mode": retries_mode},
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )
    session = session or boto3.Session()
    return session.client("s3", config=cfg)


def list_object_records(
    s3_client,
    bucket: str,
    page_size: int = 100,
    max_pages: Optional[int] = None,
) -> Iterator[ObjectRecord]:
    """
    Yield (key, last_modified) for objects in a bucket, in listing order.
    Stops after `max_pages` pages when given, otherwise pages until exhausted.
    """
    paginator = s3_client.get_paginator("list_objects_v2")
    pages = paginator.paginate(Bucket=bucket, PaginationConfig={"PageSize": page_size})
    for n, page in enumerate(pages, start=1):
        for obj in page.get("Contents", []) or []:
            key = obj.get("Key")
            if not key:
                continue
            yield ObjectRecord(key, obj["LastModified"])
        if max_pages is not None and n >= max_pages:
            if page.get("IsTruncated"):
                log.warning(
                    "Listing of %s stopped after %d page(s); more objects remain", bucket, n
                )
            return


def copy_object(s3_client, source_bucket: str, source_key: str, target_bucket: str, target_key: str) -> None:
    try:
        s3_client.copy_object(
            CopySource={"Bucket": source_bucket, "Key": source_key},
            Bucket=target_bucket,
            Key=target_key,
        )
    except Exception as e:
        raise CopyError(f"{source_bucket}/{source_key} -> {target_bucket}/{target_key}: {e}", key=source_key) from e


def delete_object(s3_client, bucket: str, key: str) -> None:
    try:
        s3_client.delete_object(Bucket=bucket, Key=key)
    except Exception as e:
        raise DeleteError(f"{bucket}/{key}: {e}", key=key) from e


def classify_error(exc: BaseException) -> ErrorClass:
    """
    Tag a failure as "known" when the store returned one of KNOWN_ERROR_CODES,
    "unknown" otherwise. Item errors are classified by their underlying cause.
    """
    if isinstance(exc, ItemError) and exc.__cause__ is not None:
        exc = exc.__cause__
    if isinstance(exc, ClientError):
        err = exc.response.get("Error", {}) or {}
        code = str(err.get("Code", "")) or None
        message = str(err.get("Message", "")) or str(exc)
        kind = "known" if code in KNOWN_ERROR_CODES else "unknown"
        return ErrorClass(kind, code, message)
    return ErrorClass("unknown", None, str(exc) or exc.__class__.__name__)
