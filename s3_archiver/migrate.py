from __future__ import annotations
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple
from tqdm import tqdm

from .config import MigrationConfig
from .core import classify_error, copy_object, delete_object, get_s3_client, list_object_records
from .credentials import resolve_credentials
from .errors import ItemError, ListError, get_logger, log_and_reraise
from .utils import age_cutoff, dest_key_for

log = get_logger(__name__)


def _apply_each(
    keys: List[str],
    op: Callable[[str], None],
    desc: str,
    progress: bool = False,
) -> Tuple[List[str], List[str]]:
    """
    Run `op` for every key, partitioning keys into (succeeded, errors).
    A failing key is logged and recorded; the next key is still attempted.
    """
    succeeded: List[str] = []
    errors: List[str] = []

    bar = tqdm(total=len(keys), desc=desc, unit="obj") if progress and keys else None
    for key in keys:
        try:
            op(key)
            succeeded.append(key)
        except ItemError as e:
            err = classify_error(e)
            if err.known:
                log.warning("%s failed for %s: %s", desc, key, err)
            else:
                log.error("%s failed for %s: %s", desc, key, e)
            errors.append(f"{key}: {err}")
        finally:
            if bar:
                bar.update(1)
    if bar:
        bar.close()

    return succeeded, errors


@log_and_reraise(ListError)
def list_older_than(
    s3_client,
    bucket: str,
    cutoff: datetime,
    page_size: int = 100,
    max_pages: Optional[int] = None,
) -> List[str]:
    """
    Return keys in `bucket` last modified strictly before `cutoff`, in listing order.
    """
    return [
        rec.key
        for rec in list_object_records(s3_client, bucket, page_size=page_size, max_pages=max_pages)
        if rec.last_modified < cutoff
    ]


def copy_all(
    s3_client,
    source_bucket: str,
    dest_bucket: str,
    prefix: str,
    keys: List[str],
    progress: bool = False,
) -> Tuple[List[str], List[str]]:
    """
    Copy each key to dest_bucket/(prefix + key).
    Returns (copied source keys, error messages).
    """
    def _copy(key: str) -> None:
        copy_object(s3_client, source_bucket, key, dest_bucket, dest_key_for(key, prefix))

    return _apply_each(keys, _copy, "Copy", progress=progress)


def delete_all(
    s3_client,
    source_bucket: str,
    keys: List[str],
    progress: bool = False,
) -> Tuple[List[str], List[str]]:
    """Delete each key from source_bucket. Returns (deleted keys, error messages)."""
    return _apply_each(keys, lambda k: delete_object(s3_client, source_bucket, k), "Delete", progress=progress)


def migrate_older_than(
    config: MigrationConfig,
    s3_client=None,
    now: Optional[datetime] = None,
) -> Dict[str, object]:
    """
    Move objects older than `config.older_than_days` from the source bucket to
    dest_bucket/new_prefix.
    Steps: list old keys → copy each → delete only the successfully copied sources.

    ConfigError, CredentialError and ListError propagate before anything is copied;
    per-object failures are collected in errors_copy / errors_delete.
    """
    config.validate()

    if s3_client is None:
        session = resolve_credentials(
            config.skip_profile_check,
            config.credentials_file,
            config.profile,
            region=config.region,
        )
        s3_client = get_s3_client(
            session,
            total_max_attempts=config.total_max_attempts,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
        )

    cutoff = age_cutoff(config.older_than_days, now=now)
    log.info("Checking %s for objects older than %s", config.source_bucket, cutoff.isoformat())

    listed = list_older_than(
        s3_client,
        config.source_bucket,
        cutoff,
        page_size=config.page_size,
        max_pages=config.max_pages,
    )
    log.info("Found %d object(s) to move", len(listed))

    copied: List[str] = []
    copy_errors: List[str] = []
    deleted: List[str] = []
    delete_errors: List[str] = []

    if listed:
        copied, copy_errors = copy_all(
            s3_client,
            config.source_bucket,
            config.dest_bucket,
            config.new_prefix,
            listed,
            progress=config.progress,
        )

    # Delete only sources that were successfully copied
    if copied:
        deleted, delete_errors = delete_all(
            s3_client,
            config.source_bucket,
            copied,
            progress=config.progress,
        )

    return {
        "listed": listed,
        "copied": copied,
        "errors_copy": copy_errors,
        "deleted": deleted,
        "errors_delete": delete_errors,
        "stats": {
            "source_bucket": config.source_bucket,
            "dest_bucket": config.dest_bucket,
            "new_prefix": config.new_prefix,
            "cutoff": cutoff.isoformat(),
            "older_than_days": config.older_than_days,
            "max_pages": config.max_pages,
            "total": len(listed),
        },
    }
