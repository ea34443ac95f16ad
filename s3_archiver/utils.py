from __future__ import annotations
from typing import Any, Dict, Optional
from datetime import datetime, timedelta, timezone
import yaml


def read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def age_cutoff(days: int, now: Optional[datetime] = None) -> datetime:
    """Return now - `days` as an aware UTC datetime."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now - timedelta(days=days)


def dest_key_for(key: str, prefix: str | None) -> str:
    return f"{prefix}{key}" if prefix else key
