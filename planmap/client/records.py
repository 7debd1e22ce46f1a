"""Helpers for the plain-dict records the API returns."""
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def temp_id() -> str:
    """Placeholder id for an optimistic record until the server answers."""
    return f"temp-{time.time_ns()}"


def find_by(records: Iterable[Dict[str, Any]], field: str, value: Any) -> Optional[Dict[str, Any]]:
    for record in records:
        if record.get(field) == value:
            return record
    return None


def merge_record(record: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    return {**record, **changes, "updated_at": utc_now_iso()}


def replace_by_id(records: List[Dict[str, Any]], updates: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return a new list with ``updates[record id]`` merged into matching records."""
    return [merge_record(record, updates[record["id"]]) if record["id"] in updates else record for record in records]


def swap_placeholder(records: List[Dict[str, Any]], placeholder_id: str | None, record: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Replace the optimistic record with the server's; append if it is gone."""
    if any(item["id"] == record["id"] for item in records):
        return [item for item in records if item["id"] != placeholder_id]
    if not any(item["id"] == placeholder_id for item in records):
        return [*records, record]
    return [record if item["id"] == placeholder_id else item for item in records]
