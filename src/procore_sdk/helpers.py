"""Small data helpers used when building requests and shaping results."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping


def clean_object(obj: Mapping[str, Any] | None) -> dict[str, Any]:
    """Drop ``None`` and empty-string values.  ``0`` and ``False`` are kept."""
    if not obj:
        return {}
    return {k: v for k, v in obj.items() if v is not None and v != ""}


def _to_datetime(value: str | date | datetime) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    # Naive values are taken as UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_date(value: str | date | datetime) -> str:
    """ISO 8601 UTC timestamp with milliseconds, e.g. ``2024-01-15T10:30:00.000Z``."""
    dt = _to_datetime(value)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def format_date_short(value: str | date | datetime) -> str:
    """``YYYY-MM-DD`` in UTC."""
    return _to_datetime(value).strftime("%Y-%m-%d")


def snake_to_camel(text: str) -> str:
    return re.sub(r"_([a-z])", lambda m: m.group(1).upper(), text)


def camel_to_snake(text: str) -> str:
    return re.sub(r"[A-Z]", lambda m: "_" + m.group(0).lower(), text)


def transform_to_snake_case(obj: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively convert mapping keys from camelCase to snake_case."""
    out: dict[str, Any] = {}
    for key, value in obj.items():
        if isinstance(value, Mapping):
            out[camel_to_snake(key)] = transform_to_snake_case(value)
        else:
            out[camel_to_snake(key)] = value
    return out


def parse_id_list(value: str | Iterable[Any]) -> list[int]:
    """``"1, 2,x"`` -> ``[1, 2]``.  Entries that are not integers are skipped."""
    parts = value.split(",") if isinstance(value, str) else value
    ids = []
    for part in parts:
        try:
            ids.append(int(str(part).strip()))
        except ValueError:
            continue
    return ids


def validate_required(data: Mapping[str, Any], required: Iterable[str]) -> None:
    missing = [f for f in required if data.get(f) is None or data.get(f) == ""]
    if missing:
        raise ValueError(f"Missing required fields: {', '.join(missing)}")


# ---------------------------------------------------------------------------
# Execution items
# ---------------------------------------------------------------------------

@dataclass
class ExecutionItem:
    """One output record, paired with the input item that produced it."""

    json: dict[str, Any]
    paired_item: int

    def to_dict(self) -> dict[str, Any]:
        return {"json": self.json, "pairedItem": {"item": self.paired_item}}


def to_execution_data(data: Any, paired_item: int | None = None) -> list[ExecutionItem]:
    """Wrap an API result as execution items.

    Arrays become one item per element.  Without *paired_item* each element
    is paired with its own index.
    """
    if isinstance(data, list):
        return [
            ExecutionItem(json=item, paired_item=i if paired_item is None else paired_item)
            for i, item in enumerate(data)
        ]
    return [ExecutionItem(json=data, paired_item=paired_item or 0)]


def create_error_response(error: Exception, item_index: int) -> ExecutionItem:
    return ExecutionItem(json={"error": str(error)}, paired_item=item_index)
