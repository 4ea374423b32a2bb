"""Response adapters: normalize heterogeneous collection payloads.

Backend endpoints disagree on envelope shape. Some return a bare JSON array,
others wrap it (``{"batches": [...]}``, ``{"activities": [...], "total": n}``,
``{"items": [...], "total": n}``). Each resource descriptor carries one
adapter that turns whatever its endpoint returns into a plain list of record
dicts, so nothing downstream branches on response shape.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from admindash.errors import ParseError

if TYPE_CHECKING:
    from collections.abc import Callable


def _normalize_records(items: list[Any]) -> list[dict]:
    records: list[dict] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ParseError(f"Record {index} is {type(item).__name__}, expected an object")
        record = dict(item)
        # Some endpoints leak the raw document id instead of the mapped one
        if "id" not in record and "_id" in record:
            record["id"] = str(record["_id"])
        records.append(record)
    return records


def adapt_list(raw: Any) -> list[dict]:
    """Adapter for endpoints that return a bare array."""
    if not isinstance(raw, list):
        raise ParseError(f"Expected a JSON array, got {type(raw).__name__}")
    return _normalize_records(raw)


def envelope(*keys: str) -> Callable[[Any], list[dict]]:
    """Build an adapter for endpoints that wrap their array under one of ``keys``.

    A bare array is accepted too, since several endpoints switched envelope
    shape between backend releases.
    """
    if not keys:
        raise ValueError("envelope() needs at least one key")

    def adapt(raw: Any) -> list[dict]:
        if isinstance(raw, list):
            return _normalize_records(raw)
        if not isinstance(raw, dict):
            raise ParseError(f"Expected a JSON object or array, got {type(raw).__name__}")
        for key in keys:
            if key in raw:
                items = raw[key]
                if items is None:
                    return []
                if not isinstance(items, list):
                    raise ParseError(f"Field '{key}' is {type(items).__name__}, expected an array")
                return _normalize_records(items)
        raise ParseError(f"Response has none of the expected fields: {', '.join(keys)}")

    adapt.__name__ = f"envelope_{'_'.join(keys)}"
    return adapt
