"""Plain dict/list conversion of a timeline (JSON-safe, no I/O)."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from grid_engine.grid.models import CellChange, SelectionRange, clone_matrix

from .models import HistoryActionType, HistoryEntry
from .timeline import HistoryTimeline

RANGE_TAG = "__range__"
FORMAT_VERSION = 1


def _encode_value(value: Any) -> Any:
    if isinstance(value, SelectionRange):
        return {RANGE_TAG: value.to_dict()}
    if isinstance(value, (list, tuple)):
        return [_encode_value(item) for item in value]
    if isinstance(value, Mapping):
        return {str(key): _encode_value(item) for key, item in value.items()}
    return value


def _decode_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        if set(value) == {RANGE_TAG}:
            return SelectionRange.from_dict(value[RANGE_TAG])
        return {key: _decode_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_decode_value(item) for item in value]
    return value


def entry_to_dict(entry: HistoryEntry) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": entry.id,
        "type": entry.type.value,
        "timestamp": entry.timestamp,
        "metadata": _encode_value(entry.metadata),
    }
    if entry.description is not None:
        payload["description"] = entry.description
    if entry.delta is not None:
        payload["delta"] = [change.to_dict() for change in entry.delta]
    if entry.snapshot is not None:
        payload["snapshot"] = clone_matrix(entry.snapshot)
    return payload


def entry_from_dict(data: Mapping[str, Any]) -> HistoryEntry:
    try:
        action = HistoryActionType(data.get("type", HistoryActionType.UNKNOWN.value))
    except ValueError:
        action = HistoryActionType.UNKNOWN
    delta = data.get("delta")
    snapshot = data.get("snapshot")
    return HistoryEntry(
        id=str(data["id"]),
        type=action,
        timestamp=int(data["timestamp"]),
        description=data.get("description"),
        delta=[CellChange.from_dict(item) for item in delta] if delta is not None else None,
        snapshot=clone_matrix(snapshot) if snapshot is not None else None,
        metadata=_decode_value(dict(data.get("metadata") or {})),
    )


def timeline_to_dict(timeline: HistoryTimeline) -> Dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "index": timeline.index,
        "entries": [entry_to_dict(entry) for entry in timeline.entries()],
    }


def timeline_from_dict(
    data: Mapping[str, Any],
    *,
    timeline: HistoryTimeline | None = None,
) -> HistoryTimeline:
    """Rebuild a timeline; pass ``timeline`` to load into an existing instance.

    Raises ``ValueError`` for an unknown format version or an index that does
    not point at an entry.
    """

    version = data.get("version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise ValueError(f"Unsupported timeline format version {version!r}")
    target = timeline if timeline is not None else HistoryTimeline()
    entries = [entry_from_dict(item) for item in data.get("entries", [])]
    target.load(entries, int(data.get("index", len(entries) - 1)))
    return target


__all__ = [
    "entry_to_dict",
    "entry_from_dict",
    "timeline_to_dict",
    "timeline_from_dict",
]
