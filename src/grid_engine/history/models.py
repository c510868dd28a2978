"""Data structures stored on the undo/redo timeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from grid_engine.grid.models import CellChange, Matrix, SelectionRange


class HistoryActionType(str, Enum):
    """Kinds of recorded operations."""

    CELL_EDIT = "cell_edit"
    CELL_BATCH_EDIT = "cell_batch_edit"
    ROW_INSERT = "row_insert"
    ROW_DELETE = "row_delete"
    FILL = "fill"
    DELETE = "delete"
    PASTE = "paste"
    BULK_OPERATION = "bulk_operation"
    UNKNOWN = "unknown"

    @property
    def is_structural(self) -> bool:
        return self in STRUCTURAL_TYPES

    @property
    def is_mergeable(self) -> bool:
        return self in MERGEABLE_TYPES


STRUCTURAL_TYPES = frozenset({HistoryActionType.ROW_INSERT, HistoryActionType.ROW_DELETE})
MERGEABLE_TYPES = frozenset({HistoryActionType.CELL_EDIT})


@dataclass(slots=True)
class HistoryEntry:
    """One timeline step: a checkpoint (``snapshot``), a delta, or both."""

    id: str
    type: HistoryActionType
    timestamp: int
    description: Optional[str] = None
    delta: Optional[List[CellChange]] = None
    snapshot: Optional[Matrix] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_checkpoint(self) -> bool:
        return self.snapshot is not None

    @property
    def is_replayable(self) -> bool:
        return self.snapshot is not None or self.delta is not None


@dataclass(slots=True)
class HistoryRestoreResult:
    """Grid state produced by undo/redo plus what the caller needs to refocus."""

    state: Matrix
    metadata: Dict[str, Any]
    changes: List[CellChange]
    direction: Literal["undo", "redo"]
    entry_type: HistoryActionType

    @property
    def selection_hint(self) -> Optional[SelectionRange]:
        key = "selection_range" if self.direction == "undo" else "redo_selection_range"
        for candidate in (key, "selection_range", "affected_range"):
            value = self.metadata.get(candidate)
            if isinstance(value, SelectionRange):
                return value
        return None


@dataclass(slots=True)
class HistoryInfo:
    total_entries: int
    current_index: int
    can_undo: bool
    can_redo: bool


@dataclass(slots=True)
class TimelineValidation:
    is_valid: bool
    issues: List[str] = field(default_factory=list)


__all__ = [
    "HistoryActionType",
    "STRUCTURAL_TYPES",
    "MERGEABLE_TYPES",
    "HistoryEntry",
    "HistoryRestoreResult",
    "HistoryInfo",
    "TimelineValidation",
]
