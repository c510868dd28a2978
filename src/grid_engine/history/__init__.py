"""Checkpoint/delta undo-redo timeline."""

from .models import (
    MERGEABLE_TYPES,
    STRUCTURAL_TYPES,
    HistoryActionType,
    HistoryEntry,
    HistoryInfo,
    HistoryRestoreResult,
    TimelineValidation,
)
from .restore import apply_restore, restored_selection
from .serialize import entry_from_dict, entry_to_dict, timeline_from_dict, timeline_to_dict
from .timeline import HistoryReconstructionError, HistoryTimeline, apply_changes

__all__ = [
    "HistoryActionType",
    "HistoryEntry",
    "HistoryInfo",
    "HistoryRestoreResult",
    "TimelineValidation",
    "STRUCTURAL_TYPES",
    "MERGEABLE_TYPES",
    "HistoryTimeline",
    "HistoryReconstructionError",
    "apply_changes",
    "apply_restore",
    "restored_selection",
    "timeline_to_dict",
    "timeline_from_dict",
    "entry_to_dict",
    "entry_from_dict",
]
