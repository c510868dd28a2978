"""Hybrid checkpoint/delta undo-redo timeline.

Entries are either checkpoints (a full grid copy) or deltas (changed cells
only). Any past state is rebuilt by taking the nearest checkpoint at or
before it and replaying the deltas that follow. History is linear: saving
while not at the tail discards the redo branch.
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from grid_engine.config import DEFAULT_CONFIG, EngineConfig
from grid_engine.grid.diff import changes_bounds, detect_changes
from grid_engine.grid.models import CellChange, Matrix, clone_matrix
from grid_engine.runtime import telemetry
from grid_engine.runtime.scheduling import Scheduler, call_soon

from .models import (
    HistoryActionType,
    HistoryEntry,
    HistoryInfo,
    HistoryRestoreResult,
    TimelineValidation,
)

Clock = Callable[[], int]

LOGGER_NAME = telemetry.child_logger_name("history")


class HistoryReconstructionError(RuntimeError):
    """Raised when no checkpoint exists at or before the requested index."""

    def __init__(self, message: str, *, target_index: int) -> None:
        super().__init__(message)
        self.target_index = target_index


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


def apply_changes(state: Matrix, changes: Sequence[CellChange]) -> None:
    """Write ``new_value`` of each change into ``state``, widening as needed."""

    for change in changes:
        while len(state) <= change.row:
            state.append([])
        line = state[change.row]
        if len(line) <= change.col:
            line.extend([""] * (change.col + 1 - len(line)))
        line[change.col] = change.new_value


class HistoryTimeline:
    """Owns the entry list, the "now" pointer, and the restore guard."""

    def __init__(
        self,
        *,
        config: EngineConfig = DEFAULT_CONFIG,
        clock: Optional[Clock] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.config = config
        self._clock: Clock = clock or wall_clock_ms
        self._scheduler: Scheduler = scheduler or call_soon
        self._entries: List[HistoryEntry] = []
        self._index = -1
        self._restoring = False

    # -- inspection ------------------------------------------------------

    @property
    def index(self) -> int:
        return self._index

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def current_entry(self) -> Optional[HistoryEntry]:
        if 0 <= self._index < len(self._entries):
            return self._entries[self._index]
        return None

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def is_restore_in_flight(self) -> bool:
        return self._restoring

    def info(self) -> HistoryInfo:
        validation = self.validate()
        if not validation.is_valid:
            telemetry.record_event(
                "history.invalid_timeline",
                level="warning",
                data={"issues": validation.issues},
                logger_name=LOGGER_NAME,
            )
        return HistoryInfo(
            total_entries=len(self._entries),
            current_index=self._index,
            can_undo=self.can_undo(),
            can_redo=self.can_redo(),
        )

    def validate(self) -> TimelineValidation:
        issues: List[str] = []
        for position in range(1, len(self._entries)):
            previous = self._entries[position - 1]
            current = self._entries[position]
            if current.timestamp <= previous.timestamp:
                issues.append(
                    f"Timestamp not monotonic at index {position}: "
                    f"{previous.timestamp} -> {current.timestamp}"
                )
        if self._entries and not (0 <= self._index < len(self._entries)):
            issues.append(
                f"History index out of bounds: {self._index} "
                f"(entries: {len(self._entries)})"
            )
        for position, entry in enumerate(self._entries):
            if not entry.is_replayable:
                issues.append(f"Entry at index {position} has neither snapshot nor delta")
        if self._entries and not self._entries[0].is_checkpoint:
            issues.append("First entry is not a checkpoint")
        return TimelineValidation(is_valid=not issues, issues=issues)

    # -- lifecycle -------------------------------------------------------

    def initialize(self, state: Sequence[Sequence[str]]) -> HistoryEntry:
        timestamp = self._clock()
        entry = HistoryEntry(
            id=f"init-{timestamp}",
            type=HistoryActionType.UNKNOWN,
            timestamp=timestamp,
            description="Initial state",
            snapshot=clone_matrix(state),
        )
        self._entries = [entry]
        self._index = 0
        telemetry.record_event(
            "history.initialize",
            data={"rows": len(entry.snapshot or [])},
            logger_name=LOGGER_NAME,
        )
        return entry

    def clear(self) -> None:
        cleared = len(self._entries)
        self._entries = []
        self._index = -1
        telemetry.record_event(
            "history.clear",
            level="info",
            data={"cleared_entries": cleared},
            logger_name=LOGGER_NAME,
        )

    def load(self, entries: Sequence[HistoryEntry], index: int) -> None:
        """Adopt an externally built entry list (e.g. from ``timeline_from_dict``)."""

        if entries and not 0 <= index < len(entries):
            raise ValueError(f"index {index} out of range for {len(entries)} entries")
        self._entries = list(entries)
        self._index = index if entries else -1
        self._restoring = False

    # -- recording -------------------------------------------------------

    def save(
        self,
        new_state: Sequence[Sequence[str]],
        *,
        type: HistoryActionType = HistoryActionType.UNKNOWN,
        changes: Optional[Sequence[CellChange]] = None,
        force_checkpoint: bool = False,
        description: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Optional[HistoryEntry]:
        """Record ``new_state``; returns the created or merged entry.

        ``None`` means nothing was recorded (restore in flight, or no change).
        When ``changes`` is empty or omitted the change set is the full diff
        against the last recorded state.
        """

        if self._restoring:
            telemetry.record_event(
                "history.save_skipped",
                data={"reason": "restore_in_flight", "type": type.value},
                logger_name=LOGGER_NAME,
            )
            return None

        if not self._entries:
            return self.initialize(new_state)
        try:
            last_state = self.reconstruct(self._index)
        except HistoryReconstructionError as exc:
            telemetry.record_event(
                "history.reinitialize",
                level="error",
                data={"reason": str(exc)},
                logger_name=LOGGER_NAME,
            )
            return self.initialize(new_state)

        with telemetry.span(
            "history::save",
            logger_name=LOGGER_NAME,
            component="history",
            metadata={"type": type.value},
        ) as handle:
            change_set = (
                [CellChange(c.row, c.col, c.old_value, c.new_value) for c in changes]
                if changes
                else detect_changes(last_state, new_state)
            )
            handle.add_metadata("changes", len(change_set))

            if not change_set and not (force_checkpoint and type.is_structural):
                telemetry.record_event(
                    "history.no_changes",
                    data={"type": type.value},
                    logger_name=LOGGER_NAME,
                )
                return None

            timestamp = self._clock()
            tail = self._entries[-1]
            if timestamp <= tail.timestamp:
                timestamp = tail.timestamp + 1

            current = self._entries[self._index]
            if self._can_merge(current, type, timestamp):
                self._truncate_redo_branch()
                self._merge(current, change_set, timestamp)
                return current

            checkpoint = force_checkpoint or self._delta_run_length() >= (
                self.config.checkpoint_interval
            )
            self._truncate_redo_branch()

            entry = HistoryEntry(
                id=f"{type.value}-{timestamp}-{uuid.uuid4().hex[:9]}",
                type=type,
                timestamp=timestamp,
                description=description,
                delta=change_set,
                metadata=self._build_metadata(type, change_set, metadata),
            )
            if checkpoint:
                entry.snapshot = clone_matrix(new_state)
            self._entries.append(entry)
            self._index += 1
            telemetry.record_event(
                "history.checkpoint" if checkpoint else "history.delta",
                data={
                    "entry_id": entry.id,
                    "type": type.value,
                    "changes": len(change_set),
                },
                logger_name=LOGGER_NAME,
            )
            self._evict_overflow()
            return entry

    def _can_merge(
        self, current: HistoryEntry, type: HistoryActionType, timestamp: int
    ) -> bool:
        if current.type is not type or not type.is_mergeable:
            return False
        return timestamp - current.timestamp <= self.config.merge_window_ms

    def _merge(
        self, entry: HistoryEntry, changes: Sequence[CellChange], timestamp: int
    ) -> None:
        if entry.delta is None:
            entry.delta = []
        known: Dict[tuple[int, int], CellChange] = {
            change.position: change for change in entry.delta
        }
        updated = 0
        for change in changes:
            existing = known.get(change.position)
            if existing is not None:
                existing.new_value = change.new_value
                updated += 1
            else:
                merged = CellChange(change.row, change.col, change.old_value, change.new_value)
                entry.delta.append(merged)
                known[merged.position] = merged
        if entry.snapshot is not None:
            apply_changes(entry.snapshot, changes)
        entry.timestamp = timestamp
        entry.metadata["affected_cells"] = len(entry.delta)
        bounds = changes_bounds(entry.delta)
        if bounds is not None:
            entry.metadata["affected_range"] = bounds
        telemetry.record_event(
            "history.merge",
            data={
                "entry_id": entry.id,
                "updated": updated,
                "added": len(changes) - updated,
                "total": len(entry.delta),
            },
            logger_name=LOGGER_NAME,
        )

    def _delta_run_length(self) -> int:
        count = 0
        for position in range(self._index, -1, -1):
            if self._entries[position].is_checkpoint:
                break
            count += 1
        return count

    def _truncate_redo_branch(self) -> None:
        removed = len(self._entries) - self._index - 1
        if removed <= 0:
            return
        del self._entries[self._index + 1 :]
        telemetry.record_event(
            "history.truncate",
            data={"removed_entries": removed},
            logger_name=LOGGER_NAME,
        )

    def _evict_overflow(self) -> None:
        overflow = len(self._entries) - self.config.max_history_size
        if overflow <= 0:
            return
        new_head = self._entries[overflow]
        if not new_head.is_checkpoint:
            new_head.snapshot = self.reconstruct(overflow)
        removed = self._entries[:overflow]
        del self._entries[:overflow]
        self._index -= overflow
        telemetry.record_event(
            "history.evict",
            data={
                "removed": [entry.id for entry in removed],
                "size": len(self._entries),
            },
            logger_name=LOGGER_NAME,
        )

    @staticmethod
    def _build_metadata(
        type: HistoryActionType,
        changes: Sequence[CellChange],
        extra: Optional[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {"affected_cells": len(changes)}
        if not type.is_structural:
            bounds = changes_bounds(changes)
            if bounds is not None:
                metadata["affected_range"] = bounds
        metadata.update(extra or {})
        return metadata

    # -- replay ----------------------------------------------------------

    def reconstruct(self, target_index: int) -> Matrix:
        if not 0 <= target_index < len(self._entries):
            raise HistoryReconstructionError(
                f"Index {target_index} outside timeline of {len(self._entries)}",
                target_index=target_index,
            )

        checkpoint_index = next(
            (
                position
                for position in range(target_index, -1, -1)
                if self._entries[position].is_checkpoint
            ),
            None,
        )
        if checkpoint_index is None:
            raise HistoryReconstructionError(
                f"No checkpoint at or before index {target_index}",
                target_index=target_index,
            )

        working = clone_matrix(self._entries[checkpoint_index].snapshot or [])
        for position in range(checkpoint_index + 1, target_index + 1):
            entry = self._entries[position]
            if entry.snapshot is not None:
                working = clone_matrix(entry.snapshot)
            elif entry.delta is not None:
                apply_changes(working, entry.delta)
            else:
                telemetry.record_event(
                    "history.malformed_entry",
                    level="warning",
                    data={"index": position, "entry_id": entry.id},
                    logger_name=LOGGER_NAME,
                )
        return working

    # -- undo / redo -----------------------------------------------------

    def undo(self, *, hold_guard: bool = False) -> Optional[HistoryRestoreResult]:
        """Step back one entry.

        With ``hold_guard`` the in-flight flag stays set until the caller
        invokes ``release_restore_guard``; otherwise its release is scheduled.
        """
        if self._index <= 0 or self._restoring:
            telemetry.record_event(
                "history.undo_rejected",
                data={"index": self._index, "restoring": self._restoring},
                logger_name=LOGGER_NAME,
            )
            return None
        undone = self._entries[self._index]
        return self._restore_to(self._index - 1, undone, "undo", hold_guard)

    def redo(self, *, hold_guard: bool = False) -> Optional[HistoryRestoreResult]:
        if self._index >= len(self._entries) - 1 or self._restoring:
            telemetry.record_event(
                "history.redo_rejected",
                data={"index": self._index, "restoring": self._restoring},
                logger_name=LOGGER_NAME,
            )
            return None
        redone = self._entries[self._index + 1]
        return self._restore_to(self._index + 1, redone, "redo", hold_guard)

    def _restore_to(
        self, target: int, entry: HistoryEntry, direction: str, hold_guard: bool
    ) -> Optional[HistoryRestoreResult]:
        self._restoring = True
        previous = self._index
        self._index = target
        try:
            state = self.reconstruct(target)
        except HistoryReconstructionError as exc:
            self._index = previous
            self._restoring = False
            telemetry.record_event(
                f"history.{direction}_failed",
                level="error",
                data={"reason": str(exc), "target": target},
                logger_name=LOGGER_NAME,
            )
            return None

        if not hold_guard:
            self._scheduler(self.release_restore_guard)
        telemetry.record_event(
            f"history.{direction}",
            data={"from": previous, "to": target, "entry_id": entry.id},
            logger_name=LOGGER_NAME,
        )
        return HistoryRestoreResult(
            state=state,
            metadata=dict(entry.metadata),
            changes=[
                CellChange(c.row, c.col, c.old_value, c.new_value)
                for c in entry.delta or []
            ],
            direction="undo" if direction == "undo" else "redo",
            entry_type=entry.type,
        )

    def release_restore_guard(self) -> None:
        self._restoring = False


__all__ = [
    "Clock",
    "HistoryTimeline",
    "HistoryReconstructionError",
    "apply_changes",
    "wall_clock_ms",
]
