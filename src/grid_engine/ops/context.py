"""Collaborators shared by every grid operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from grid_engine.grid.diff import EditablePredicate
from grid_engine.grid.store import GridStore
from grid_engine.history.timeline import HistoryTimeline
from grid_engine.runtime.scheduling import Scheduler, call_soon
from grid_engine.selection.service import SelectionService


@dataclass(slots=True)
class OpsContext:
    grid: GridStore
    selection: SelectionService
    history: HistoryTimeline
    editable: Optional[EditablePredicate] = None
    notify: Optional[Callable[[], None]] = None
    scheduler: Scheduler = call_soon

    def can_edit(self, row: int, col: int) -> bool:
        return self.editable is None or self.editable(row, col)

    def emit_sync(self, *, deferred: bool = False) -> None:
        if self.notify is None:
            return
        if deferred:
            self.scheduler(self.notify)
        else:
            self.notify()


__all__ = ["OpsContext"]
