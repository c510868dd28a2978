"""Executable Textual app that hosts a grid session."""

from __future__ import annotations

import argparse
import os
from typing import Any, Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use grid_engine.adapters.textual.app"
    ) from exc

from grid_engine.config import EngineConfig
from grid_engine.runtime import telemetry
from grid_engine.history import HistoryRestoreResult
from grid_engine.session import HISTORY_RESTORED, GridSession

from .controller import CLIPBOARD_ACTIONS, GridUIHooks, TextualGridAdapter


class GridEngineApp(App[None]):
    """Minimal Textual UI embedding the grid engine."""

    TITLE = "grid-engine"

    CSS = """
	Screen {
		layout: vertical;
	}

	#grid-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#draft-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, session: Optional[GridSession] = None) -> None:
        super().__init__()
        self.session = session
        self.adapter: TextualGridAdapter | None = None
        self._grid_widget: Static | None = None
        self._status_widget: Static | None = None
        self._draft_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="grid-area"):
            self._grid_widget = Static("", id="grid-view")
            yield self._grid_widget
        self._status_widget = Static("", id="status-line")
        self._draft_widget = Static("", id="draft-line")
        yield self._status_widget
        yield self._draft_widget
        yield Footer()

    async def on_mount(self) -> None:
        if self.session is None:
            self.session = GridSession(config=EngineConfig.from_env())
        hooks = GridUIHooks(
            update_grid=self._update_grid,
            update_status=self._update_status,
            show_draft=self._show_draft,
            handle_event=self._handle_event,
            log=self._log_line,
        )
        self.adapter = TextualGridAdapter(self.session, hooks)

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.close()
            self.adapter = None

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        outcome = self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        if outcome.action in CLIPBOARD_ACTIONS:
            await self.adapter.run_clipboard(outcome.action)
        if outcome.consumed:
            event.stop()

    def _update_grid(self, text: str) -> None:
        if self._grid_widget:
            self._grid_widget.update(text)

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)

    def _show_draft(self, draft: str) -> None:
        if self._draft_widget:
            self._draft_widget.update(f"= {draft}" if draft else "")

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == HISTORY_RESTORED and isinstance(payload, HistoryRestoreResult):
            self._update_status(f"{payload.direction}: {payload.entry_type.value}")

    def _log_line(self, line: str) -> None:
        telemetry.record_event("textual.log", data={"line": line})

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        key = event.key
        if key == "ctrl+q":
            return None
        modifiers = []
        parts = key.split("+")
        if "ctrl" in parts[:-1]:
            modifiers.append("CTRL")
        if "shift" in parts[:-1]:
            modifiers.append("SHIFT")
        base = parts[-1]
        if "CTRL" in modifiers:
            return (base.upper(), base, tuple(modifiers))
        if base in {"up", "down", "left", "right"}:
            return (base.upper(), None, tuple(modifiers))
        if base == "escape":
            return ("ESC", None, tuple(modifiers))
        if base in {"enter", "return"}:
            return ("ENTER", None, tuple(modifiers))
        if base in {"delete", "backspace"}:
            return (base.upper(), None, tuple(modifiers))
        if event.character:
            return (event.character, event.character, tuple(modifiers))
        return (base.upper(), None, tuple(modifiers))


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the grid engine Textual demo.")
    parser.add_argument(
        "--rows",
        type=int,
        default=None,
        help="Initial row count (default: GRID_ENGINE_DEFAULT_ROWS or 15)",
    )
    parser.add_argument(
        "--cols",
        type=int,
        default=None,
        help="Initial column count (default: GRID_ENGINE_DEFAULT_COLS or 10)",
    )
    parser.add_argument(
        "--log-preset",
        default=os.environ.get("GRID_ENGINE_LOG_PRESET"),
        help="Telemetry preset: development, production or performance",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    config = EngineConfig.from_env()
    rows = args.rows or config.default_rows
    cols = args.cols or config.default_cols
    session = GridSession([[""] * cols for _ in range(rows)], config=config)
    GridEngineApp(session).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
