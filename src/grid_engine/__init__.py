"""UI-agnostic editing engine for spreadsheet-like grids."""

__all__ = [
    "adapters",
    "grid",
    "selection",
    "clipboard",
    "history",
    "ops",
    "runtime",
    "config",
    "events",
    "session",
]

__version__ = "0.1.0"
