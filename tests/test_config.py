import pytest

from grid_engine.config import DEFAULT_CONFIG, EngineConfig
from grid_engine.session import GridSession


def test_defaults() -> None:
    assert DEFAULT_CONFIG.merge_window_ms == 500
    assert DEFAULT_CONFIG.checkpoint_interval == 10
    assert DEFAULT_CONFIG.max_history_size == 50
    assert (DEFAULT_CONFIG.default_rows, DEFAULT_CONFIG.default_cols) == (15, 10)


def test_from_env_reads_prefixed_values_and_ignores_garbage() -> None:
    config = EngineConfig.from_env(
        {
            "GRID_ENGINE_MERGE_WINDOW_MS": "250",
            "GRID_ENGINE_MAX_HISTORY": "many",
            "GRID_ENGINE_DEFAULT_ROWS": "3",
        }
    )

    assert config.merge_window_ms == 250
    assert config.max_history_size == 50
    assert config.default_rows == 3


@pytest.mark.parametrize(
    "overrides",
    [
        {"merge_window_ms": -1},
        {"checkpoint_interval": 0},
        {"max_history_size": 0},
        {"default_cols": 0},
    ],
)
def test_rejects_out_of_range_values(overrides: dict[str, int]) -> None:
    with pytest.raises(ValueError):
        EngineConfig(**overrides)


def test_session_uses_default_dimensions() -> None:
    session = GridSession(config=EngineConfig(default_rows=2, default_cols=3))

    assert (session.grid.row_count, session.grid.col_count) == (2, 3)
    assert session.grid.column_labels == ("A", "B", "C")
    assert len(session.history.entries()) == 1
