from __future__ import annotations

import logging

import pandas as pd
import pytest

from input_readers import (
    TEMPLATE_COLUMNS,
    parse_area_configs,
    parse_preferences,
    parse_roster,
    preference_template_frame,
    valid_task_names,
)
from preference_store import WorkerPreference


def test_parse_roster_keeps_first_column_names() -> None:
    df = pd.DataFrame([["Alice", "x"], ["  Bob ", "y"], [None, "z"], ["", ""]])
    assert parse_roster(df) == ["Alice", "Bob"]
    assert parse_roster(pd.DataFrame()) == []


def test_parse_roster_warns_about_non_text_names(caplog) -> None:
    df = pd.DataFrame([["Alice"], [4711], [None]], dtype=object)

    with caplog.at_level(logging.WARNING):
        names = parse_roster(df)

    assert names == ["Alice"]
    assert "Row 2: skipping non-text roster name 4711" in caplog.text


def test_parse_preferences_rows() -> None:
    df = pd.DataFrame(
        [
            ["Worker Name", "Task Preferences", "Area PESU", "Area PYYHINTÄ"],
            ["Alice", "PESU, PETAUS", "8 BACK,7 FRONT", ""],
            ["=== YOUR WORKERS ===", "", "", ""],
            ["Bob", "", "8 BACK", ""],
            [None, "PESU", "", ""],
            ["Cara", "PYYHINTÄ", float("nan"), "DECK 5"],
        ]
    )

    assert parse_preferences(df) == [
        WorkerPreference("Alice", ["PESU", "PETAUS"], ["8 BACK", "7 FRONT"], []),
        WorkerPreference("Bob", []),
        WorkerPreference("Cara", ["PYYHINTÄ"], [], ["DECK 5"]),
    ]


def test_parse_area_configs(cfg) -> None:
    df = pd.DataFrame(
        {
            "id": ["8000+8300", "8600+8700+8800", "X1"],
            "cabins": [40, 20, 5],
            "beds": [None, 30, None],
            "full": ["yes", False, ""],
            "additional_workers": [60, 0, None],
            "suites": ["", "SUITE 8626", None],
        }
    )

    areas = parse_area_configs(df, cfg)
    by_id = {a.id: a for a in areas}

    assert [a.id for a in areas] == cfg.AREA_IDS + ["X1"]
    assert by_id["8000+8300"].cabins == 40
    assert by_id["8000+8300"].full is True
    assert by_id["8000+8300"].additional_workers == 60
    assert by_id["8600+8700+8800"].beds == 30
    assert by_id["8600+8700+8800"].suites == {"SUITE 8626": True, "SUITE 8827": False}
    assert by_id["X1"].cabins == 5
    assert by_id["5000+5300"].cabins == 0


def test_parse_area_configs_rejects_bad_tables(cfg) -> None:
    with pytest.raises(ValueError, match="cabins"):
        parse_area_configs(pd.DataFrame({"id": ["8000+8300"]}), cfg)
    with pytest.raises(ValueError, match="negative"):
        parse_area_configs(pd.DataFrame({"id": ["8000+8300"], "cabins": [-3]}), cfg)
    with pytest.raises(ValueError, match="must be a number"):
        parse_area_configs(pd.DataFrame({"id": ["8000+8300"], "cabins": ["many"]}), cfg)


def test_valid_task_names(cfg) -> None:
    names = valid_task_names(cfg)

    assert names.count("TERRACE") == 1
    assert {"PESU", "PETAUS DOUBLE", "LATTIAKAIVOT", "SUITE 8626", "MARKET IMURI"} <= set(names)


def test_preference_template(cfg) -> None:
    frame = preference_template_frame(["Alice", "Bob"], cfg)

    assert list(frame.columns) == TEMPLATE_COLUMNS
    assert {"Alice", "Bob", "=== YOUR WORKERS ==="} <= set(frame["Worker Name"])
    assert "8 BACK" in frame["Instructions →"].tolist()
    assert "= 8000+8300, 8100+8400, 8200+8500" in frame[""].tolist()


def test_filled_template_parses_back(cfg) -> None:
    frame = preference_template_frame(["Alice", "Bob"], cfg)
    uploaded = pd.DataFrame([TEMPLATE_COLUMNS] + frame.values.tolist())

    records = parse_preferences(uploaded)

    assert [r.worker_name for r in records] == [
        "Example Worker 1",
        "Example Worker 2",
        "Example Worker 3",
        "Alice",
        "Bob",
    ]
    assert records[0].area_preferences == ["8 FRONT", "7 FRONT"]
    assert records[3].task_preferences == []
