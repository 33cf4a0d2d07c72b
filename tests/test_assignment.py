from __future__ import annotations

from pathlib import Path

import pandas as pd

from assignment import calculate_assignments, reconcile_workers, run_assignment
from file_storage.local_storage_rw import LocalStorageRW
from task_generator import AreaConfig, SpecialAreaOptions, calculate_workers_needed
from validate_assignment import collect_assigned_workers, parse_leftover_pool, validate_assignment


def _assign(cfg, store, workers, areas=None, options=None):
    result = calculate_assignments(workers, areas or [], options or SpecialAreaOptions(), store, cfg)
    return result, result.to_mapping(cfg)


def test_workers_without_preferences_fill_wash_then_wipe(cfg, store) -> None:
    _, mapping = _assign(cfg, store, ["Alice", "Bob"], [AreaConfig(id="Z", cabins=10)])

    assert mapping["Z"]["__sections"] == ["ROSKAT+IMURI", "PESU", "PETAUS", "PYYHINTÄ"]
    assert mapping["Z"]["PESU|0"] == "Alice"
    # wipe tasks go by area id, D10 sorts before D9 and Z
    assert mapping["D10"]["MARKET|MARKET PYYHINTÄ|2"] == "Bob"
    assert mapping["Z"]["PYYHINTÄ|0"] == ""
    assert mapping["Z"]["ROSKAT+IMURI|0"] == ""
    assert "UNASSIGNED" not in mapping


def test_other_tasks_need_a_matching_preference(cfg, store) -> None:
    workers = [f"Worker {i}" for i in range(1, 10)]
    result, mapping = _assign(cfg, store, workers)

    # seven wipe tasks across D9 and D10
    assert len(result.assigned_workers()) == 7
    assert mapping["D10"]["MARKET|MARKET IMURI|0"] == ""
    assert mapping["D9"]["TORGET|TORGET IMURI|1"] == ""
    assert mapping["UNASSIGNED"]["UNASSIGNED WORKERS|workers"] == (
        "Worker 8 (NO PREFERENCES PROVIDED) | Worker 9 (NO PREFERENCES PROVIDED)"
    )


def test_special_zone_task_by_preference(cfg, store) -> None:
    store.set_preferences("Dana", ["MARKET IMURI"])
    store.set_preferences("Picky", ["MARKET"])

    _, mapping = _assign(cfg, store, ["Dana", "Picky"])

    assert mapping["D10"]["MARKET|MARKET IMURI|0"] == "Dana"
    assert mapping["UNASSIGNED"] == {
        "__sections": ["UNASSIGNED WORKERS"],
        "UNASSIGNED WORKERS|workers": "Picky (HAS PREFERENCES: [MARKET] - All tasks filled or no matching tasks)",
        "MATTOPESU+REP|0": "",
    }


def test_wash_follows_area_preference(cfg, store) -> None:
    store.set_preferences("Finn", ["PESU"], ["8 BACK"])
    store.set_preferences("Eve", ["PESU"], ["7 FRONT"])
    areas = [AreaConfig(id="8000+8300", cabins=10), AreaConfig(id="7600+7700+7800", cabins=10)]

    _, mapping = _assign(cfg, store, ["Finn", "Eve"], areas)

    assert mapping["7600+7700+7800"]["PESU|0"] == "Eve"
    assert mapping["8000+8300"]["PESU|0"] == "Finn"


def test_worker_with_preferences_never_fills_unwanted_wash(cfg, store) -> None:
    store.set_preferences("Gus", ["PETAUS"])

    _, mapping = _assign(cfg, store, ["Gus"], [AreaConfig(id="Z", cabins=10)])

    assert mapping["Z"]["PESU|0"] == ""
    assert mapping["Z"]["PETAUS|0"] == "Gus"


def test_mat_wash_preference_takes_wash_task(cfg, store) -> None:
    store.set_preferences("Mira", ["MATTOPESU"])

    _, mapping = _assign(cfg, store, ["Mira"], [AreaConfig(id="Z", cabins=10)])

    assert mapping["Z"]["PESU|0"] == "Mira"


def test_overflow_rep_needs_a_rep_preference(cfg, store) -> None:
    store.set_preferences("Rita", ["MATTOPESU + REP"])
    area = AreaConfig(id="8000+8300", cabins=10, full=True, additional_workers=10)

    _, mapping = _assign(cfg, store, ["Rita"], [area])

    assert mapping["8000+8300"]["REP|0"] == ""
    assert mapping["UNASSIGNED"]["UNASSIGNED WORKERS|workers"].startswith("Rita (HAS PREFERENCES:")


def test_roster_spelling_is_kept_in_output(cfg, store) -> None:
    store.set_preferences("Virtanen Aino", ["PESU"], ["DECK 5"])

    _, mapping = _assign(cfg, store, ["Aino Virtanen"], [AreaConfig(id="5000+5300", cabins=10)])

    assert mapping["5000+5300"]["PESU|0"] == "Aino Virtanen"


def test_reconcile_falls_back_to_first_and_last_name(store) -> None:
    store.set_preferences("Anna Virtanen", ["PESU"])
    store.set_preferences("Empty Name", [])

    with_prefs, without_prefs, matched = reconcile_workers(["Anna Maria Virtanen", "Empty Name", "Bob"], store)

    assert with_prefs == ["Anna Maria Virtanen"]
    assert without_prefs == ["Empty Name", "Bob"]
    assert matched == {"Anna Maria Virtanen": ("ANNA VIRTANEN", ["PESU"])}


def test_every_worker_accounted_for_exactly_once(cfg, store) -> None:
    workers = [f"Crew {i}" for i in range(40)]
    for i, worker in enumerate(workers[:25]):
        tasks = [["PESU"], ["PYYHINTÄ", "PESU"], ["PETAUS"], ["ROSKAT", "IMURI"], ["MARKET IMURI", "KEITTIÖ"]][i % 5]
        areas = [["8 BACK"], [], ["DECK 5", "7 FRONT"]][i % 3]
        store.set_preferences(worker, tasks, areas, areas[:1])
    areas = [
        AreaConfig(id="8000+8300", cabins=60, full=True, additional_workers=40),
        AreaConfig(id="7600+7700+7800", cabins=30, beds=50),
        AreaConfig(id="5000+5300", cabins=20),
    ]

    result, mapping = _assign(cfg, store, workers, areas)
    assigned = collect_assigned_workers(mapping, cfg)
    pool = parse_leftover_pool(mapping, cfg)

    assert len(assigned) == len(set(assigned))
    assert sorted(assigned + pool) == sorted(workers)
    assert len(assigned) + len(result.unassigned_tasks()) == len(result.tasks)
    assert validate_assignment(mapping, workers, cfg) == (True, [])


def test_leftover_lists_workers_with_preferences_first(cfg, store) -> None:
    store.set_preferences("Picky", ["SLIDING DOOR D6/D7 2"])
    workers = [f"Worker {i}" for i in range(1, 9)] + ["Picky"]

    result, _ = _assign(cfg, store, workers)

    assert [w.name for w in result.leftover] == ["Picky", "Worker 8"]


def test_assignment_is_deterministic(cfg, store) -> None:
    store.set_preferences("Anna", ["PESU", "PYYHINTÄ"], ["8 BACK"])
    store.set_preferences("Bea", ["PESU"])
    workers = ["Anna", "Bea", "Cara", "Dan"]
    areas = [AreaConfig(id="8000+8300", cabins=30), AreaConfig(id="8100+8400", cabins=30)]

    _, first = _assign(cfg, store, workers, areas)
    _, second = _assign(cfg, store, workers, areas)

    assert first == second


def test_duplicate_roster_names_are_assigned_once(cfg, store) -> None:
    result, mapping = _assign(cfg, store, ["Alice", "Alice", "Bob"])

    assert collect_assigned_workers(mapping, cfg) == ["Alice", "Bob"]
    assert result.leftover == []


def test_empty_roster(cfg, store) -> None:
    result, mapping = _assign(cfg, store, [], [AreaConfig(id="8000+8300", cabins=10)])

    assert result.assigned_workers() == []
    assert len(result.unassigned_tasks()) == len(result.tasks)
    assert set(mapping) == {"D9", "D10", "8000+8300"}
    assert mapping["D9"]["__sections"] == ["TORGET", "CONFERNCE", "PORTAIKOT"]


def test_run_assignment_writes_workbook(cfg, tmp_path: Path) -> None:
    (tmp_path / "roster.csv").write_text("Alice\nBob\n", encoding="utf-8")
    (tmp_path / "preferences.csv").write_text(
        "Worker Name,Task Preferences,Area Preferences for PESU,Area Preferences for PYYHINTÄ\nBob,PESU,8 BACK,\n",
        encoding="utf-8",
    )
    (tmp_path / "areas.csv").write_text("id,cabins\n8000+8300,10\n", encoding="utf-8")
    storage = LocalStorageRW(str(tmp_path))
    options = SpecialAreaOptions()

    res = run_assignment(cfg, storage, storage, options)

    assert res["ok"] is True
    assert res["errors"] == []
    assert res["workers_needed"] == 28
    assert res["mapping"]["8000+8300"]["PESU|0"] == "Bob"
    # 8000+8300 sorts before D10, so its wipe task is filled first
    assert res["mapping"]["8000+8300"]["PYYHINTÄ|0"] == "Alice"
    assert res["mapping"]["D10"]["MARKET|MARKET PYYHINTÄ|2"] == ""

    sheets = pd.read_excel(tmp_path / "assignments.xlsx", sheet_name=None)
    assert list(sheets) == ["Assignments", "Extra", "Summary"]
    assert len(sheets["Assignments"]) == 28
    summary = dict(zip(sheets["Summary"]["metric"], sheets["Summary"]["value"]))
    assert summary["workers_needed"] == 28
    assert summary["tasks_assigned"] == 2


def test_run_assignment_without_preference_file(cfg, tmp_path: Path) -> None:
    (tmp_path / "roster.csv").write_text("Alice\n", encoding="utf-8")
    (tmp_path / "areas.csv").write_text("id,cabins\n", encoding="utf-8")
    storage = LocalStorageRW(str(tmp_path))

    res = run_assignment(cfg, storage, storage, SpecialAreaOptions(), output_file="out/result.xlsx")

    assert res["ok"] is True
    assert res["workers_needed"] == calculate_workers_needed([], SpecialAreaOptions(), cfg)
    assert (tmp_path / "out" / "result.xlsx").is_file()
