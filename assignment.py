# assignment.py
import argparse
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Set, Tuple

import pandas as pd

from file_storage.blob_storage_rw import BlobStorageRW
from file_storage.file_storage_interface import FileStorageInterface
from file_storage.local_storage_rw import LocalStorageRW
from input_readers import parse_area_configs, parse_preferences, parse_roster, read_table
from preference_store import PreferenceStore, normalize_worker_name
from task_generator import (
    OTHER_CATEGORY,
    WASH_CATEGORY,
    WIPE_CATEGORY,
    AreaConfig,
    SpecialAreaOptions,
    Task,
    TaskKey,
    calculate_workers_needed,
    generate_tasks,
    load_config,
    special_sections,
    task_category,
)
from validate_assignment import validate_assignment


@dataclass
class LeftoverWorker:
    name: str
    preferences: List[str] = field(default_factory=list)

    @property
    def has_preferences(self) -> bool:
        return bool(self.preferences)

    def describe(self) -> str:
        if self.preferences:
            return (
                f"{self.name} (HAS PREFERENCES: [{', '.join(self.preferences)}]"
                " - All tasks filled or no matching tasks)"
            )
        return f"{self.name} (NO PREFERENCES PROVIDED)"


@dataclass
class AssignmentResult:
    tasks: List[Task]
    sections: Dict[str, List[str]]
    assignments: Dict[str, Dict[TaskKey, str]]
    leftover: List[LeftoverWorker] = field(default_factory=list)

    def worker_for(self, task: Task) -> str:
        return self.assignments[task.area_id][task.key]

    def assigned_workers(self) -> List[str]:
        return [w for area in self.assignments.values() for w in area.values() if w]

    def unassigned_tasks(self) -> List[Task]:
        return [t for t in self.tasks if not self.worker_for(t)]

    def to_mapping(self, cfg) -> Dict[str, Dict[str, Any]]:
        """Serialize to area -> task key -> worker, with section metadata and the leftover pool."""
        mapping: Dict[str, Dict[str, Any]] = {}
        for area_id, tasks in self.assignments.items():
            area = {cfg.SECTIONS_KEY: list(self.sections.get(area_id, []))}
            area.update({key.serialize(): worker for key, worker in tasks.items()})
            mapping[area_id] = area

        if self.leftover:
            mapping[cfg.UNASSIGNED_AREA] = {
                cfg.SECTIONS_KEY: [cfg.UNASSIGNED_HEADING],
                cfg.UNASSIGNED_WORKERS_KEY: cfg.POOL_SEPARATOR.join(w.describe() for w in self.leftover),
                cfg.MAT_WASH_PLACEHOLDER_KEY: "",
            }
        return mapping


# ---- name reconciliation ---------------------------------------------------


def _first_last_match(uploaded: str, stored: str) -> bool:
    if uploaded == stored:
        return True
    uploaded_words = [w for w in uploaded.split(" ") if len(w) > 1]
    stored_words = [w for w in stored.split(" ") if len(w) > 1]
    if len(uploaded_words) < 2 or len(stored_words) < 2:
        return False
    u_first, u_last = uploaded_words[0], uploaded_words[-1]
    s_first, s_last = stored_words[0], stored_words[-1]
    return (u_first == s_first and u_last == s_last) or (u_first == s_last and u_last == s_first)


def reconcile_workers(workers: List[str], store: PreferenceStore):
    """
    Resolve each roster name to stored preferences.

    Store lookup first (exact, normalized, token permutations), then a scan over every
    stored worker comparing first and last name tokens in either order.

    Returns:
        with_preferences: roster names with a non-empty preference list, roster order
        without_preferences: the rest, roster order
        matched: roster name -> (stored name, task preferences)
    """
    matched: Dict[str, Tuple[str, List[str]]] = {}

    for worker in workers:
        prefs, stored_name = store.get_preferences_with_matching(worker)
        if prefs and stored_name:
            matched[worker] = (stored_name, prefs)
            continue

        uploaded = normalize_worker_name(worker)
        for stored_name in store.stored_names():
            if _first_last_match(uploaded, stored_name):
                prefs = store.get_preferences(stored_name)
                if prefs:
                    logging.info(f"First/last name match: {worker!r} -> {stored_name!r}")
                    matched[worker] = (stored_name, prefs)
                break

    with_preferences = [w for w in workers if w in matched]
    without_preferences = [w for w in workers if w not in matched]
    return with_preferences, without_preferences, matched


# ---- engine ----------------------------------------------------------------


def _area_sections(tasks: List[Task], special_options: SpecialAreaOptions, cfg) -> Dict[str, List[str]]:
    sections = {zone: [s.heading for s in zs] for zone, zs in special_sections(special_options, cfg).items()}
    for task in tasks:
        headings = sections.setdefault(task.area_id, [])
        if task.section_name not in headings:
            headings.append(task.section_name)
    return sections


def calculate_assignments(
    workers: List[str],
    area_configs: List[AreaConfig],
    special_options: SpecialAreaOptions,
    store: PreferenceStore,
    cfg,
) -> AssignmentResult:
    """
    Greedy, deterministic assignment of the roster to the generated tasks.

    1. wash tasks by area id: area-ranked candidates, then any worker wanting the task,
       then workers without preferences
    2. wipe tasks by area id: same tiers, ranked on wipe area preferences
    3. every other task in generation order: only workers with a matching preference

    A worker is never assigned twice. Everybody left over goes to the extra pool,
    workers with preferences first.
    """
    roster = list(dict.fromkeys(workers))
    if len(roster) != len(workers):
        logging.warning(f"Roster has {len(workers) - len(roster)} duplicate name(s), ignoring repeats")

    with_preferences, without_preferences, matched = reconcile_workers(roster, store)
    logging.info(f"Workers with preferences: {len(with_preferences)}")
    logging.info(f"Workers without preferences: {len(without_preferences)}")

    roster_by_stored: Dict[str, List[str]] = {}
    for worker in with_preferences:
        roster_by_stored.setdefault(matched[worker][0], []).append(worker)

    tasks = generate_tasks(area_configs, special_options, cfg)
    result = AssignmentResult(
        tasks=tasks,
        sections=_area_sections(tasks, special_options, cfg),
        assignments={area_id: {} for area_id in cfg.SPECIAL_ZONES},
    )
    for task in tasks:
        result.assignments.setdefault(task.area_id, {})[task.key] = ""

    assigned: Set[str] = set()

    def take(task: Task, worker: str, reason: str) -> None:
        assigned.add(worker)
        result.assignments[task.area_id][task.key] = worker
        logging.debug(f"{task.task_name!r} in {task.area_id} -> {worker} ({reason})")

    def first_wanting(task_names: List[str]) -> Optional[str]:
        for worker in with_preferences:
            if worker in assigned:
                continue
            prefs = matched[worker][1]
            if any(store.wants_task(prefs, name) for name in task_names):
                return worker
        return None

    def assign_with_area_preferences(task: Task) -> None:
        for stored_name in store.get_workers_for_area_and_task(task.area_id, task.base_task_type):
            worker = next((w for w in roster_by_stored.get(stored_name, []) if w not in assigned), None)
            if worker:
                take(task, worker, "area preference")
                return

        worker = first_wanting([task.base_task_type])
        if worker:
            take(task, worker, f"general {task.base_task_type} preference")
            return

        worker = next((w for w in without_preferences if w not in assigned), None)
        if worker:
            take(task, worker, "no preferences")

    categories = [task_category(t.base_task_type, cfg) for t in tasks]

    # sorted() is stable, equal area ids keep generation order
    wash_tasks = sorted((t for t, c in zip(tasks, categories) if c == WASH_CATEGORY), key=lambda t: t.area_id)
    for task in wash_tasks:
        assign_with_area_preferences(task)

    wipe_tasks = sorted((t for t, c in zip(tasks, categories) if c == WIPE_CATEGORY), key=lambda t: t.area_id)
    for task in wipe_tasks:
        assign_with_area_preferences(task)

    for task, category in zip(tasks, categories):
        if category != OTHER_CATEGORY:
            continue
        worker = first_wanting([task.task_name, task.base_task_type])
        if worker:
            take(task, worker, "preference")

    result.leftover = [LeftoverWorker(w, list(matched[w][1])) for w in with_preferences if w not in assigned]
    result.leftover += [LeftoverWorker(w) for w in without_preferences if w not in assigned]

    logging.info(f"Tasks assigned: {len(assigned)} of {len(tasks)}")
    logging.info(f"Workers unassigned: {len(result.leftover)}")
    logging.info(f"Tasks unassigned: {len(tasks) - len(assigned)}")
    return result


# ---- tabular output --------------------------------------------------------


def assignments_to_frame(result: AssignmentResult) -> pd.DataFrame:
    rows = [
        {
            "area": t.area_id,
            "section": t.section_name,
            "task": t.task_name,
            "task_key": t.key.serialize(),
            "worker": result.worker_for(t),
        }
        for t in result.tasks
    ]
    return pd.DataFrame(rows, columns=["area", "section", "task", "task_key", "worker"])


def leftover_to_frame(result: AssignmentResult) -> pd.DataFrame:
    rows = [
        {
            "worker": w.name,
            "has_preferences": w.has_preferences,
            "preferences": ", ".join(w.preferences),
            "entry": w.describe(),
        }
        for w in result.leftover
    ]
    return pd.DataFrame(rows, columns=["worker", "has_preferences", "preferences", "entry"])


def summary_frame(result: AssignmentResult, roster_size: int, workers_needed: int) -> pd.DataFrame:
    assigned = len(result.assigned_workers())
    return pd.DataFrame(
        {
            "metric": [
                "workers_in_roster",
                "workers_needed",
                "theoretical_remaining",
                "tasks_total",
                "tasks_assigned",
                "tasks_unassigned",
                "extra_workers",
            ],
            "value": [
                roster_size,
                workers_needed,
                max(0, roster_size - workers_needed),
                len(result.tasks),
                assigned,
                len(result.tasks) - assigned,
                len(result.leftover),
            ],
        }
    )


# ---- runner ----------------------------------------------------------------


def get_storage_client(inout: Literal["input", "output"], local_dir: str) -> FileStorageInterface:
    storage_type = os.getenv("STORAGE_TYPE", "local")

    if storage_type == "local":
        return LocalStorageRW(local_dir)
    elif storage_type == "blob":
        return BlobStorageRW(
            connection_string=os.environ["AzureWebJobsStorage"],
            container_name=os.getenv(f"{inout.upper()}_CONTAINER", "cleaning"),
            folder_path=os.getenv(f"{inout.upper()}_FOLDER", "ship_cleaning"),
        )
    else:
        raise ValueError(f"Unsupported storage type: {storage_type}. Avaliable types are 'local' or 'blob'")


def run_assignment(
    cfg,
    input_storage: FileStorageInterface,
    output_storage: FileStorageInterface,
    special_options: SpecialAreaOptions,
    roster_file: str = "roster.csv",
    preferences_file: str = "preferences.csv",
    areas_file: str = "areas.csv",
    output_file: str = "assignments.xlsx",
) -> Dict[str, Any]:
    """Read inputs, assign, validate and write the workbook. Returns the serialized mapping and checks."""
    workers = parse_roster(read_table(input_storage, roster_file, header=None))
    store = PreferenceStore(cfg)
    if input_storage.file_exists(preferences_file):
        store.set_multiple_preferences(parse_preferences(read_table(input_storage, preferences_file, header=None)))
    else:
        logging.warning(f"No preference file {preferences_file}, every worker treated as without preferences")
    area_configs = parse_area_configs(read_table(input_storage, areas_file), cfg)

    needed = calculate_workers_needed(area_configs, special_options, cfg)
    if needed > len(workers):
        logging.warning(f"Configuration needs {needed} workers but the roster has {len(workers)}")

    result = calculate_assignments(workers, area_configs, special_options, store, cfg)
    mapping = result.to_mapping(cfg)
    ok, errors = validate_assignment(mapping, workers, cfg)

    output_storage.write_excel(
        output_file,
        Assignments=assignments_to_frame(result),
        Extra=leftover_to_frame(result),
        Summary=summary_frame(result, len(workers), needed),
    )
    return {"mapping": mapping, "ok": ok, "errors": errors, "workers_needed": needed}


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default="ship_cleaning")
    parser.add_argument(
        "--input_dir",
        default=None,
        help="Directory with roster, preferences and areas files (local storage)",
    )
    parser.add_argument("--output_dir", default=None)
    parser.add_argument("--roster", default="roster.csv")
    parser.add_argument("--preferences", default="preferences.csv")
    parser.add_argument("--areas", default="areas.csv")
    parser.add_argument("--output", default="assignments.xlsx")
    parser.add_argument("--floor-drains", action="store_true", help="Add LATTIAKAIVOT to KEITTIÖ")
    parser.add_argument("--conference-vacuum", action="store_true", help="Add KONFFA IMURI to CONFERNCE")
    parser.add_argument("--vista-deck", action="store_true", help="Add VISTA DECK to VISTA")
    parser.add_argument(
        "--terrace",
        type=int,
        choices=[0, 1, 2],
        default=0,
        help="Number of TERRACE workers in EXTRAS (0 = no terrace)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    cfg = load_config(args.config)
    input_dir = args.input_dir or os.path.join("mock_data", args.config)
    special_options = SpecialAreaOptions(
        floor_drains=args.floor_drains,
        conference_vacuum=args.conference_vacuum,
        vista_deck=args.vista_deck,
        terrace=args.terrace > 0,
        terrace_workers=max(args.terrace, 1),
    )

    res = run_assignment(
        cfg,
        get_storage_client("input", input_dir),
        get_storage_client("output", args.output_dir or input_dir),
        special_options,
        roster_file=args.roster,
        preferences_file=args.preferences,
        areas_file=args.areas,
        output_file=args.output,
    )
    if not res["ok"]:
        sys.exit(1)
    print(f"Assignments written to {args.output}")


if __name__ == "__main__":
    main()
