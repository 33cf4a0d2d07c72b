# validate_assignment.py
import logging
from collections import Counter
from typing import Any, Dict, List, Tuple

HAS_PREFERENCES_MARK = " (HAS PREFERENCES:"
NO_PREFERENCES_MARK = " (NO PREFERENCES PROVIDED)"


def _task_items(area: Dict[str, Any]):
    return [(key, value) for key, value in area.items() if not key.startswith("__")]


def _is_marker(value: str) -> bool:
    value = value.strip()
    return value.startswith("=== ") or value.endswith(" ===")


def collect_assigned_workers(mapping: Dict[str, Dict[str, Any]], cfg) -> List[str]:
    """Names in task slots, in output order, skipping the leftover bucket and marker rows."""
    names = []
    for area_id, area in mapping.items():
        if area_id == cfg.UNASSIGNED_AREA:
            continue
        for _, worker in _task_items(area):
            if not isinstance(worker, str) or not worker.strip():
                continue
            if _is_marker(worker):
                continue
            names.append(worker.strip())
    return names


def parse_leftover_pool(mapping: Dict[str, Dict[str, Any]], cfg) -> List[str]:
    """Worker names in the extra pool with their annotations removed."""
    pool = mapping.get(cfg.UNASSIGNED_AREA, {}).get(cfg.UNASSIGNED_WORKERS_KEY, "")
    names = []
    for entry in pool.split(cfg.POOL_SEPARATOR):
        entry = entry.strip()
        if HAS_PREFERENCES_MARK in entry:
            entry = entry.split(HAS_PREFERENCES_MARK)[0]
        elif NO_PREFERENCES_MARK in entry:
            entry = entry.replace(NO_PREFERENCES_MARK, "")
        entry = entry.strip()
        if entry and entry != cfg.MAT_WASH_REP:
            names.append(entry)
    return names


def find_duplicate_workers(mapping: Dict[str, Dict[str, Any]], cfg) -> List[str]:
    """Names that show up more than once across task slots and the extra pool, first occurrence order."""
    counts = Counter(collect_assigned_workers(mapping, cfg) + parse_leftover_pool(mapping, cfg))
    return [name for name, n in counts.items() if n > 1]


def assignment_stats(mapping: Dict[str, Dict[str, Any]], cfg) -> Dict[str, int]:
    assigned = 0
    unassigned_tasks = 0
    for area_id, area in mapping.items():
        if area_id == cfg.UNASSIGNED_AREA:
            continue
        for _, worker in _task_items(area):
            if isinstance(worker, str) and _is_marker(worker):
                continue
            if isinstance(worker, str) and worker.strip():
                assigned += 1
            else:
                unassigned_tasks += 1
    return {
        "assigned_workers": assigned,
        "unassigned_tasks": unassigned_tasks,
        "extra_workers": len(parse_leftover_pool(mapping, cfg)),
    }


def validate_assignment(mapping: Dict[str, Dict[str, Any]], workers: List[str], cfg) -> Tuple[bool, List[str]]:
    """
    Returns (ok, errors) for the hard rules of a generated assignment:

    - nobody holds two task slots, nobody is both assigned and in the extra pool
    - every assigned or extra worker is on the roster
    - every roster worker is either assigned or in the extra pool
    """
    errors = []

    assigned = collect_assigned_workers(mapping, cfg)
    pool = parse_leftover_pool(mapping, cfg)
    roster = set(workers)

    for name in find_duplicate_workers(mapping, cfg):
        errors.append(f"Worker {name} appears more than once")

    for name in assigned:
        if name not in roster:
            errors.append(f"Assigned worker {name} is not on the roster")
    for name in pool:
        if name not in roster:
            errors.append(f"Extra worker {name} is not on the roster")

    accounted = set(assigned) | set(pool)
    for name in dict.fromkeys(workers):
        if name not in accounted:
            errors.append(f"Worker {name} is neither assigned nor in the extra pool")

    ok = len(errors) == 0
    if not ok:
        logging.error("ASSIGNMENT RULE(S) VIOLATION:")
        for e in errors:
            logging.error(f"  - {e}")
    return ok, errors
