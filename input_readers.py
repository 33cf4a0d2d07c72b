# input_readers.py
import logging
import os
from typing import Any, List, Optional

import pandas as pd

from file_storage.file_storage_interface import FileStorageInterface
from preference_store import WorkerPreference
from task_generator import AreaConfig, SpecialAreaOptions, default_area_configs, special_sections

EXCEL_EXTENSIONS = (".xlsx", ".xlsm", ".xls")
HEADER_NAME = "WORKER NAME"
TRUE_VALUES = {"1", "TRUE", "YES", "Y", "X", "FULL"}

TEMPLATE_COLUMNS = [
    "Worker Name",
    "Task Preferences (comma-separated)",
    "Area Preferences for PESU (comma-separated)",
    "Area Preferences for PYYHINTÄ (comma-separated)",
    "Instructions →",
    "",
]


def read_table(storage: FileStorageInterface, filename: str, **kwargs) -> pd.DataFrame:
    if os.path.splitext(filename)[1].lower() in EXCEL_EXTENSIONS:
        return storage.read_excel(filename, **kwargs)
    return storage.read_csv(filename, **kwargs)


def _text(row: List[Any], idx: int) -> Optional[str]:
    """Cell as stripped text, None for missing or non-text cells."""
    if idx >= len(row) or not isinstance(row[idx], str):
        return None
    return row[idx].strip()


def _split_list(cell: Optional[str]) -> List[str]:
    if not cell:
        return []
    return [item.strip() for item in cell.split(",") if item.strip()]


def _is_marker(name: str) -> bool:
    return name.startswith("===") and name.endswith("===")


def parse_roster(df: pd.DataFrame) -> List[str]:
    """Worker names from the first column, in file order. Expects the table read with header=None."""
    if df.empty:
        return []
    names = []
    for index, cell in enumerate(df.iloc[:, 0].tolist()):
        if isinstance(cell, str):
            if cell.strip():
                names.append(cell.strip())
            continue
        if cell is None or pd.isna(cell):
            continue
        logging.warning(f"Row {index + 1}: skipping non-text roster name {cell!r}")
    logging.info(f"Loaded {len(names)} workers from roster")
    return names


def parse_preferences(df: pd.DataFrame) -> List[WorkerPreference]:
    """
    One record per row: name, task preferences, wash area codes, wipe area codes.

    Lists inside a cell are comma-separated. Rows without a name, the header row and
    "=== ... ===" marker rows are skipped. A blank task cell keeps the worker with no
    preferences at all. Expects the table read with header=None.
    """
    records: List[WorkerPreference] = []

    for index, row in enumerate(df.values.tolist()):
        name = _text(row, 0)
        if not name:
            if index > 0:
                logging.debug(f"Row {index + 1}: empty or invalid worker name")
            continue
        if _is_marker(name) or (index == 0 and name.upper() == HEADER_NAME):
            continue

        tasks_cell = _text(row, 1)
        if not tasks_cell:
            logging.warning(f"Row {index + 1}: {name} has empty task preferences")
            records.append(WorkerPreference(name, []))
            continue

        records.append(
            WorkerPreference(
                worker_name=name,
                task_preferences=_split_list(tasks_cell),
                area_preferences=_split_list(_text(row, 2)),
                pyyhinta_preferences=_split_list(_text(row, 3)),
            )
        )

    logging.info(f"Processed {len(records)} worker preference records")
    return records


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().upper() in TRUE_VALUES
    if value is None or pd.isna(value):
        return False
    return bool(value)


def _as_count(value: Any, column: str, area_id: str) -> Optional[int]:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        count = int(float(value))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Area {area_id}: {column} must be a number, got {value!r}") from e
    if count < 0:
        raise ValueError(f"Area {area_id}: {column} cannot be negative ({count})")
    return count


def parse_area_configs(df: pd.DataFrame, cfg) -> List[AreaConfig]:
    """
    Area table with columns id, cabins and optionally beds, full, additional_workers, suites.

    Known areas keep the default order, whether listed or not; unknown ids are appended
    in file order. suites lists the included suite names separated by ';'.
    """
    missing = [c for c in ("id", "cabins") if c not in df.columns]
    if missing:
        raise ValueError(f"Area table is missing column(s): {', '.join(missing)}")

    areas = {a.id: a for a in default_area_configs(cfg)}

    for row in df.to_dict(orient="records"):
        area_id = str(row["id"]).strip()
        if not area_id or area_id.lower() == "nan":
            continue
        area = areas.get(area_id)
        if area is None:
            logging.warning(f"Unknown area {area_id}, adding it with default rules")
            area = areas[area_id] = AreaConfig(id=area_id)

        area.cabins = _as_count(row["cabins"], "cabins", area_id) or 0
        area.beds = _as_count(row.get("beds"), "beds", area_id)
        area.full = _as_bool(row.get("full"))
        area.additional_workers = _as_count(row.get("additional_workers"), "additional_workers", area_id) or 0

        suites = row.get("suites")
        if isinstance(suites, str):
            included = {s.strip().upper() for s in suites.split(";") if s.strip()}
            for suite in cfg.AREA_SUITES.get(area_id, []):
                area.suites[suite] = suite in included
            unknown = included - set(cfg.AREA_SUITES.get(area_id, []))
            if unknown:
                logging.warning(f"Area {area_id}: ignoring unknown suite(s) {sorted(unknown)}")

    return list(areas.values())


def valid_task_names(cfg) -> List[str]:
    """Every task name a preference can usefully mention."""
    names = [
        cfg.TRASH,
        cfg.VACUUM,
        cfg.TRASH_VACUUM,
        cfg.WASH,
        cfg.BED_MAKING,
        cfg.BED_MAKING_DOUBLE,
        cfg.WIPE,
        cfg.WIPE_WITH_JAKO,
        cfg.WIPE_WITH_INVA_JAKO,
        cfg.REP_SETIT,
        cfg.REP,
        cfg.SETIT,
        cfg.JAKO,
    ]
    names += [s for suites in cfg.AREA_SUITES.values() for s in suites]
    all_options = SpecialAreaOptions(floor_drains=True, conference_vacuum=True, vista_deck=True, terrace=True)
    for sections in special_sections(all_options, cfg).values():
        for section in sections:
            names += section.tasks
    return list(dict.fromkeys(names))


def preference_template_frame(workers: List[str], cfg) -> pd.DataFrame:
    """Upload template: example rows, the roster, the valid task names and the area codes."""
    width = len(TEMPLATE_COLUMNS)

    def line(*cells: str) -> List[str]:
        return list(cells) + [""] * (width - len(cells))

    rows = [
        line("Example Worker 1", "PETAUS,PESU,PYYHINTÄ", "8 FRONT,7 FRONT", "8 BACK"),
        line("Example Worker 2", "MARKET IMURI,KEITTIÖ,TORGET IMURI"),
        line("Example Worker 3", "PESU,PYYHINTÄ", "8 BACK,DECK 5", "DECK 5"),
        line(),
        line("=== YOUR WORKERS ==="),
    ]
    rows += [line(worker) for worker in workers]
    rows += [line(), line("=== AVAILABLE TASKS ===")]
    rows += [line("", "", "", "", task) for task in valid_task_names(cfg)]
    rows += [line(), line("=== AREA PREFERENCES ===")]
    rows += [
        line("", "", "", "", code, "= " + ", ".join(area_ids))
        for code, area_ids in cfg.AREA_PREFERENCE_MAPPING.items()
    ]
    rows += [
        line(),
        line("", "", "", "", "NOTE: PESU area preferences only apply to PESU tasks"),
        line("", "", "", "", "NOTE: PYYHINTÄ area preferences only apply to PYYHINTÄ tasks"),
        line("", "", "", "", "Workers with no area preference can be assigned anywhere"),
    ]
    return pd.DataFrame(rows, columns=TEMPLATE_COLUMNS)
