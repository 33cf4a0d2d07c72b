# task_generator.py
import importlib
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional

WASH_CATEGORY = "WASH"
WIPE_CATEGORY = "WIPE"
OTHER_CATEGORY = "OTHER"

_NUMBER_RE = re.compile(r"^\d+(\.\d+)?$")


def load_config(config_name: str) -> Any:
    return importlib.import_module(f"configs.{config_name}")


@dataclass
class AreaConfig:
    id: str
    cabins: int = 0
    beds: Optional[int] = None
    suites: Dict[str, bool] = field(default_factory=dict)
    full: bool = False
    additional_workers: int = 0


@dataclass
class SpecialAreaOptions:
    floor_drains: bool = False  # LATTIAKAIVOT in KEITTIÖ
    conference_vacuum: bool = False  # KONFFA IMURI in CONFERNCE
    vista_deck: bool = False  # VISTA DECK in VISTA
    terrace: bool = False  # TERRACE in EXTRAS
    terrace_workers: int = 1


@dataclass(frozen=True)
class TaskKey:
    """Identifies a task inside its area. Special zones key by heading too."""

    name: str
    ordinal: int
    section: Optional[str] = None

    def serialize(self) -> str:
        if self.section is not None:
            return f"{self.section}|{self.name}|{self.ordinal}"
        return f"{self.name}|{self.ordinal}"


@dataclass(frozen=True)
class Task:
    area_id: str
    section_name: str
    task_name: str
    key: TaskKey
    base_task_type: str


class TaskGroup(NamedTuple):
    section: str
    names: List[str]
    bases: List[str]


def default_area_configs(cfg) -> List[AreaConfig]:
    return [
        AreaConfig(id=area_id, suites={s: False for s in suites}, full=False)
        for area_id, suites, _ in cfg.DEFAULT_AREAS
    ]


def is_number(word: str) -> bool:
    return bool(_NUMBER_RE.match(word))


def base_task_type(task_name: str) -> str:
    """
    "PESU 2" -> "PESU", "MATTOPESU + REP (8000+8300)" -> "MATTOPESU + REP".
    Anything else is returned unchanged.
    """
    if "(" in task_name and ")" in task_name:
        base = task_name[: task_name.index("(")].strip()
        if base:
            return base

    words = task_name.strip().split()
    if len(words) > 1 and is_number(words[-1]):
        return " ".join(words[:-1])
    return task_name


def task_category(base_type: str, cfg) -> str:
    if base_type == cfg.WASH:
        return WASH_CATEGORY
    if cfg.WIPE_MARKER in base_type:
        return WIPE_CATEGORY
    return OTHER_CATEGORY


# ---- special zones ---------------------------------------------------------


def special_sections(special_options: SpecialAreaOptions, cfg) -> Dict[str, list]:
    """Copy the fixed zone templates and append the tasks switched on in the options."""
    zones = {
        zone: [cfg.SectionDef(s.heading, list(s.tasks)) for s in sections]
        for zone, sections in cfg.SPECIAL_ZONES.items()
    }

    for option, (zone, heading, task) in cfg.SPECIAL_OPTION_TASKS.items():
        if not getattr(special_options, option, False):
            continue
        section = next((s for s in zones.get(zone, []) if s.heading == heading), None)
        if section is None:
            logging.warning(f"Option {option}: no section {heading} in {zone}")
            continue
        copies = 2 if option == "terrace" and special_options.terrace_workers == 2 else 1
        section.tasks.extend([task] * copies)

    return zones


# ---- regular areas ---------------------------------------------------------


def _numbered(label: str, count: int) -> TaskGroup:
    names = [f"{label} {i + 1}" for i in range(count)] if count > 1 else [label] * count
    return TaskGroup(label, names, [label] * count)


def bed_making_workers(area: AreaConfig, cfg):
    """Returns (workers, label). Double-bed areas are sized tighter per bed."""
    is_double = any(area_id in area.id for area_id in cfg.DOUBLE_BED_AREAS)
    label = cfg.BED_MAKING_DOUBLE if is_double else cfg.BED_MAKING

    if area.beds and area.beds > 0:
        per_worker = cfg.BEDS_PER_DOUBLE_WORKER if is_double else cfg.BEDS_PER_WORKER
        workers = math.ceil(area.beds / per_worker)
    else:
        workers = math.ceil(area.cabins / cfg.CABINS_PER_BED_WORKER)
    return max(1, workers), label


def _wipe_group(area: AreaConfig, cfg) -> TaskGroup:
    cabins = area.cabins
    if area.id == cfg.INVA_WIPE_AREA:
        return _numbered(cfg.WIPE_WITH_INVA_JAKO, max(1, math.ceil(cabins / cfg.CABINS_PER_INVA_WIPE_WORKER)))
    if area.id == cfg.WIPE_WITH_JAKO_AREA:
        return _numbered(cfg.WIPE_WITH_JAKO, 1)
    if area.id == cfg.SINGLE_WIPE_AREA or cabins <= cfg.CABINS_PER_WIPE_WORKER:
        return _numbered(cfg.WIPE, 1)
    return _numbered(cfg.WIPE, math.ceil(cabins / cfg.CABINS_PER_WIPE_WORKER))


def area_task_plan(area: AreaConfig, cfg) -> List[TaskGroup]:
    """
    Task groups for one regular area, in output order:
    trash/vacuum, wash, bed making, wipe, rep+setit, overflow, suites.
    Empty when the area has no cabins.
    """
    cabins = area.cabins
    if cabins <= 0:
        return []

    groups: List[TaskGroup] = []

    if cabins < cfg.COMBINED_TRASH_VACUUM_BELOW:
        groups.append(_numbered(cfg.TRASH_VACUUM, 1))
    else:
        groups.append(_numbered(cfg.TRASH, math.ceil(cabins / cfg.CABINS_PER_TRASH_WORKER)))
        groups.append(_numbered(cfg.VACUUM, math.ceil(cabins / cfg.CABINS_PER_VACUUM_WORKER)))

    groups.append(_numbered(cfg.WASH, max(1, math.ceil(cabins / cfg.CABINS_PER_WASH_WORKER))))

    if area.id not in cfg.SKIP_BED_MAKING_AREAS:
        workers, label = bed_making_workers(area, cfg)
        groups.append(_numbered(label, workers))

    groups.append(_wipe_group(area, cfg))

    if area.id in cfg.REP_SETIT_AREAS:
        groups.append(_numbered(cfg.REP_SETIT, 1))

    if area.id in cfg.FULL_CAPABLE_AREAS and area.full and (area.additional_workers or 0) > 0:
        groups.append(_numbered(cfg.REP, math.ceil(area.additional_workers / cfg.EXTRA_GUESTS_PER_REP_WORKER)))
        groups.append(_numbered(cfg.SETIT, 1))
        groups.append(_numbered(cfg.JAKO, 1))

    included = [s for s in cfg.AREA_SUITES.get(area.id, []) if area.suites.get(s)]
    if included:
        groups.append(TaskGroup(cfg.SUITES, included, list(included)))

    return groups


# ---- public entry points ---------------------------------------------------


def generate_tasks(area_configs: List[AreaConfig], special_options: SpecialAreaOptions, cfg) -> List[Task]:
    """Full ordered task list: special zones first, then the regular areas in the order given."""
    tasks: List[Task] = []

    for zone, sections in special_sections(special_options, cfg).items():
        for section in sections:
            for i, task_name in enumerate(section.tasks):
                tasks.append(
                    Task(
                        area_id=zone,
                        section_name=section.heading,
                        task_name=task_name,
                        key=TaskKey(task_name, i, section=section.heading),
                        base_task_type=base_task_type(task_name),
                    )
                )

    for area in area_configs:
        for group in area_task_plan(area, cfg):
            for i, (task_name, base) in enumerate(zip(group.names, group.bases)):
                tasks.append(
                    Task(
                        area_id=area.id,
                        section_name=group.section,
                        task_name=task_name,
                        key=TaskKey(group.section, i),
                        base_task_type=base,
                    )
                )

    logging.debug(f"Generated {len(tasks)} tasks for {len(area_configs)} areas")
    return tasks


def calculate_workers_needed(area_configs: List[AreaConfig], special_options: SpecialAreaOptions, cfg) -> int:
    total = sum(len(s.tasks) for sections in special_sections(special_options, cfg).values() for s in sections)
    for area in area_configs:
        total += sum(len(group.names) for group in area_task_plan(area, cfg))
    return total
