# ship_cleaning.py

from dataclasses import dataclass
from typing import Dict, List, Tuple

# ---- regular cabin areas ---------------------------------------------------

# (area id, suites offered in the area, FULL checkbox shown)
DEFAULT_AREAS: List[Tuple[str, List[str], bool]] = [
    ("8000+8300", [], True),
    ("8100+8400", [], True),
    ("8200+8500", [], True),
    ("8600+8700+8800", ["SUITE 8626", "SUITE 8827"], False),
    ("7600+7700+7800", ["SUITE 7823", "SUITE 7622"], False),
    ("7500+7200+7100+7000", [], False),
    ("6500+6200+6100+6000", [], False),
    ("6600+6700+6800", [], False),
    ("5000+5300", [], True),
    ("5400+5200", [], True),
    ("5600+5700+5800", [], False),
]

# derived lookups
AREA_IDS = [a[0] for a in DEFAULT_AREAS]
AREA_SUITES: Dict[str, List[str]] = {a[0]: list(a[1]) for a in DEFAULT_AREAS if a[1]}
FULL_CAPABLE_AREAS = [a[0] for a in DEFAULT_AREAS if a[2]]

# ---- special zones ---------------------------------------------------------


@dataclass(frozen=True)
class SectionDef:
    heading: str
    tasks: List[str]


SPECIAL_ZONES: Dict[str, List[SectionDef]] = {
    "D9": [
        SectionDef(
            "TORGET",
            ["KIDS+HANGOUT+ PORTAAT IMURI", "TORGET IMURI", "WC:T TORGET+PYYHINTÄ", "KIDS+HANGOUT+TORGET PYYHINTÄ"],
        ),
        SectionDef("CONFERNCE", ["KONFFA WC:t"]),
        SectionDef(
            "PORTAIKOT",
            [
                "HISSIT+KEULAPORTAAT IMURI 5-11",
                "KEULAPORTAAT PYYHINTÄ + AULAT",
                "HISSIT+KESKIPORTAAT IMURI 5-11",
                "KESKIPORTAAT PYYHINTÄ + AULAT",
                "HISSIT+PERÄPORTAAT IMURI 6-11",
                "PERÄPORTAAT PYYHINTÄ + AULAT",
            ],
        ),
    ],
    "D10": [
        SectionDef("MARKET", ["MARKET IMURI", "MARKET KONE", "MARKET PYYHINTÄ", "MARKET WC:t"]),
        SectionDef("KEITTIÖ", ["KEITTIÖ", "WC:T 10+11"]),
        SectionDef("VISTA", ["IMURI LOUNGE ->", "IMURI CASINO ->", "BACKSTAGE WC:T+ PYYHINTÄ", "VISTA WC:t 10+11"]),
        SectionDef("EXTRAS", ["SLIDING DOOR D6/D7", "ROSKASTUS", "SMOKING ROOM + KONE", "MARKET EXTRA"]),
    ],
}

# option flag -> (zone, section heading, task appended)
SPECIAL_OPTION_TASKS: Dict[str, Tuple[str, str, str]] = {
    "conference_vacuum": ("D9", "CONFERNCE", "KONFFA IMURI"),
    "floor_drains": ("D10", "KEITTIÖ", "LATTIAKAIVOT"),
    "vista_deck": ("D10", "VISTA", "VISTA DECK"),
    "terrace": ("D10", "EXTRAS", "TERRACE"),
}

# ---- sizing ----------------------------------------------------------------

COMBINED_TRASH_VACUUM_BELOW = 35  # cabins
CABINS_PER_TRASH_WORKER = 90
CABINS_PER_VACUUM_WORKER = 120
CABINS_PER_WASH_WORKER = 13
CABINS_PER_BED_WORKER = 13  # fallback when beds are not given
BEDS_PER_WORKER = 30
BEDS_PER_DOUBLE_WORKER = 22.5
CABINS_PER_WIPE_WORKER = 90
CABINS_PER_INVA_WIPE_WORKER = 50
EXTRA_GUESTS_PER_REP_WORKER = 50

# ---- per-area rules --------------------------------------------------------

SKIP_BED_MAKING_AREAS = ["8000+8300", "8100+8400", "8200+8500"]
DOUBLE_BED_AREAS = ["8600+8700+8800", "7600+7700+7800", "6600+6700+6800"]

INVA_WIPE_AREA = "6500+6200+6100+6000"
WIPE_WITH_JAKO_AREA = "8600+8700+8800"
SINGLE_WIPE_AREA = "7600+7700+7800"

REP_SETIT_AREAS = ["8600+8700+8800", "7600+7700+7800"]

# ---- task names ------------------------------------------------------------

TRASH = "ROSKAT"
VACUUM = "IMURI"
TRASH_VACUUM = "ROSKAT+IMURI"
WASH = "PESU"
BED_MAKING = "PETAUS"
BED_MAKING_DOUBLE = "PETAUS DOUBLE"
WIPE = "PYYHINTÄ"
WIPE_WITH_JAKO = "PYYHINTÄ+JAKO"
WIPE_WITH_INVA_JAKO = "PYYHINTÄ + INVA JAKO"
REP_SETIT = "REP+SETIT"
REP = "REP"
SETIT = "SETIT"
JAKO = "JAKO"
SUITES = "SUITES"
MAT_WASH_REP = "MATTOPESU + REP"

# a base type containing this word is a wipe task
WIPE_MARKER = "PYYHINTÄ"

# base tasks whose numbered variants ("PESU 3") match the bare preference
NUMBERED_BASE_TASKS = [
    TRASH,
    VACUUM,
    WASH,
    BED_MAKING,
    BED_MAKING_DOUBLE,
    WIPE,
    WIPE_WITH_INVA_JAKO,
    REP,
]

# ---- preference matching ---------------------------------------------------

# area preference code -> area ids it covers
AREA_PREFERENCE_MAPPING: Dict[str, List[str]] = {
    "7 FRONT": ["7600+7700+7800"],
    "7 BACK": ["7500+7200+7100+7000"],
    "8 FRONT": ["8600+8700+8800"],
    "8 BACK": ["8000+8300", "8100+8400", "8200+8500"],
    "DECK 5": ["5000+5300", "5400+5200", "5600+5700+5800"],
    "6 FRONT": ["6600+6700+6800"],
    "6 BACK": ["6500+6200+6100+6000"],
}

# workers with no area preferences rank between a matching and a non-matching area
NO_AREA_PREFERENCE_LEVEL = 500
OTHER_AREA_PREFERENCE_LEVEL = 999

# misspelling -> canonical spelling, applied to every task name before comparison
TASK_SPELLING_FIXES: List[Tuple[str, str]] = [
    ("PEATUS", "PETAUS"),
    ("PYYHTINÄ", "PYYHINTÄ"),
    ("MATTOPESU", "PESU"),
]

# canonical task -> accepted alternative spellings
TASK_ALTERNATIVES: Dict[str, List[str]] = {
    "KIDS+HANGOUT+ PORTAAT IMURI": ["KIDS+HANGOUT+PORTAAT IMURI", "KIDS HANGOUT PORTAAT IMURI"],
    "IMURI LOUNGE ->": ["IMURI LOUNGE", "LOUNGE IMURI"],
    "IMURI CASINO ->": ["IMURI CASINO", "CASINO IMURI"],
    "WC:T 10+11": ["WC 10+11", "WC:T 10 + 11"],
    "VISTA WC:t 10+11": ["VISTA WC 10+11", "VISTA WC:T 10+11"],
    "SMOKING ROOM + KONE": ["SMOKING ROOM KONE"],
    "BACKSTAGE WC:T+ PYYHINTÄ": ["BACKSTAGE WC PYYHINTÄ", "BACKSTAGE WC:T PYYHINTÄ"],
    "PETAUS DOUBLE": ["PEATUS DOUBLE"],
    "PETAUS": ["PEATUS"],
    "PYYHINTÄ": ["PYYHTINÄ", "PYYHINTA"],
    "KEULAPORTAAT PYYHINTÄ + AULAT": ["KEULAPORTAAT PYYHINTÄ AULAT"],
    "KESKIPORTAAT PYYHINTÄ + AULAT": ["KESKIPORTAAT PYYHINTÄ AULAT"],
    "PERÄPORTAAT PYYHINTÄ + AULAT": ["PERÄPORTAAT PYYHINTÄ AULAT"],
    "REP+SETIT": ["REP + SETIT", "REP SETIT"],
    "PYYHINTÄ+JAKO": ["PYYHINTÄ + JAKO", "PYYHINTÄ JAKO"],
    "PYYHINTÄ + INVA JAKO": ["PYYHINTÄ INVA JAKO"],
    "ROSKAT+IMURI": ["ROSKAT + IMURI", "ROSKAT IMURI"],
    "WC:T TORGET+PYYHINTÄ": ["WC:T TORGET PYYHINTÄ", "WC TORGET PYYHINTÄ"],
    "KIDS+HANGOUT+TORGET PYYHINTÄ": ["KIDS HANGOUT TORGET PYYHINTÄ"],
    "KONFFA WC:t": ["KONFFA WC"],
    "MARKET WC:t": ["MARKET WC"],
    "MATTOPESU + REP": ["MATTOPESU REP", "MATTOPESU", "REP"],
}

# ---- output layout ---------------------------------------------------------

SECTIONS_KEY = "__sections"
UNASSIGNED_AREA = "UNASSIGNED"
UNASSIGNED_HEADING = "UNASSIGNED WORKERS"
UNASSIGNED_WORKERS_KEY = "UNASSIGNED WORKERS|workers"
MAT_WASH_PLACEHOLDER_KEY = "MATTOPESU+REP|0"
POOL_SEPARATOR = " | "
