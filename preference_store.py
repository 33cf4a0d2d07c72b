# preference_store.py
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from task_generator import WASH_CATEGORY, WIPE_CATEGORY, is_number, task_category

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class WorkerPreference:
    worker_name: str
    task_preferences: List[str]
    area_preferences: List[str] = field(default_factory=list)  # applies to wash tasks
    pyyhinta_preferences: List[str] = field(default_factory=list)  # applies to wipe tasks


def normalize_worker_name(name: str) -> str:
    name = _PUNCTUATION_RE.sub("", name.strip().upper())
    return _WHITESPACE_RE.sub(" ", name).strip()


def name_variations(name: str) -> List[str]:
    """Normalized name plus reversed, last-token-first and first-token-last orderings."""
    normalized = normalize_worker_name(name)
    words = normalized.split()
    variations = [normalized]
    if len(words) >= 2:
        variations.append(" ".join(reversed(words)))
        variations.append(" ".join([words[-1]] + words[:-1]))
        variations.append(" ".join(words[1:] + [words[0]]))
    return list(dict.fromkeys(variations))


def normalize_task_name(task_name: str, cfg) -> str:
    task = _WHITESPACE_RE.sub(" ", task_name.strip().upper())
    for wrong, right in cfg.TASK_SPELLING_FIXES:
        task = task.replace(wrong, right)
    return task


class PreferenceStore:
    """
    Worker preferences keyed by normalized worker name, in insertion order.

    Created once per session, replaced entry by entry on upload, cleared on request.
    Read-only while an assignment runs.
    """

    def __init__(self, cfg):
        self.cfg = cfg
        self._preferences: Dict[str, List[str]] = {}
        self._area_preferences: Dict[str, List[str]] = {}
        self._pyyhinta_preferences: Dict[str, List[str]] = {}
        self._alternatives = {
            normalize_task_name(task, cfg): {normalize_task_name(alt, cfg) for alt in alts}
            for task, alts in cfg.TASK_ALTERNATIVES.items()
        }
        self._numbered_bases = {normalize_task_name(t, cfg) for t in cfg.NUMBERED_BASE_TASKS}

    def __len__(self) -> int:
        return len(self._preferences)

    # ---- loading -----------------------------------------------------------

    def set_preferences(
        self,
        worker_name: str,
        task_preferences: List[str],
        area_preferences: Optional[List[str]] = None,
        pyyhinta_preferences: Optional[List[str]] = None,
    ) -> None:
        key = normalize_worker_name(worker_name)
        self._preferences[key] = list(task_preferences)
        self._area_preferences[key] = list(area_preferences or [])
        self._pyyhinta_preferences[key] = list(pyyhinta_preferences or [])
        logging.debug(
            f"Loaded preferences for {key!r}: tasks={task_preferences} "
            f"areas={area_preferences or []} pyyhinta={pyyhinta_preferences or []}"
        )

    def set_multiple_preferences(self, worker_preferences: List[WorkerPreference]) -> None:
        for pref in worker_preferences:
            self.set_preferences(
                pref.worker_name, pref.task_preferences, pref.area_preferences, pref.pyyhinta_preferences
            )
        logging.info(f"Loaded {len(worker_preferences)} worker preferences, {len(self)} stored")

    def remove_worker_preferences(self, worker_name: str) -> None:
        key = worker_name if worker_name in self._preferences else normalize_worker_name(worker_name)
        self._preferences.pop(key, None)
        self._area_preferences.pop(key, None)
        self._pyyhinta_preferences.pop(key, None)

    def clear_all_preferences(self) -> None:
        self._preferences.clear()
        self._area_preferences.clear()
        self._pyyhinta_preferences.clear()

    def get_all_preferences(self) -> List[WorkerPreference]:
        result = [
            WorkerPreference(
                name,
                list(prefs),
                list(self._area_preferences.get(name, [])),
                list(self._pyyhinta_preferences.get(name, [])),
            )
            for name, prefs in self._preferences.items()
        ]
        return sorted(result, key=lambda p: p.worker_name.casefold())

    def stored_names(self) -> List[str]:
        return list(self._preferences)

    # ---- worker lookup -----------------------------------------------------

    def find_matching_worker_name(self, target_name: str) -> Optional[str]:
        target_variations = name_variations(target_name)

        for variation in target_variations:
            if variation in self._preferences:
                return variation

        for stored_name in self._preferences:
            stored_variations = name_variations(stored_name)
            if any(v in stored_variations for v in target_variations):
                logging.info(f"Name match found: {target_name!r} -> {stored_name!r}")
                return stored_name

        return None

    def resolve_worker_name(self, worker_name: str) -> Optional[str]:
        """Stored key for a worker: exact key, then normalized key, then token permutations."""
        if worker_name in self._preferences:
            return worker_name
        normalized = normalize_worker_name(worker_name)
        if normalized in self._preferences:
            return normalized
        return self.find_matching_worker_name(worker_name)

    def get_preferences_with_matching(self, worker_name: str) -> Tuple[List[str], Optional[str]]:
        matched = self.resolve_worker_name(worker_name)
        if matched is None:
            return [], None
        return list(self._preferences[matched]), matched

    def get_preferences(self, worker_name: str) -> List[str]:
        return self.get_preferences_with_matching(worker_name)[0]

    def get_area_preferences(self, worker_name: str) -> List[str]:
        matched = self.resolve_worker_name(worker_name)
        return list(self._area_preferences.get(matched, [])) if matched else []

    def get_pyyhinta_preferences(self, worker_name: str) -> List[str]:
        matched = self.resolve_worker_name(worker_name)
        return list(self._pyyhinta_preferences.get(matched, [])) if matched else []

    def get_workers_with_preferences(self, uploaded_workers: List[str]):
        """
        Split a roster into workers with and without stored preferences.

        Returns:
            (with_preferences, without_preferences, matches) where matches is a list of
            (uploaded name, stored name) pairs.
        """
        with_preferences, without_preferences, matches = [], [], []
        for worker in uploaded_workers:
            prefs, matched = self.get_preferences_with_matching(worker)
            if prefs and matched:
                with_preferences.append(worker)
                matches.append((worker, matched))
            else:
                without_preferences.append(worker)
        return with_preferences, without_preferences, matches

    # ---- task matching -----------------------------------------------------

    def task_matches(self, task_name: str, preference: str) -> bool:
        """
        Strict comparison of a task against one preference entry.

        Exact match after normalization, a numbered variant of a whitelisted base
        ("PESU 3" vs "PESU") or a listed alternative spelling of the task. Never
        substring matches, so "MARKET IMURI" does not match "MARKET".
        """
        task = normalize_task_name(task_name, self.cfg)
        pref = normalize_task_name(preference, self.cfg)

        if task == pref:
            return True

        words = task.split(" ")
        if len(words) > 1 and is_number(words[-1]):
            base = " ".join(words[:-1])
            if base in self._numbered_bases and base == pref:
                return True

        if pref in self._alternatives.get(task, ()):
            return True

        return False

    def wants_task(self, preferences: List[str], task_name: str) -> bool:
        return any(self.task_matches(task_name, pref) for pref in preferences)

    def _task_level(self, task_type: str, preferences: List[str]) -> int:
        for i, pref in enumerate(preferences):
            if self.task_matches(task_type, pref):
                return i
        return -1

    # ---- ranking -----------------------------------------------------------

    def area_ids_for_preference(self, area_preference: str) -> List[str]:
        return self.cfg.AREA_PREFERENCE_MAPPING.get(area_preference.strip().upper(), [])

    def _area_level(self, area_id: str, area_preferences: List[str]) -> int:
        if not area_preferences:
            return self.cfg.NO_AREA_PREFERENCE_LEVEL
        for i, code in enumerate(area_preferences):
            if area_id in self.area_ids_for_preference(code):
                return i
        return self.cfg.OTHER_AREA_PREFERENCE_LEVEL

    def get_workers_for_task(self, task_type: str) -> List[str]:
        """Stored names wanting a task, by preference level then fewest total preferences."""
        ranked = []
        for worker, prefs in self._preferences.items():
            level = self._task_level(task_type, prefs)
            if level >= 0:
                ranked.append((level, len(prefs), worker))
        ranked.sort(key=lambda r: (r[0], r[1]))
        return [worker for _, _, worker in ranked]

    def get_workers_for_area_and_task(self, area_id: str, task_type: str) -> List[str]:
        """
        Stored names wanting a task in an area, best candidate first.

        Wash tasks rank on the wash area preferences, wipe tasks on the wipe area
        preferences: task preference level, then area preference level (no area
        preferences sits between a matching and a non-matching area), then fewest
        total task preferences. Ties keep insertion order.
        """
        category = task_category(task_type, self.cfg)
        if category == WASH_CATEGORY:
            area_lists = self._area_preferences
        elif category == WIPE_CATEGORY:
            area_lists = self._pyyhinta_preferences
        else:
            return self.get_workers_for_task(task_type)

        ranked = []
        for worker, prefs in self._preferences.items():
            task_level = self._task_level(task_type, prefs)
            if task_level < 0:
                continue
            area_level = self._area_level(area_id, area_lists.get(worker, []))
            ranked.append((task_level, area_level, len(prefs), worker))

        ranked.sort(key=lambda r: r[:3])
        logging.debug(f"{task_type} candidates for {area_id}: {[r[3] for r in ranked]}")
        return [r[3] for r in ranked]
