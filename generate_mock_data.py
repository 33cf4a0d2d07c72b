# generate_mock_data.py

import argparse
import os
import random
from typing import List

import pandas as pd

from input_readers import TEMPLATE_COLUMNS, preference_template_frame, valid_task_names
from task_generator import load_config

FIRST_NAMES = ["Aino", "Eero", "Helmi", "Juho", "Kaisa", "Lauri", "Maria", "Niko", "Olli", "Sanna", "Tuomas", "Venla"]
LAST_NAMES = ["Virtanen", "Korhonen", "Mäkinen", "Nieminen", "Laine", "Heikkinen", "Koskinen", "Järvinen"]


def ensure_dir(path: str):
    os.makedirs(path, exist_ok=True)


def generate_mock_roster(out_dir: str, num_workers=40, seed=0) -> List[str]:
    ensure_dir(out_dir)
    path = os.path.join(out_dir, "roster.csv")
    random.seed(seed)

    names: List[str] = []
    while len(names) < num_workers:
        name = f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}"
        if name not in names:
            names.append(name)
        elif len(names) >= len(FIRST_NAMES) * len(LAST_NAMES):
            break

    # roster files carry no header
    pd.DataFrame({"name": names}).to_csv(path, index=False, header=False)
    print(f"Wrote {path}")
    return names


def generate_mock_preferences(config, out_dir: str, seed=0, answer_rate=0.7):
    """Preference rows for part of the roster; some names are written last-name-first."""
    ensure_dir(out_dir)
    roster_path = os.path.join(out_dir, "roster.csv")
    path = os.path.join(out_dir, "preferences.csv")

    random.seed(seed)
    names = pd.read_csv(roster_path, header=None)[0].tolist()
    tasks = valid_task_names(config)
    common = [config.WASH, config.WIPE, config.BED_MAKING, config.TRASH_VACUUM]
    area_codes = list(config.AREA_PREFERENCE_MAPPING)

    rows = []
    for name in names:
        if random.random() > answer_rate:
            continue
        if random.random() < 0.2:
            first, last = name.split(" ", 1)
            name = f"{last} {first}"
        picks = random.sample(common, k=random.randint(1, 2)) + random.sample(tasks, k=random.randint(0, 2))
        picks = list(dict.fromkeys(picks))
        wash_areas = random.sample(area_codes, k=random.randint(0, 2))
        wipe_areas = random.sample(area_codes, k=random.randint(0, 1))
        rows.append([name, ",".join(picks), ",".join(wash_areas), ",".join(wipe_areas)])

    pd.DataFrame(rows, columns=TEMPLATE_COLUMNS[:4]).to_csv(path, index=False)
    print(f"Wrote {path}")


def generate_mock_areas(config, out_dir: str, seed=0):
    ensure_dir(out_dir)
    path = os.path.join(out_dir, "areas.csv")
    random.seed(seed)

    rows = []
    for area_id, suites, full_capable in config.DEFAULT_AREAS:
        cabins = random.choice([0, 20, 40, 60, 90, 120])
        full = full_capable and random.random() < 0.3
        rows.append(
            {
                "id": area_id,
                "cabins": cabins,
                "beds": cabins * 2 if cabins and random.random() < 0.5 else "",
                "full": full,
                "additional_workers": random.choice([30, 60, 120]) if full else 0,
                "suites": ";".join(s for s in suites if random.random() < 0.5),
            }
        )

    pd.DataFrame(rows).to_csv(path, index=False)
    print(f"Wrote {path}")


def write_preference_template(config, out_dir: str, workers: List[str]):
    ensure_dir(out_dir)
    path = os.path.join(out_dir, "preferences_template.xlsx")
    preference_template_frame(workers, config).to_excel(path, index=False, sheet_name="Worker Preferences")
    print(f"Wrote {path}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default="ship_cleaning")
    parser.add_argument("--workers", type=int, default=40)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    cfg = load_config(args.config)
    out_dir = os.path.join("mock_data", args.config)

    workers = generate_mock_roster(out_dir=out_dir, num_workers=args.workers, seed=args.seed)
    generate_mock_preferences(cfg, out_dir=out_dir, seed=args.seed)
    generate_mock_areas(cfg, out_dir=out_dir, seed=args.seed)
    write_preference_template(cfg, out_dir=out_dir, workers=workers)


if __name__ == "__main__":
    main()
