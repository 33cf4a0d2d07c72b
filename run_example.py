# run_example.py

import argparse
import logging
import os

from assignment import run_assignment
from file_storage.local_storage_rw import LocalStorageRW
from generate_mock_data import generate_mock_areas, generate_mock_preferences, generate_mock_roster
from task_generator import SpecialAreaOptions, load_config
from validate_assignment import assignment_stats


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default="ship_cleaning")
    parser.add_argument("--workers", type=int, default=40)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    cfg = load_config(args.config)
    input_dir = os.path.join("mock_data", args.config)

    # 1) mock inputs
    generate_mock_roster(out_dir=input_dir, num_workers=args.workers, seed=args.seed)
    generate_mock_preferences(cfg, out_dir=input_dir, seed=args.seed)
    generate_mock_areas(cfg, out_dir=input_dir, seed=args.seed)

    # 2) assign + 3) validate
    storage = LocalStorageRW(input_dir)
    res = run_assignment(cfg, storage, storage, SpecialAreaOptions(terrace=True, terrace_workers=2))
    print(f"Assignments written to {os.path.join(input_dir, 'assignments.xlsx')}")
    print(f"Workers needed: {res['workers_needed']}")
    print(assignment_stats(res["mapping"], cfg))
    print("Validation passed." if res["ok"] else "Validation FAILED.")


if __name__ == "__main__":
    main()
