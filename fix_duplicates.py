#!/usr/bin/env python3
"""
fix_duplicates.py

Removes duplicate airport ids from the hand-maintained dataset.

  - same id, same place: keeps the entry with more amenities
  - same id, different place: renames the later one to <id>_1, <id>_2, ...

The original file is copied to <data>.backup before it is overwritten,
and the written file is re-read to confirm every id is unique.

Usage:
    python fix_duplicates.py [--data public/data.json] [--backup PATH] [--dry-run]
"""

import argparse
import sys
from typing import List, Optional

from config import settings
from dataset import DatasetError, backup_dataset, load_dataset, write_dataset
from reconcile import (
    RENAMED,
    REPLACED,
    Collision,
    check_unique_ids,
    find_missing_fields,
    reconcile_with_report,
)

EXIT_OK = 0
EXIT_BAD_INPUT = 1
EXIT_VERIFY_FAILED = 2


def _print_collision(c: Collision) -> None:
    if c.generated:
        print(f"\n--- ID \"{c.id}\" (item {c.index}) clashes with a renamed entry ---")
        print("Renamed entry:", c.existing.model_dump())
    else:
        print(f"\n--- Duplicate ID: \"{c.id}\" (item {c.index}) ---")
        print("First occurrence:", c.existing.model_dump())
    print("Duplicate occurrence:", c.duplicate.model_dump())
    print(f"Same location: {'YES' if c.same_location else 'NO'}")

    if c.action == RENAMED:
        print(
            f"Different airport with same ID: renamed {c.id} -> {c.result_id} "
            f"({c.duplicate.name})"
        )
    elif c.action == REPLACED:
        print(f"Merged duplicate {c.id}: kept version with more amenities")
    else:
        print(f"Merged duplicate {c.id}: kept existing version")


def run(data_path: str, backup_path: Optional[str] = None, dry_run: bool = False) -> int:
    try:
        items = load_dataset(data_path)
    except DatasetError as e:
        print(f"[error] {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    print(f"Total entries: {len(items)}")

    for problem in find_missing_fields(items):
        print(
            f"[warn] item {problem.index} (id={problem.id!r}, name={problem.name!r}) "
            f"missing {', '.join(problem.missing)}; kept as is"
        )

    result = reconcile_with_report(items)

    print(f"\nFound {result.raw_collisions} duplicates:")
    for collision in result.collisions:
        _print_collision(collision)

    print(
        f"\nCleaned data: {len(result.items)} entries "
        f"(removed {result.removed} duplicates, "
        f"renamed {result.renamed})"
    )

    if dry_run:
        print("[dry-run] nothing written")
        return EXIT_OK

    backup = backup_dataset(data_path, backup_path)
    print(f"\n[backup] created {backup}")

    try:
        write_dataset(data_path, result.items)
    except OSError as e:
        print(f"[error] could not write {data_path}: {e}", file=sys.stderr)
        print(f"Error: write failed, restore from {backup}")
        return EXIT_VERIFY_FAILED

    print(f"Cleaned data written to: {data_path}")

    try:
        written = load_dataset(data_path)
    except DatasetError as e:
        print(f"[error] could not re-read {data_path}: {e}", file=sys.stderr)
        print(f"Error: verification failed, restore from {backup}")
        return EXIT_VERIFY_FAILED

    total, unique = check_unique_ids(written)
    print(f"\nVerification: {total} total items, {unique} unique IDs")

    if total == unique:
        print("Success: No duplicates remain!")
        return EXIT_OK

    print(f"Error: Duplicates still exist! Restore from {backup}")
    return EXIT_VERIFY_FAILED


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Remove duplicate airport ids")
    parser.add_argument("--data", default=settings.data_path, help="dataset JSON file")
    parser.add_argument("--backup", default=None, help="backup path (default: <data>.backup)")
    parser.add_argument("--dry-run", action="store_true", help="report only, write nothing")
    args = parser.parse_args(argv)

    return run(args.data, args.backup, args.dry_run)


if __name__ == "__main__":
    sys.exit(main())
