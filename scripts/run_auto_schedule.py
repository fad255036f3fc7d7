#!/usr/bin/env python3
"""
Run the auto-scheduler for one group type from the command line.

Usage:
    python scripts/run_auto_schedule.py --group-type UUID --scheduler UUID
        [--weeks N] [--attribute-key KEY] [--chunk-size N]

Exits with status 1 when the run reported errors.
"""
import argparse
import sys
from pathlib import Path
from uuid import UUID

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session

from app.core.config import settings
from app.core.database import create_db_and_tables, engine
from app.scheduling.runner import AutoScheduleRequest, run_auto_schedule


def main():
    parser = argparse.ArgumentParser(description="Auto-schedule a group type")
    parser.add_argument("--group-type", required=True, type=UUID, help="Group type ID")
    parser.add_argument("--scheduler", required=True, type=UUID, help="Scheduler person ID")
    parser.add_argument("--weeks", type=int, default=settings.default_weeks_out,
                        help="Number of weeks to schedule (default: %(default)s)")
    parser.add_argument("--attribute-key", help="Boolean group attribute that must be true")
    parser.add_argument("--chunk-size", type=int, default=settings.assignment_chunk_size,
                        help="Occurrences per assignment chunk (default: %(default)s)")
    args = parser.parse_args()

    create_db_and_tables()
    request = AutoScheduleRequest(
        group_type_id=args.group_type,
        scheduler_person_id=args.scheduler,
        weeks_out=args.weeks,
        attribute_key=args.attribute_key,
        chunk_size=args.chunk_size,
    )

    with Session(engine) as session:
        result = run_auto_schedule(session, request)

    print(result.summary)
    print(f"{result.confirmed_count} attendances confirmed.")
    for message in result.errors:
        print(f"Error: {message}")

    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
