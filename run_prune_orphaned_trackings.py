"""CLI utility to remove trackings whose job no longer exists in a SQL job registry."""

from __future__ import annotations

import argparse
from typing import List, Optional

from sqlalchemy import create_engine

from jobtracking.registry.sql_registry import SqlJobRegistry
from jobtracking.storage.repository import TrackingRepository


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Prune orphaned job trackings")
    parser.add_argument(
        "--connection-url",
        required=True,
        help="SQLAlchemy connection URL of the database holding job_trackings",
    )
    parser.add_argument(
        "--jobs-connection-url",
        default=None,
        help="SQLAlchemy connection URL of the job registry (defaults to --connection-url).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List orphaned trackings without deleting them.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_arg_parser().parse_args(argv)
    engine = create_engine(args.connection_url)
    if args.jobs_connection_url and args.jobs_connection_url != args.connection_url:
        registry = SqlJobRegistry(connection_url=args.jobs_connection_url, create_tables=False)
    else:
        registry = SqlJobRegistry(engine=engine, create_tables=False)

    with engine.begin() as connection:
        repository = TrackingRepository(connection)
        if args.dry_run:
            orphans = repository.find_orphaned_trackings(registry)
        else:
            orphans = repository.prune_orphaned_trackings(registry)

    if not orphans:
        print("No orphaned trackings found.")
        return
    verb = "Found" if args.dry_run else "Pruned"
    print(f"{verb} {len(orphans)} orphaned trackings:")
    for tracking in orphans:
        print(
            f"- {tracking.job_owner_type} {tracking.job_owner_id} "
            f"{tracking.created_by_method_name} -> job {tracking.job_id}"
        )


if __name__ == "__main__":
    main()
