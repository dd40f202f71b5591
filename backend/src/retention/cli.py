"""Command-line entry point for manual database cleanup.

Usage:
    school-cleanup              Run cleanup with default thresholds
    school-cleanup --dry-run    Show what would be deleted
    school-cleanup --stats      Show row counts and cleanup estimates

Environment Variables:
    DATABASE_URL: Database connection string
    LOG_LEVEL / LOG_JSON: Logging configuration

Exit code is 1 when a task failed or the store was unreachable.
"""

import argparse
import sys
from typing import Optional, Sequence

from config import get_settings
from database import create_db_engine, create_session_factory, session_scope
from observability.logging_config import configure_logging
from observability.request_id import request_id_context
from .schemas import CleanupResult, DatabaseStats
from .service import RetentionService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="school-cleanup",
        description="Delete stale records according to the retention thresholds.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="count eligible rows without deleting anything",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="print table counts and cleanup estimates, then exit",
    )
    return parser


def print_stats(stats: DatabaseStats) -> None:
    print("\nTable counts:")
    for table, count in stats.table_counts.items():
        print(f"  {table}: {count}")

    print("\nEstimated cleanable (default thresholds):")
    for task, count in stats.estimated_cleanable.items():
        print(f"  {task}: {count}")

    print(f"\nTotal rows: {stats.total_rows}")
    print(f"Total cleanable: {stats.total_cleanable}")


def print_result(result: CleanupResult) -> None:
    verb = "would be deleted" if result.dry_run else "deleted"

    print("\nResults:")
    for task, outcome in result.results.items():
        if outcome.error:
            print(f"  ❌ {task}: Error - {outcome.error}")
        else:
            print(f"  ✓ {task}: {outcome.deleted} {verb}")

    print(f"\nDuration: {result.duration_ms}ms")
    print(f"Total {verb}: {result.total_deleted}")

    if result.errors:
        print(f"\nErrors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  - {error}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    engine = create_db_engine(settings.DATABASE_URL)
    try:
        with request_id_context(), session_scope(create_session_factory(engine)) as db:
            service = RetentionService(
                db,
                anomaly_threshold=settings.RETENTION_ANOMALY_THRESHOLD,
            )

            if args.stats:
                print("Collecting database statistics...")
                print_stats(service.get_statistics())
                return 0

            if args.dry_run:
                print("DRY RUN - no data will be deleted")
            print("Starting database cleanup...")

            result = service.run_cleanup({"dry_run": args.dry_run})
            print_result(result)
            return 1 if result.has_errors else 0

    except Exception as e:
        print(f"ERROR: Cleanup failed: {e}", file=sys.stderr)
        return 1

    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
