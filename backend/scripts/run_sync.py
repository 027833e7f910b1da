#!/usr/bin/env python
"""Run a sync once from the command line.

Either runs a whole cadence batch, exactly as the scheduler would, or
syncs a single user on demand.

Usage:
    python -m scripts.run_sync --cadence daily
    python -m scripts.run_sync --user <user-id>
"""

import argparse
import sys

from database import session_scope
from logging_config import setup_logging
from services.sync_service import SCHEDULED_CADENCES, SyncInProgressError, SyncOrchestrator


def main(argv: list[str] | None = None, orchestrator: SyncOrchestrator | None = None) -> int:
    """Entry point: parse args and run the requested sync."""
    parser = argparse.ArgumentParser(description="Run a balance and transaction sync once.")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--cadence", choices=SCHEDULED_CADENCES, help="Sync every user on this cadence")
    target.add_argument("--user", help="Sync a single user by ID")
    args = parser.parse_args(argv)

    setup_logging()
    orchestrator = orchestrator or SyncOrchestrator()

    with session_scope() as db:
        try:
            if args.user:
                result = orchestrator.sync_single_user(db, args.user)
                failed = set(result.balances.failed_institution_ids)
                failed.update(result.transactions.failed_institution_ids)
                print(f"User {result.user_id}:")
                print(f"  Snapshots created: {result.balances.snapshots_created}")
                print(f"  Forward-filled: {result.balances.forward_filled}")
                print(f"  Transactions imported: {result.transactions.imported}")
                print(f"  Failed institutions: {len(failed)}")
            else:
                run = orchestrator.run_cadence(db, args.cadence)
                print(f"{run.cadence.capitalize()} sync:")
                print(f"  Users processed: {run.users_processed}")
                print(f"  Users failed: {len(run.failed_user_ids)}")
        except SyncInProgressError:
            print("Error: a sync is already in progress")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
