#!/usr/bin/env python3
"""
Backfill 'monthly_maintenance' and 'monthly_payment' on vehicle docs.

Rules:
- Every doc in the vehicles collection gets both fields set to 0.0,
  overwriting whatever was there. Other fields are left alone.
- Idempotent: re-running just writes the same constants again.
- Pages of --batch-size docs, one atomic batch per page. Stops at the
  first failed batch and reports how many docs were already written.
- Supports --dry-run, --batch-size and --collection.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import Optional, Sequence

from motorent.core.config import settings
from motorent.models.migration import VEHICLE_FINANCE_FIELDS
from motorent.services.field_migrator import FieldMigrator, MigrationError


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Add monthly cost fields to every vehicle")
    ap.add_argument("--dry-run", action="store_true", help="count docs, don’t write")
    ap.add_argument("--batch-size", type=int, default=settings.migration_batch_size,
                    help="docs per atomic batch (max 500)")
    ap.add_argument("--collection", default=settings.vehicles_collection)
    return ap


def run(db, *, collection: str, batch_size: int, dry_run: bool = False):
    spec = VEHICLE_FINANCE_FIELDS.for_collection(collection)
    return FieldMigrator(db, batch_size=batch_size).run(spec, dry_run=dry_run)


def main(argv: Optional[Sequence[str]] = None, db=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(stream=sys.stderr, level=settings.log_level.upper())

    if db is None:
        from motorent.services.gcp_clients import get_firestore_client
        db = get_firestore_client()

    try:
        result = run(db, collection=args.collection, batch_size=args.batch_size, dry_run=args.dry_run)
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2
    except MigrationError as e:
        print(f"❌ {e}", file=sys.stderr)
        print(f"updated before failure={e.updated}", file=sys.stderr)
        return 1

    print(f"scanned={result.scanned}, updated={result.updated}, batches={result.batches}"
          f"{' (dry-run)' if result.dry_run else ''}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
