# motorent/services/field_migrator.py
"""
Bulk field migration for Firestore collections.

Reads a collection page by page (ordered by document id) and, for every
document, stages an ``update`` that sets each field of a ``MigrationSpec`` to
its literal default. Each page is committed as one atomic ``WriteBatch``.

Notes
-----
• ``update`` touches only the named fields; everything else on the document
  is left as is. Pre-existing values under those names are overwritten.
• Firestore rejects batches over 500 writes, so pages are capped there.
  400 is the default to leave headroom, same as the other backfills.
• Fail fast: if a page read or a batch commit fails, no further pages are
  processed. Batches committed before the failure stay committed; the error
  reports how many documents that covers.
• The store handle is injected. Anything with ``collection()`` and
  ``batch()`` that behaves like ``google.cloud.firestore.Client`` works.
"""
from __future__ import annotations

import logging
from typing import Any, Iterator, List, Optional, Union

from google.cloud.firestore_v1.field_path import FieldPath  # type: ignore

from motorent.models.migration import MigrationResult, MigrationSpec

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 500
DEFAULT_BATCH_SIZE = 400


class MigrationError(RuntimeError):
    """A migration run stopped before reaching the end of the collection."""

    def __init__(
        self,
        message: str,
        *,
        collection: str,
        updated: int = 0,
        batch_number: Optional[int] = None,
    ):
        super().__init__(message)
        self.collection = collection
        self.updated = updated              # docs committed before the failure
        self.batch_number = batch_number


class CollectionReadError(MigrationError):
    pass


class BatchCommitError(MigrationError):
    pass


class FieldMigrator:
    def __init__(self, db: Any, *, batch_size: int = DEFAULT_BATCH_SIZE):
        if not 1 <= int(batch_size) <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}, got {batch_size}")
        self._db = db
        self.batch_size = int(batch_size)

    def _collection(self, collection: Union[str, Any]):
        return self._db.collection(collection) if isinstance(collection, str) else collection

    def _pages(self, coll, result: MigrationResult) -> Iterator[List[Any]]:
        query = coll.order_by(FieldPath.document_id()).limit(self.batch_size)
        cursor = None
        while True:
            q = query.start_after(cursor) if cursor is not None else query
            try:
                snaps = list(q.get())
            except Exception as exc:
                raise CollectionReadError(
                    f"Reading '{result.collection}' failed after {result.updated} docs were updated: {exc}",
                    collection=result.collection,
                    updated=result.updated,
                    batch_number=result.batches + 1,
                ) from exc
            if not snaps:
                return
            yield snaps
            if len(snaps) < self.batch_size:
                return
            cursor = snaps[-1]

    def migrate(self, collection, spec: MigrationSpec, *, dry_run: bool = False) -> MigrationResult:
        """Set every field in ``spec`` on every document of ``collection``.

        ``collection`` is a collection name or a collection reference on the
        injected client. Returns a ``MigrationResult``; raises a
        ``MigrationError`` subclass if a read or a commit fails.
        """
        coll = self._collection(collection)
        result = MigrationResult(collection=coll.id, dry_run=dry_run)
        fields = dict(spec.fields)

        for page in self._pages(coll, result):
            result.scanned += len(page)
            if dry_run:
                result.updated += len(page)
                logger.info(f"[DRY] would update {len(page)} {result.collection} docs with {fields}")
                continue

            batch = self._db.batch()
            for snap in page:
                batch.update(snap.reference, fields)
            try:
                batch.commit()
            except Exception as exc:
                raise BatchCommitError(
                    f"Batch {result.batches + 1} on '{result.collection}' failed "
                    f"after {result.updated} docs were updated: {exc}",
                    collection=result.collection,
                    updated=result.updated,
                    batch_number=result.batches + 1,
                ) from exc
            result.batches += 1
            result.updated += len(page)
            logger.debug(f"Committed batch {result.batches} ({result.updated} docs so far)")

        if dry_run:
            logger.info(f"[DRY] scanned={result.scanned}, would update={result.updated}")
        else:
            logger.info(
                f"✅ Updated {result.updated} {result.collection} docs with fields "
                f"{', '.join(fields)} in {result.batches} batch(es)"
            )
        return result

    def run(self, spec: MigrationSpec, *, dry_run: bool = False) -> MigrationResult:
        return self.migrate(spec.collection, spec, dry_run=dry_run)


def migrate_collection(
    db,
    spec: MigrationSpec,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    dry_run: bool = False,
) -> MigrationResult:
    return FieldMigrator(db, batch_size=batch_size).run(spec, dry_run=dry_run)
