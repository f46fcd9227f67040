# motorent/routes/migrations.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from motorent.core.config import settings
from motorent.models.migration import MigrationResult, VEHICLE_FINANCE_FIELDS
from motorent.services.auth import require_admin
from motorent.services.field_migrator import FieldMigrator, MigrationError
from motorent.services.gcp_clients import get_firestore_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/migrations", tags=["admin"])


def get_db():
    return get_firestore_client()


@router.post("/vehicle-finance-fields", response_model=MigrationResult)
def run_vehicle_finance_fields(
    dry_run: bool = Query(False),
    admin = Depends(require_admin),
    db = Depends(get_db),
):
    """Run the vehicle finance-field backfill once, on demand."""
    try:
        spec = VEHICLE_FINANCE_FIELDS.for_collection(settings.vehicles_collection)
    except ValueError as e:
        logger.error(f"[migrations] bad VEHICLES_COLLECTION {settings.vehicles_collection!r}: {e}")
        raise HTTPException(500, f"Invalid vehicles collection setting: {settings.vehicles_collection!r}")
    logger.info(f"[migrations] {admin.get('email', admin.get('sub'))} started {spec.collection} backfill (dry_run={dry_run})")
    try:
        return FieldMigrator(db, batch_size=settings.migration_batch_size).run(spec, dry_run=dry_run)
    except MigrationError as e:
        logger.error(f"[migrations] {spec.collection} backfill failed: {e}")
        raise HTTPException(
            502,
            {"error": str(e), "updated": e.updated, "batch": e.batch_number},
        )
