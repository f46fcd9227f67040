"""
Field migration data models.

A migration spec names one Firestore collection and the literal defaults to
write onto every document in it. Values are constants rather than increments,
so re-applying a spec always converges on the same state.
"""
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, field_validator


class MigrationSpec(BaseModel):
    """Collection plus ordered field name -> default value mapping"""
    collection: str
    fields: Dict[str, Any]

    @field_validator("collection")
    @classmethod
    def _check_collection(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("collection name must not be empty")
        if "/" in v:
            raise ValueError(f"'{v}' is a path, expected a top-level collection name")
        return v

    @field_validator("fields")
    @classmethod
    def _check_fields(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        if not v:
            raise ValueError("migration spec needs at least one field")
        for name in v:
            if not isinstance(name, str) or not name.strip():
                raise ValueError(f"invalid field name: {name!r}")
        return v

    def for_collection(self, collection: str) -> "MigrationSpec":
        """Same fields, different target collection."""
        return MigrationSpec(collection=collection, fields=dict(self.fields))


class MigrationResult(BaseModel):
    collection: str
    scanned: int = 0
    updated: int = 0
    batches: int = 0       # commits actually sent to the store
    dry_run: bool = False


# monthly cost fields added to every vehicle record
VEHICLE_FINANCE_FIELDS = MigrationSpec(
    collection="vehicles",
    fields={
        "monthly_maintenance": 0.0,
        "monthly_payment": 0.0,
    },
)
