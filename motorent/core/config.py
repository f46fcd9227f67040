import os
from pathlib import Path
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices, field_validator

ROOT = Path(__file__).resolve().parents[2]
load_dotenv(ROOT / ".env", override=False)     # loads GCP_* / JWT_* vars


class Settings(BaseSettings):
    # ───────────────── GCP / Firestore ───────────────
    # Map multiple possible env names to each field for robustness
    gcp_project: str | None = Field(
        None,
        validation_alias=AliasChoices(
            "GCP_PROJECT_ID",
            "GCLOUD_PROJECT",      # gcloud default
            "GOOGLE_CLOUD_PROJECT" # older samples
        ),
    )
    gcp_credentials_path: str | None = Field(
        None,
        validation_alias=AliasChoices("GOOGLE_APPLICATION_CREDENTIALS", "GCP_CREDENTIALS")
    )

    # ───────────────── Migration ─────────────────────
    vehicles_collection: str = Field("vehicles", validation_alias="VEHICLES_COLLECTION")
    # Firestore caps a batched write at 500 operations
    migration_batch_size: int = Field(400, ge=1, le=500, validation_alias="MIGRATION_BATCH_SIZE")

    # ───────────────── JWT secret (simple) ─────────
    jwt_secret: str = Field("dev-secret", validation_alias="JWT_SECRET")
    jwt_alg: str = "HS256"

    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    model_config = SettingsConfigDict(case_sensitive=False, env_file='.env', extra='allow')

    @field_validator("vehicles_collection")
    @classmethod
    def _top_level_collection(cls, v: str) -> str:
        v = v.strip()
        if not v or "/" in v:
            raise ValueError(f"VEHICLES_COLLECTION must be a top-level collection name, got {v!r}")
        return v


settings = Settings()

if settings.gcp_credentials_path:
    os.environ.setdefault("GOOGLE_APPLICATION_CREDENTIALS", settings.gcp_credentials_path)
