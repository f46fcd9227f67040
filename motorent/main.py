# motorent/main.py
from __future__ import annotations
import logging
import sys

from fastapi import FastAPI

from motorent.core.config import settings
from motorent.routes import migrations

logging.basicConfig(stream=sys.stderr, level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="Motorent admin")
app.include_router(migrations.router)


@app.get("/health")
def health():
    return {"ok": True}
