# motorent/services/gcp_clients.py
import logging
import os
from functools import lru_cache

import firebase_admin
from firebase_admin import credentials, firestore as fb_firestore
from google.cloud import firestore

from motorent.core.config import settings

logger = logging.getLogger(__name__)


def get_firebase_app() -> firebase_admin.App:
    """Return the default Firebase Admin app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    options = {"projectId": settings.gcp_project} if settings.gcp_project else None
    service_account_path = settings.gcp_credentials_path or os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    if service_account_path and os.path.exists(service_account_path):
        cred = credentials.Certificate(service_account_path)
        logger.info(f"Firebase Admin SDK initialized with service account: {service_account_path}")
    else:
        logger.warning("GOOGLE_APPLICATION_CREDENTIALS not set; relying on ADC.")
        cred = credentials.ApplicationDefault()
    return firebase_admin.initialize_app(cred, options)


@lru_cache(maxsize=1)
def get_firestore_client() -> firestore.Client:
    return fb_firestore.client(get_firebase_app())
