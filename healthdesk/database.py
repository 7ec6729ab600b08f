import logging
import os

from google.auth.credentials import AnonymousCredentials
from google.cloud import firestore

logger = logging.getLogger(__name__)


def get_db() -> firestore.Client:
    """Get Firestore client. Uses emulator if FIRESTORE_EMULATOR_HOST is set."""
    emulator_host = os.getenv("FIRESTORE_EMULATOR_HOST")

    if emulator_host:
        project_id = os.getenv("GCP_PROJECT_ID", "healthdesk-local")
        logger.debug(f"Using Firestore emulator at {emulator_host} ({project_id})")
        return firestore.Client(project=project_id, credentials=AnonymousCredentials())

    project_id = os.getenv("GCP_PROJECT_ID")
    if project_id:
        return firestore.Client(project=project_id)

    return firestore.Client()
