# student_hub/core/firebase.py
import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore, storage

from student_hub.config import settings

logger = logging.getLogger(__name__)


def initialize_firebase():
    """Initialize the Firebase Admin SDK once per process"""
    if firebase_admin._apps:
        return

    try:
        if os.path.exists(settings.FIREBASE_CREDENTIALS_PATH):
            cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)
        else:
            # Fall back to GOOGLE_APPLICATION_CREDENTIALS / workload identity
            cred = credentials.ApplicationDefault()
        firebase_admin.initialize_app(cred, {
            'storageBucket': settings.FIREBASE_STORAGE_BUCKET
        })
        logger.info("Firebase Admin SDK initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize Firebase: {str(e)}")
        raise


def get_firestore_client():
    initialize_firebase()
    return firestore.client()


def get_storage_bucket():
    initialize_firebase()
    return storage.bucket()
