# student_hub/services/storage_service.py
import logging
import os
import re
import time

from google.api_core import exceptions as google_exceptions

from student_hub.config import settings
from student_hub.core.exceptions import ExternalServiceError, ValidationError
from student_hub.core.firebase import get_storage_bucket

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def check_image(content: bytes, content_type: str):
    """Reject empty, oversized or non-image uploads before anything leaves the process"""
    if not content:
        raise ValidationError("Please upload a certificate image.")
    if content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise ValidationError(
            f"Unsupported image type '{content_type}'. Allowed: {', '.join(settings.ALLOWED_IMAGE_TYPES)}"
        )
    if len(content) > settings.MAX_IMAGE_SIZE:
        raise ValidationError(
            f"Image is too large. Maximum size is {settings.MAX_IMAGE_SIZE // (1024 * 1024)}MB."
        )


def certificate_path(owner_id: str, filename: str) -> str:
    safe_name = _UNSAFE_CHARS.sub("_", os.path.basename(filename or "certificate")) or "certificate"
    return f"certificates/{owner_id}/{int(time.time() * 1000)}_{safe_name}"


class FirebaseBlobStorage:
    """Certificate images in the Firebase Cloud Storage bucket"""

    def __init__(self, bucket=None):
        self._bucket = bucket

    @property
    def bucket(self):
        if self._bucket is None:
            self._bucket = get_storage_bucket()
        return self._bucket

    def upload_image(self, owner_id: str, filename: str, content: bytes, content_type: str) -> str:
        """Upload a certificate image and return its stable public URL"""
        check_image(content, content_type)
        blob = self.bucket.blob(certificate_path(owner_id, filename))
        try:
            blob.upload_from_string(content, content_type=content_type)
            blob.make_public()
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Image upload failed for {owner_id}: {str(e)}")
            raise ExternalServiceError("Image upload failed, please try again") from e
        logger.info(f"Uploaded certificate {blob.name}")
        return blob.public_url
