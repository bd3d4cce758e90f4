"""
Image uploads for receipts, payment screenshots, bill photos and avatars.

Files go through Django's default storage under ``UPLOAD_FOLDER``; the
returned URL is what the client stores in ``screenshot_url``,
``receipt_url``, ``image_url`` or ``avatar_url``.
"""

import logging
import os
import uuid

from django.conf import settings
from django.core.files.storage import default_storage

from .exceptions import FileTooLargeError, InvalidFileTypeError, MissingFileError

logger = logging.getLogger(__name__)

MAX_UPLOAD_SIZE = 5 * 1024 * 1024
ALLOWED_CONTENT_TYPES = {
    'image/jpeg': '.jpg',
    'image/jpg': '.jpg',
    'image/png': '.png',
    'image/webp': '.webp',
    'image/gif': '.gif',
}


def validate_image(upload) -> None:
    """
    Check the type and size of an uploaded file.

    Raises:
        MissingFileError: No file given
        InvalidFileTypeError: Content type outside ALLOWED_CONTENT_TYPES
        FileTooLargeError: Larger than MAX_UPLOAD_SIZE
    """
    if upload is None:
        raise MissingFileError("No file provided")
    if upload.content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidFileTypeError("Invalid file type. Only images are allowed.")
    if upload.size > MAX_UPLOAD_SIZE:
        raise FileTooLargeError("File too large. Maximum size is 5MB.")


def store_image(*, upload, user) -> dict:
    """
    Validate and save an image.

    Args:
        upload: The UploadedFile from the request
        user: Uploader, used for logging only

    Returns:
        dict with ``public_id`` (storage name) and ``url`` (storage URL,
        relative for the file system backend)
    """
    validate_image(upload)

    extension = ALLOWED_CONTENT_TYPES[upload.content_type]
    name = os.path.join(settings.UPLOAD_FOLDER, f'{uuid.uuid4().hex}{extension}')
    saved_name = default_storage.save(name, upload)

    logger.info("Stored upload %s (%d bytes) for %s", saved_name, upload.size, user.id)
    return {
        'url': default_storage.url(saved_name),
        'public_id': saved_name,
    }
