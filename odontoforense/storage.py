"""Local-disk storage for evidence uploads.

Files land in ``Settings.upload_dir`` under a random name and are served
back by the ``/uploads`` static mount. A stored file is never removed when
the database write that follows it fails.
"""

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile

from odontoforense.core.config import Settings
from odontoforense.core.errors import ValidationFailed

logger = logging.getLogger(__name__)

UPLOADS_PATH = '/uploads'
CHUNK_SIZE = 1024 * 1024


def pick_single_upload(files: list[UploadFile] | None) -> UploadFile | None:
    if not files:
        return None
    if len(files) > 1:
        raise ValidationFailed('Only one file may be uploaded per request.')
    return files[0]


def build_file_url(settings: Settings, stored_name: str) -> str:
    return f'{settings.public_base_url}{UPLOADS_PATH}/{stored_name}'


def save_upload(upload: UploadFile, settings: Settings) -> str:
    """Persist ``upload`` and return the URL it can be retrieved from."""
    content_type = upload.content_type or 'application/octet-stream'
    if settings.allowed_upload_types and content_type not in settings.allowed_upload_types:
        raise ValidationFailed(f'Unsupported file type: {content_type}')

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)

    extension = Path(upload.filename or '').suffix.lower()
    stored_name = f'{uuid.uuid4().hex}{extension}'
    destination = upload_dir / stored_name

    size = 0
    with destination.open('wb') as target:
        while True:
            chunk = upload.file.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > settings.max_upload_size_bytes:
                break
            target.write(chunk)

    if size == 0 or size > settings.max_upload_size_bytes:
        destination.unlink(missing_ok=True)
        if size == 0:
            raise ValidationFailed('Uploaded file is empty.')
        raise ValidationFailed(
            f'File too large. Maximum size is {settings.max_upload_size_bytes} bytes.'
        )

    logger.info('Stored upload %s (%s, %d bytes)', stored_name, content_type, size)
    return build_file_url(settings, stored_name)
