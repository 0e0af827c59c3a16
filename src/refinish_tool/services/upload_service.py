"""
Upload Service - stores customer photos on the local filesystem.

Objects are written under ``<upload_dir>/uploads/`` with a sidecar
``.type`` file holding the content type, so they can be served back
with the right headers.
"""
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from ..errors import UploadRejectedError

logger = logging.getLogger(__name__)

ALLOWED_FILE_TYPES = ('image/jpeg', 'image/png', 'image/webp')
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
MIN_IMAGES = 2
MAX_IMAGES = 10

TYPE_ERROR = 'Only JPEG, PNG, and WebP images are allowed'
SIZE_ERROR = 'File must be under 10MB'


@dataclass
class UploadRecord:
    """What the client gets back per stored file and sends with its order."""
    r2_key: str
    original_filename: str
    content_type: str
    size_bytes: int


def validate_file(content_type: str, size: int) -> Optional[str]:
    """Return an error message, or None if the file is acceptable."""
    if content_type not in ALLOWED_FILE_TYPES:
        return TYPE_ERROR
    if size > MAX_FILE_SIZE:
        return SIZE_ERROR
    return None


def _check_file(filename: str, content_type: str, size: int):
    """Raise UploadRejectedError naming the file if validate_file rejects it."""
    error = validate_file(content_type, size)
    if error == TYPE_ERROR:
        raise UploadRejectedError(f"Invalid file type: {filename}. Only JPEG, PNG, and WebP are allowed.")
    if error:
        raise UploadRejectedError(f"File too large: {filename}. Maximum size is 10MB.")


def validate_file_count(count: int) -> Optional[str]:
    """Return an error message, or None if the photo count is acceptable."""
    if count < MIN_IMAGES:
        return f'Please upload at least {MIN_IMAGES} photos'
    if count > MAX_IMAGES:
        return f'Maximum {MAX_IMAGES} photos allowed'
    return None


class UploadService:
    """Service for storing and reading uploaded photos."""

    def __init__(self, upload_dir: Path):
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _generate_key(self, filename: str) -> str:
        ext = filename.rsplit('.', 1)[-1] if '.' in filename else ''
        ext = ext.lower() or 'jpg'
        random_id = uuid.uuid4().hex[:8]
        return f"uploads/{int(time.time() * 1000)}-{random_id}.{ext}"

    def _resolve(self, key: str) -> Optional[Path]:
        """Map a key to a path inside the upload dir, or None if it escapes it."""
        root = self.upload_dir.resolve()
        path = (root / key).resolve()
        if root not in path.parents:
            return None
        return path

    def save(self, filename: str, content_type: str, data: bytes) -> UploadRecord:
        """
        Validate and store a single file.

        Raises:
            UploadRejectedError: wrong type or too large
        """
        _check_file(filename, content_type, len(data))

        key = self._generate_key(filename)
        path = self._resolve(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        path.with_name(path.name + '.type').write_text(content_type, encoding='utf-8')

        logger.info("Stored upload %s (%s, %d bytes)", key, content_type, len(data))
        return UploadRecord(
            r2_key=key,
            original_filename=filename,
            content_type=content_type,
            size_bytes=len(data),
        )

    def save_batch(self, files: list[tuple[str, str, bytes]]) -> list[UploadRecord]:
        """
        Validate a whole batch of (filename, content_type, data) then store it.

        Nothing is written if any file is rejected.
        """
        if not files:
            raise UploadRejectedError('No files provided')
        count_error = validate_file_count(len(files))
        if count_error:
            raise UploadRejectedError(count_error)

        for filename, content_type, data in files:
            _check_file(filename, content_type, len(data))

        return [self.save(filename, content_type, data) for filename, content_type, data in files]

    def open(self, key: str) -> Optional[tuple[bytes, str]]:
        """Return (data, content_type) for a stored key, or None if missing."""
        path = self._resolve(key)
        if path is None or not path.is_file() or path.name.endswith('.type'):
            return None
        type_path = path.with_name(path.name + '.type')
        content_type = type_path.read_text(encoding='utf-8').strip() if type_path.exists() else 'image/jpeg'
        return path.read_bytes(), content_type
