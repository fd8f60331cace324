import os
import uuid
from io import BytesIO
from dataclasses import dataclass

from flask import current_app, url_for
from PIL import Image, UnidentifiedImageError

JPEG = 'image/jpeg'
PNG = 'image/png'
WEBP = 'image/webp'
SVG = 'image/svg+xml'

MIME_EXTENSIONS = {
    JPEG: 'jpg',
    PNG: 'png',
    WEBP: 'webp',
    SVG: 'svg',
}

# Pillow format name -> MIME type
PIL_FORMATS = {
    'JPEG': JPEG,
    'PNG': PNG,
    'WEBP': WEBP,
}

MB = 1024 * 1024


class StorageError(Exception):
    """Blob storage is unavailable or a write failed"""


class UploadValidationError(StorageError):
    """An uploaded file violates its field's constraints"""

    def __init__(self, field, message):
        super().__init__(message)
        self.field = field
        self.message = message


@dataclass(frozen=True)
class UploadConstraints:
    max_size_bytes: int
    allowed_mime_types: frozenset

    def describe(self):
        types = ', '.join(sorted(MIME_EXTENSIONS[m] for m in self.allowed_mime_types))
        return f"{types}; max {self.max_size_bytes // 1024} KB"


RASTER_TYPES = frozenset({JPEG, PNG, WEBP})

THUMBNAIL = UploadConstraints(2 * MB, RASTER_TYPES)
ICON = UploadConstraints(2 * MB, RASTER_TYPES | {SVG})
PREVIEW_IMAGE = UploadConstraints(4 * MB, RASTER_TYPES)
BANNER_IMAGE = UploadConstraints(4 * MB, RASTER_TYPES)
GALLERY_IMAGE = UploadConstraints(2 * MB, RASTER_TYPES)
POSITION_IMAGE = UploadConstraints(2 * MB, RASTER_TYPES)
PROFILE_IMAGE = UploadConstraints(2 * MB, RASTER_TYPES)
LOGO = UploadConstraints(2 * MB, frozenset({JPEG, PNG, SVG}))


def has_file(file):
    """True when a form file field actually carries an upload"""
    return file is not None and bool(getattr(file, 'filename', None))


class StorageService:
    """Local filesystem blob store rooted at ``UPLOAD_FOLDER``.

    References are relative paths like ``articles/<uuid>.jpg``; they are
    served as static files under ``UPLOAD_URL_PREFIX``.
    """

    @staticmethod
    def _root():
        return current_app.config['UPLOAD_FOLDER']

    @staticmethod
    def _path(reference):
        root = os.path.abspath(StorageService._root())
        path = os.path.abspath(os.path.join(root, reference))
        if os.path.commonpath([root, path]) != root:
            raise StorageError(f"Invalid storage reference: {reference}")
        return path

    @staticmethod
    def sniff_mime_type(content, filename=''):
        """Detect the MIME type from the file content, not the client's claim"""
        if filename.lower().endswith('.svg'):
            head = content[:1024].lstrip().lower()
            if head.startswith(b'<?xml') or head.startswith(b'<svg'):
                if b'<svg' in content[:4096].lower():
                    return SVG
            return None
        try:
            with Image.open(BytesIO(content)) as image:
                image.verify()
                return PIL_FORMATS.get(image.format)
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
            return None

    @staticmethod
    def validate(file, constraints, field='image'):
        """Read and check an upload. Returns ``(content, mime_type)``."""
        content = file.read()
        if not content:
            raise UploadValidationError(field, 'The uploaded file is empty.')
        if len(content) > constraints.max_size_bytes:
            limit = constraints.max_size_bytes // 1024
            raise UploadValidationError(field, f'The file may not be greater than {limit} KB.')
        mime_type = StorageService.sniff_mime_type(content, file.filename or '')
        if mime_type is None or mime_type not in constraints.allowed_mime_types:
            raise UploadValidationError(field, f'The file must be an image ({constraints.describe()}).')
        return content, mime_type

    @staticmethod
    def store(file, constraints, folder, field='image'):
        """Validate ``file`` against ``constraints`` and write it under ``folder``.

        Returns the new storage reference.
        """
        content, mime_type = StorageService.validate(file, constraints, field)
        reference = f"{folder}/{uuid.uuid4().hex}.{MIME_EXTENSIONS[mime_type]}"
        path = StorageService._path(reference)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'wb') as fh:
                fh.write(content)
        except OSError as e:
            current_app.logger.error(f"Failed to store upload {reference}: {str(e)}")
            raise StorageError(f"Could not store uploaded file: {str(e)}") from e
        current_app.logger.debug(f"Stored {len(content)} bytes as {reference}")
        return reference

    @staticmethod
    def delete(reference):
        """Remove a stored blob; a missing blob is not an error"""
        if not reference:
            return False
        try:
            os.remove(StorageService._path(reference))
            return True
        except FileNotFoundError:
            return False
        except (OSError, StorageError) as e:
            current_app.logger.error(f"Failed to delete stored file {reference}: {str(e)}")
            return False

    @staticmethod
    def delete_many(references):
        for reference in references:
            StorageService.delete(reference)

    @staticmethod
    def exists(reference):
        if not reference:
            return False
        try:
            return os.path.isfile(StorageService._path(reference))
        except StorageError:
            return False

    @staticmethod
    def resolve(reference):
        """Public URL for a storage reference"""
        if not reference:
            return None
        prefix = current_app.config.get('UPLOAD_URL_PREFIX', 'uploads')
        return url_for('static', filename=f"{prefix}/{reference}")


class UploadBatch:
    """Tracks blobs written during one request so a failed save can undo them.

    Superseded blobs are queued and only removed once the caller reports the
    database commit succeeded.
    """

    def __init__(self):
        self.stored = []
        self.superseded = []

    def store(self, file, constraints, folder, field='image'):
        reference = StorageService.store(file, constraints, folder, field)
        self.stored.append(reference)
        return reference

    def replace(self, old_reference, file, constraints, folder, field='image'):
        reference = self.store(file, constraints, folder, field)
        if old_reference:
            self.superseded.append(old_reference)
        return reference

    def discard(self, reference):
        if reference:
            self.superseded.append(reference)

    def rollback(self):
        StorageService.delete_many(self.stored)
        self.stored = []
        self.superseded = []

    def commit(self):
        StorageService.delete_many(self.superseded)
        self.stored = []
        self.superseded = []
