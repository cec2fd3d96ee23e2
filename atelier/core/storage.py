"""
Storage Utility
===============

Project thumbnails are hosted on Cloudinary. Files are sent as unsigned
uploads tagged with an upload preset; the host answers with the public
`secure_url` that gets stored on the project.
"""

import os

import requests
from flask import current_app

from .config import get_config_value
from .logging_service import logger

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


class UploadError(RuntimeError):
    """Raised when the image host does not hand back a usable URL."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


def _file_parts(file):
    """Return (filename, content, mimetype) for the multipart `file` field.

    Accepts raw bytes, a selected thumbnail (anything with `filename`,
    `data` and `mimetype`), a werkzeug FileStorage or an open binary file.
    """
    if isinstance(file, (bytes, bytearray)):
        return 'upload', bytes(file), 'application/octet-stream'

    data = getattr(file, 'data', None)
    if isinstance(data, (bytes, bytearray)):
        return (file.filename or 'upload', bytes(data),
                getattr(file, 'mimetype', None) or 'application/octet-stream')

    filename = getattr(file, 'filename', None) or os.path.basename(getattr(file, 'name', '') or '')
    mimetype = getattr(file, 'mimetype', None) or 'application/octet-stream'
    stream = getattr(file, 'stream', file)
    return filename or 'upload', stream, mimetype


class ImageUploadClient:
    """One-shot uploads to the image host. No retries."""

    def __init__(self, upload_url, upload_preset, timeout=None, session=None):
        self.upload_url = upload_url
        self.upload_preset = upload_preset
        self.timeout = timeout
        self.session = session or requests

    @classmethod
    def from_config(cls):
        cloud_name = get_config_value('CLOUDINARY_CLOUD_NAME')
        upload_url = get_config_value('IMAGE_UPLOAD_URL') or CLOUDINARY_UPLOAD_URL.format(cloud_name=cloud_name)
        timeout = get_config_value('IMAGE_UPLOAD_TIMEOUT')
        return cls(
            upload_url,
            get_config_value('CLOUDINARY_UPLOAD_PRESET'),
            timeout=float(timeout) if timeout else None,
        )

    def upload(self, file):
        """Upload one image and return its public URL.

        Raises:
            UploadError: non-2xx answer, transport failure or a body
                without a `secure_url` string.
        """
        filename, content, mimetype = _file_parts(file)

        try:
            resp = self.session.post(
                self.upload_url,
                files={'file': (filename, content, mimetype)},
                data={'upload_preset': self.upload_preset},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error('storage', f"Image upload failed: {e}", {'filename': filename})
            raise UploadError(f"Could not reach the image host: {e}") from e

        if not 200 <= resp.status_code < 300:
            logger.log_api_call('storage', self.upload_url, 'POST', resp.status_code,
                                {'filename': filename, 'body': resp.text[:500]})
            raise UploadError(f"Image host rejected the upload ({resp.status_code})", resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            logger.error('storage', 'Image host returned a non-JSON body', {'filename': filename})
            raise UploadError('Image host returned a malformed response', resp.status_code) from e

        secure_url = body.get('secure_url') if isinstance(body, dict) else None
        if not isinstance(secure_url, str) or not secure_url:
            logger.error('storage', 'Image host response has no secure_url', {'filename': filename})
            raise UploadError('Image host response has no secure_url', resp.status_code)

        logger.log_api_call('storage', self.upload_url, 'POST', resp.status_code,
                            {'filename': filename, 'secure_url': secure_url})
        return secure_url


def get_image_uploader():
    """Image upload client for the current app (tests swap the factory)."""
    return current_app.extensions['atelier'].image_uploader_factory()
