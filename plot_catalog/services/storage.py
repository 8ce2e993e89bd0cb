"""
Photo storage for user submissions.

Photos live in a bucket directory, one namespace (sub-directory) per
submission id, and are exposed through public URLs served by the app.
"""

import io
import re
import shutil
import time
from pathlib import Path
from typing import List, Optional

import aiofiles
from fastapi import UploadFile
from PIL import Image

from plot_catalog.config import Settings, get_settings
from plot_catalog.utils.exceptions import (
    FileSizeExceededError,
    FileUploadError,
    StorageError,
    UnsupportedFileTypeError,
)
import logging

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {
    "image/jpeg": [".jpg", ".jpeg"],
    "image/png": [".png"],
    "image/webp": [".webp"],
}

PIL_FORMATS = {
    "image/jpeg": ["jpeg"],
    "image/png": ["png"],
    "image/webp": ["webp"],
}


class PhotoStorage:
    """Local-directory bucket holding listing photos."""

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.bucket = settings.photo_bucket
        self.root = Path(settings.storage_dir) / self.bucket
        self.base_url = settings.public_base_url.rstrip("/") + settings.storage_mount_path
        self.list_limit = settings.storage_list_limit
        self.max_file_size = settings.max_file_size
        self.allowed_types = settings.allowed_file_types

        self.root.mkdir(parents=True, exist_ok=True)

    def _namespace_dir(self, namespace: str) -> Path:
        if not namespace or "/" in namespace or "\\" in namespace or namespace.startswith("."):
            raise StorageError(f"Invalid storage namespace: {namespace!r}")
        return self.root / namespace

    @staticmethod
    def _next_stamp(directory: Path) -> int:
        """
        Millisecond stamp for a new object, later than any stamp already in
        the namespace so that name order is upload order.
        """
        stamp = int(time.time() * 1000)
        if directory.is_dir():
            for entry in directory.iterdir():
                prefix = entry.name.split("-", 1)[0]
                if prefix.isdigit():
                    stamp = max(stamp, int(prefix) + 1)
        return stamp

    def public_url(self, path: str) -> str:
        """Public URL for an object path inside the bucket."""
        return f"{self.base_url}/{self.bucket}/{path}"

    def list_objects(self, namespace: str, limit: Optional[int] = None) -> List[str]:
        """
        Object paths stored under a namespace, sorted by name, which is
        upload order for objects written by upload().

        A namespace that was never written is empty, not an error.
        """
        directory = self._namespace_dir(namespace)
        if not directory.is_dir():
            return []

        try:
            names = sorted(entry.name for entry in directory.iterdir() if entry.is_file())
        except OSError as e:
            raise StorageError(f"Failed to list photos: {str(e)}")

        return [f"{namespace}/{name}" for name in names[: limit or self.list_limit]]

    def list_public_urls(self, namespace: str) -> List[str]:
        """Public URLs for every object stored under a namespace."""
        return [self.public_url(path) for path in self.list_objects(namespace)]

    async def validate_photo(self, file: UploadFile) -> bytes:
        """
        Check type, extension, size and that the content decodes as an image.

        Returns:
            File content
        """
        if file.content_type not in self.allowed_types:
            raise UnsupportedFileTypeError(file.content_type or "unknown", self.allowed_types)

        if not file.filename:
            raise FileUploadError("Filename is required")

        extension = Path(file.filename).suffix.lower()
        if extension not in ALLOWED_EXTENSIONS.get(file.content_type, []):
            raise FileUploadError(f"Extension '{extension}' does not match type {file.content_type}")

        await file.seek(0)
        content = await file.read()

        if len(content) > self.max_file_size:
            raise FileSizeExceededError(len(content), self.max_file_size)

        try:
            with Image.open(io.BytesIO(content)) as img:
                pil_format = (img.format or "").lower()
        except Exception as e:
            raise FileUploadError(f"Invalid image file: {str(e)}")

        if pil_format not in PIL_FORMATS[file.content_type]:
            raise FileUploadError(f"File content doesn't match declared type {file.content_type}")

        return content

    async def upload(self, namespace: str, file: UploadFile) -> str:
        """
        Store a validated photo under a namespace.

        Returns:
            Object path inside the bucket
        """
        content = await self.validate_photo(file)

        safe_name = re.sub(r"\s+", "-", Path(file.filename).name)
        directory = self._namespace_dir(namespace)
        object_name = f"{self._next_stamp(directory)}-{safe_name}"
        file_path = directory / object_name

        try:
            directory.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            if file_path.exists():
                file_path.unlink()
            raise StorageError(f"Failed to store photo: {str(e)}")

        logger.debug(f"Stored photo {namespace}/{object_name} ({len(content)} bytes)")
        return f"{namespace}/{object_name}"

    def remove_namespace(self, namespace: str) -> None:
        """Delete every object under a namespace."""
        directory = self._namespace_dir(namespace)
        if directory.is_dir():
            shutil.rmtree(directory)
            logger.info(f"Removed photo namespace {namespace}")


def get_photo_storage() -> PhotoStorage:
    """Dependency providing the configured photo storage."""
    return PhotoStorage()
