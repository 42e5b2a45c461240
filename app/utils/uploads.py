import logging
import mimetypes
import secrets
import time
from pathlib import Path

from fastapi import UploadFile

from app.config import settings
from app.utils.exceptions import InvalidUploadException

logger = logging.getLogger(__name__)


def _upload_dir() -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _extension(upload: UploadFile) -> str:
    suffix = Path(upload.filename or "").suffix.lower()
    if suffix:
        return suffix
    return mimetypes.guess_extension(upload.content_type or "") or ""


def read_images(files: list[UploadFile] | None, max_count: int | None = None) -> list[tuple[UploadFile, bytes]]:
    """
    Validate and buffer uploaded images.

    Every file is checked before anything is written, so a request either
    stores all of its images or none of them.
    """
    files = [f for f in (files or []) if f is not None and f.filename]
    max_count = max_count or settings.MAX_FILES_PER_REQUEST
    if len(files) > max_count:
        raise InvalidUploadException(f"Too many files. Maximum is {max_count} images.")

    buffered = []
    for upload in files:
        if not (upload.content_type or "").startswith("image/"):
            raise InvalidUploadException("Only image files are allowed.")
        content = upload.file.read()
        if not content:
            raise InvalidUploadException(f"File {upload.filename} is empty.")
        if len(content) > settings.MAX_FILE_SIZE:
            max_mb = settings.MAX_FILE_SIZE // (1024 * 1024)
            raise InvalidUploadException(f"File too large. Maximum size is {max_mb}MB.")
        buffered.append((upload, content))
    return buffered


def store_images(buffered: list[tuple[UploadFile, bytes]], field: str = "images") -> list[str]:
    """Write buffered images to UPLOAD_DIR and return their public paths, in order."""
    directory = _upload_dir()
    paths = []
    for upload, content in buffered:
        name = f"{field}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{_extension(upload)}"
        (directory / name).write_bytes(content)
        paths.append(f"{settings.UPLOAD_URL_PREFIX}/{name}")
    logger.info(f"Stored {len(paths)} uploaded image(s)")
    return paths


def discard_images(paths: list[str]) -> None:
    """Remove stored files for a request that failed after writing them."""
    directory = Path(settings.UPLOAD_DIR)
    for path in paths:
        target = directory / Path(path).name
        try:
            target.unlink()
        except FileNotFoundError:
            logger.warning(f"Upload already removed: {target}")
