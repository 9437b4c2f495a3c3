"""
Upload persistence and per-request file bookkeeping.
"""

import logging
import uuid
from pathlib import Path
from typing import BinaryIO

from .errors import StorageError, UploadTooLargeError
from .models import JobArtifacts

logger = logging.getLogger("vidtranslate")

CHUNK_SIZE = 1024 * 1024


def ensure_dir(path: Path) -> None:
    """Ensure directory exists."""
    path.mkdir(parents=True, exist_ok=True)


def new_token() -> str:
    """A fresh token for one request; never reused."""
    return uuid.uuid4().hex


def plan_artifacts(upload_dir: Path, original_filename: str, token: str | None = None) -> JobArtifacts:
    """Derive every artifact path of a request from its token and upload name."""
    extension = Path(original_filename or "").suffix
    return JobArtifacts.for_token(upload_dir, token or new_token(), extension)


def store_upload(payload: BinaryIO, dest: Path, max_bytes: int | None = None) -> int:
    """
    Copy an uploaded payload to dest in chunks and return the byte count.

    The directory is created if missing. If the copy fails or exceeds
    max_bytes, the partial file is removed before raising.
    """
    try:
        ensure_dir(dest.parent)
    except OSError as e:
        raise StorageError(f"Cannot create upload directory {dest.parent}: {e}") from e

    written = 0
    try:
        with open(dest, "wb") as out:
            while True:
                chunk = payload.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if max_bytes is not None and written > max_bytes:
                    raise UploadTooLargeError(max_bytes)
                out.write(chunk)
    except UploadTooLargeError:
        remove_files(dest)
        raise
    except OSError as e:
        remove_files(dest)
        raise StorageError(f"Failed to write {dest.name}: {e}") from e

    logger.info(f"Stored upload -> {dest} ({written} bytes)")
    return written


def remove_files(*paths: Path) -> None:
    """Delete files if they exist; failures are logged, not raised."""
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove %s: %s", path, e)
