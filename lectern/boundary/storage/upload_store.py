"""
Local upload storage.

Stores uploaded files under a configured directory with a UUID-prefixed
name so the ingestion workers (and later re-ingestion) can read them.

Dependencies: shutil, pathlib (stdlib)
System role: Raw document storage
"""

import logging
import re
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class StoredUpload:
    """Location and size of a stored upload."""

    path: str
    size: int


class LocalUploadStore:
    """Filesystem-backed storage for uploaded documents."""

    def __init__(self, directory: str) -> None:
        self._directory = Path(directory)

    def save(self, file_name: str, stream: BinaryIO) -> StoredUpload:
        """
        Copy an upload stream to disk.

        Args:
            file_name: Original filename (sanitized into the stored name)
            stream: Readable binary stream

        Returns:
            StoredUpload: Stored path and byte size
        """
        self._directory.mkdir(parents=True, exist_ok=True)
        safe_name = _UNSAFE_CHARS.sub("_", Path(file_name).name) or "upload"
        target = self._directory / f"{uuid.uuid4().hex}_{safe_name}"

        with target.open("wb") as out:
            shutil.copyfileobj(stream, out)

        size = target.stat().st_size
        logger.info(
            f"{__name__}:save - Stored upload",
            extra={"file_name": file_name, "path": str(target), "size": size},
        )
        return StoredUpload(path=str(target), size=size)

    def delete(self, path: str | None) -> None:
        """Remove a stored upload; missing files are ignored."""
        if not path:
            return
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"{__name__}:delete - Could not remove {path}: {e}")

    def exists(self, path: str | None) -> bool:
        return bool(path) and Path(path).is_file()
