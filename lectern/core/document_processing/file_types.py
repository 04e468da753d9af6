"""
File type detection by extension.

Dependencies: mimetypes (stdlib), lectern.boundary.db.models
System role: Shared mapping from filenames to document categories and MIME types
"""

import mimetypes
from pathlib import Path

from lectern.boundary.db.models.document_model import DocumentType

_EXTENSION_TYPES: dict[str, DocumentType] = {
    ".pdf": DocumentType.PDF,
    ".jpg": DocumentType.IMAGE,
    ".jpeg": DocumentType.IMAGE,
    ".png": DocumentType.IMAGE,
    ".gif": DocumentType.IMAGE,
    ".webp": DocumentType.IMAGE,
    ".doc": DocumentType.DOCS,
    ".docx": DocumentType.DOCS,
    ".txt": DocumentType.DOCS,
    ".rtf": DocumentType.DOCS,
    ".mp4": DocumentType.VIDEO,
    ".avi": DocumentType.VIDEO,
    ".mov": DocumentType.VIDEO,
    ".wmv": DocumentType.VIDEO,
    ".mp3": DocumentType.AUDIO,
    ".wav": DocumentType.AUDIO,
    ".ogg": DocumentType.AUDIO,
}


def file_extension(file_name: str) -> str:
    """Lower-cased extension without the dot, empty when there is none."""
    return Path(file_name).suffix.lower().lstrip(".")


def detect_document_type(file_name: str) -> DocumentType:
    """Map a filename to its document category; unknown extensions are TEXT."""
    return _EXTENSION_TYPES.get(Path(file_name).suffix.lower(), DocumentType.TEXT)


def guess_mime_type(file_name: str) -> str:
    """Best-effort MIME type for a filename."""
    mime_type, _ = mimetypes.guess_type(file_name)
    return mime_type or "application/octet-stream"
