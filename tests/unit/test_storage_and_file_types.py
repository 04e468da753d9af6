"""
Tests for upload storage and file type detection.

System role: Verification of raw upload handling
"""

import io
from pathlib import Path

import pytest

from lectern.boundary.db.models.document_model import DocumentType
from lectern.boundary.storage.upload_store import LocalUploadStore
from lectern.core.document_processing.file_types import (
    detect_document_type,
    file_extension,
    guess_mime_type,
)


class TestLocalUploadStore:
    """Test suite for LocalUploadStore."""

    def test_save_should_write_stream_and_report_size(self, upload_store: LocalUploadStore) -> None:
        stored = upload_store.save("notes.txt", io.BytesIO(b"hello world"))

        assert Path(stored.path).read_bytes() == b"hello world"
        assert stored.size == 11
        assert upload_store.exists(stored.path)

    def test_save_should_sanitize_and_prefix_names(self, upload_store: LocalUploadStore) -> None:
        first = upload_store.save("../../etc/my notes.txt", io.BytesIO(b"a"))
        second = upload_store.save("../../etc/my notes.txt", io.BytesIO(b"b"))

        name = Path(first.path).name
        assert name.endswith("_my_notes.txt")
        assert ".." not in name
        assert first.path != second.path

    def test_delete_should_ignore_missing_files(self, upload_store: LocalUploadStore) -> None:
        stored = upload_store.save("a.txt", io.BytesIO(b"a"))

        upload_store.delete(stored.path)
        upload_store.delete(stored.path)
        upload_store.delete(None)

        assert not upload_store.exists(stored.path)
        assert not upload_store.exists(None)


class TestFileTypes:
    """Test suite for extension-based detection."""

    @pytest.mark.parametrize(
        ("file_name", "expected"),
        [
            ("lecture.PDF", DocumentType.PDF),
            ("diagram.png", DocumentType.IMAGE),
            ("essay.docx", DocumentType.DOCS),
            ("notes.txt", DocumentType.DOCS),
            ("talk.mp4", DocumentType.VIDEO),
            ("podcast.mp3", DocumentType.AUDIO),
            ("readme.md", DocumentType.TEXT),
            ("no_extension", DocumentType.TEXT),
        ],
    )
    def test_detect_document_type(self, file_name: str, expected: DocumentType) -> None:
        assert detect_document_type(file_name) == expected

    def test_file_extension_should_be_lowercase_without_dot(self) -> None:
        assert file_extension("Slides.PPTX") == "pptx"
        assert file_extension("plain") == ""

    def test_guess_mime_type_should_fall_back_to_octet_stream(self) -> None:
        assert guess_mime_type("photo.png") == "image/png"
        assert guess_mime_type("blob.unknownext") == "application/octet-stream"
