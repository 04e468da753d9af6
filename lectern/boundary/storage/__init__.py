"""Raw upload storage."""

from lectern.boundary.storage.upload_store import LocalUploadStore, StoredUpload

__all__ = ["LocalUploadStore", "StoredUpload"]
