"""
Test suite for cascade deletion and vector index endpoints.

System role: Verification of scope, owner and index maintenance HTTP contracts
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from lectern.api.deps import get_index_service, get_scope_service
from lectern.core.exceptions import VectorStoreError

HEADERS = {"X-User-ID": "owner-1"}


@pytest.fixture
def scope_service(app) -> MagicMock:
    service = MagicMock()
    service.delete_scope = AsyncMock(return_value=3)
    service.purge_owner = AsyncMock(return_value=5)
    app.dependency_overrides[get_scope_service] = lambda: service
    return service


@pytest.fixture
def index_service(app) -> MagicMock:
    service = MagicMock()
    service.reset_index = AsyncMock()
    service.is_healthy = AsyncMock(return_value=True)
    app.dependency_overrides[get_index_service] = lambda: service
    return service


class TestScopeEndpoints:
    def test_delete_scope_should_report_count(self, client, scope_service) -> None:
        response = client.delete("/api/v1/scopes/math", headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == {"deleted_documents": 3, "scope_id": "math"}
        scope_service.delete_scope.assert_awaited_once_with("owner-1", "math")

    def test_delete_scope_vector_failure_should_return_500(self, client, scope_service) -> None:
        scope_service.delete_scope.side_effect = VectorStoreError("unreachable", operation="delete")

        response = client.delete("/api/v1/scopes/math", headers=HEADERS)

        assert response.status_code == 500

    def test_purge_owner_should_report_count(self, client, scope_service) -> None:
        response = client.delete("/api/v1/owner-data", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["deleted_documents"] == 5
        scope_service.purge_owner.assert_awaited_once_with("owner-1")

    def test_purge_without_owner_should_return_400(self, client, scope_service) -> None:
        response = client.delete("/api/v1/owner-data")

        assert response.status_code == 400
        scope_service.purge_owner.assert_not_called()


class TestVectorStoreEndpoints:
    def test_reset_should_rebuild_index(self, client, index_service) -> None:
        response = client.post("/api/v1/vector-store/reset")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Vector index rebuilt"}
        index_service.reset_index.assert_awaited_once()

    def test_reset_failure_should_return_500(self, client, index_service) -> None:
        index_service.reset_index.side_effect = VectorStoreError("reset failed", operation="reset")

        response = client.post("/api/v1/vector-store/reset")

        assert response.status_code == 500
