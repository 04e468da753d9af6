"""
Integration tests for FAISSVectorStore.

Exercises owner isolation, filter precedence, ranking, cascade deletes,
index reset and persistence against a real FAISS index.

System role: Verification of the local vector backend
"""

import pytest

from lectern.boundary.vdb.faiss_store import FAISSVectorStore
from lectern.boundary.vdb.vector_schemas import VectorRecord, VectorScope
from lectern.core.exceptions import VectorStoreError

from conftest import TEST_DIMENSION, axis_vector


def _record(
    text: str,
    axis: int,
    owner_id: str = "u1",
    document_id: str = "d1",
    subject_id: str = "",
    topic_id: str = "",
) -> VectorRecord:
    return VectorRecord(
        text=text,
        embedding=axis_vector(axis),
        owner_id=owner_id,
        subject_id=subject_id,
        topic_id=topic_id,
        document_id=document_id,
        metadata={"chunk_index": 0},
    )


class TestFAISSSearch:
    """Test suite for FAISSVectorStore.search()."""

    def test_empty_store_should_return_no_results(self, faiss_store: FAISSVectorStore) -> None:
        assert faiss_store.search(axis_vector(0), owner_id="u1") == []

    def test_search_should_only_return_owner_records(self, faiss_store: FAISSVectorStore) -> None:
        """Another owner's identical vector is never returned."""
        # Arrange
        faiss_store.insert_many([
            _record("mine", 0, owner_id="u1", document_id="d1"),
            _record("theirs", 0, owner_id="u2", document_id="d2"),
        ])

        # Act
        results = faiss_store.search(axis_vector(0), owner_id="u1", top_k=10)

        # Assert
        assert [r.text for r in results] == ["mine"]
        assert faiss_store.search(axis_vector(0), owner_id="nobody") == []

    def test_shared_scope_id_should_not_cross_owners(self, faiss_store: FAISSVectorStore) -> None:
        """Owners reusing one subject id stay isolated under a scoped search."""
        faiss_store.insert_many([
            _record("mine", 0, owner_id="u1", document_id="d1", subject_id="s"),
            _record("theirs", 0, owner_id="u2", document_id="d2", subject_id="s"),
        ])

        results = faiss_store.search(axis_vector(0), owner_id="u1", scope=VectorScope(subject_id="s"), top_k=10)

        assert [(r.owner_id, r.text) for r in results] == [("u1", "mine")]

    def test_results_should_be_ordered_by_similarity(self, faiss_store: FAISSVectorStore) -> None:
        faiss_store.insert_many([
            _record("far", 1),
            _record("near", 0),
        ])

        results = faiss_store.search(axis_vector(0), owner_id="u1", top_k=2)

        assert [r.text for r in results] == ["near", "far"]
        assert results[0].score == pytest.approx(1.0)
        assert results[1].score == pytest.approx(0.0)

    def test_ties_should_keep_insertion_order(self, faiss_store: FAISSVectorStore) -> None:
        faiss_store.insert_many([_record(f"chunk-{i}", 0) for i in range(5)])

        results = faiss_store.search(axis_vector(0), owner_id="u1", top_k=3)

        assert [r.text for r in results] == ["chunk-0", "chunk-1", "chunk-2"]

    def test_document_ids_should_take_precedence_over_scope(self, faiss_store: FAISSVectorStore) -> None:
        """Records of the listed documents match even outside the scope hints."""
        faiss_store.insert_many([
            _record("in doc, other subject", 0, document_id="d1", subject_id="s2"),
            _record("in subject, other doc", 0, document_id="d2", subject_id="s1"),
        ])

        results = faiss_store.search(
            axis_vector(0),
            owner_id="u1",
            scope=VectorScope(subject_id="s1"),
            document_ids=["d1"],
            top_k=5,
        )

        assert [r.document_id for r in results] == ["d1"]

    def test_scope_should_filter_by_subject_and_topic(self, faiss_store: FAISSVectorStore) -> None:
        faiss_store.insert_many([
            _record("a", 0, subject_id="s1", topic_id="t1"),
            _record("b", 0, subject_id="s1", topic_id="t2"),
            _record("c", 0, subject_id="s2", topic_id="t1"),
        ])

        subject = faiss_store.search(axis_vector(0), "u1", scope=VectorScope(subject_id="s1"))
        both = faiss_store.search(axis_vector(0), "u1", scope=VectorScope(subject_id="s1", topic_id="t1"))

        assert sorted(r.text for r in subject) == ["a", "b"]
        assert [r.text for r in both] == ["a"]

    def test_non_positive_top_k_should_return_nothing(self, faiss_store: FAISSVectorStore) -> None:
        faiss_store.insert_many([_record("a", 0)])

        assert faiss_store.search(axis_vector(0), "u1", top_k=0) == []

    def test_search_failure_should_return_empty_list(self, faiss_store: FAISSVectorStore) -> None:
        """A wrong-sized query vector is logged, not raised."""
        faiss_store.insert_many([_record("a", 0)])

        assert faiss_store.search([1.0, 0.0], "u1") == []


class TestFAISSWrites:
    """Test suite for inserts, deletes and reset."""

    def test_insert_with_wrong_dimension_should_raise(self, faiss_store: FAISSVectorStore) -> None:
        record = _record("a", 0).model_copy(update={"embedding": [1.0, 0.0]})

        with pytest.raises(VectorStoreError):
            faiss_store.insert_many([record])

    def test_insert_many_should_return_count(self, faiss_store: FAISSVectorStore) -> None:
        assert faiss_store.insert_many([]) == 0
        assert faiss_store.insert_many([_record("a", 0), _record("b", 1)]) == 2

    def test_delete_by_document_should_remove_only_that_document(self, faiss_store: FAISSVectorStore) -> None:
        faiss_store.insert_many([
            _record("a", 0, document_id="d1"),
            _record("b", 0, document_id="d1"),
            _record("c", 0, document_id="d2"),
        ])

        faiss_store.delete_by_document("d1")

        assert faiss_store.count_by_document("d1") == 0
        assert faiss_store.count_by_document("d2") == 1
        assert [r.text for r in faiss_store.search(axis_vector(0), "u1")] == ["c"]

    def test_delete_by_scope_should_match_subject_or_topic(self, faiss_store: FAISSVectorStore) -> None:
        faiss_store.insert_many([
            _record("subject match", 0, document_id="d1", subject_id="x"),
            _record("topic match", 0, document_id="d2", topic_id="x"),
            _record("other owner", 0, owner_id="u2", document_id="d3", subject_id="x"),
            _record("unrelated", 0, document_id="d4", subject_id="y"),
        ])

        faiss_store.delete_by_scope("x", owner_id="u1")

        assert [r.text for r in faiss_store.search(axis_vector(0), "u1", top_k=10)] == ["unrelated"]
        assert faiss_store.count_by_document("d3") == 1

    def test_delete_by_owner_should_remove_all_owner_vectors(self, faiss_store: FAISSVectorStore) -> None:
        faiss_store.insert_many([
            _record("a", 0, owner_id="u1", document_id="d1"),
            _record("b", 0, owner_id="u2", document_id="d2"),
        ])

        faiss_store.delete_by_owner("u1")

        assert faiss_store.search(axis_vector(0), "u1") == []
        assert len(faiss_store.search(axis_vector(0), "u2")) == 1

    def test_reset_index_should_keep_vectors_searchable(self, faiss_store: FAISSVectorStore) -> None:
        faiss_store.insert_many([_record("a", 0), _record("b", 1)])

        faiss_store.reset_index()

        results = faiss_store.search(axis_vector(1), "u1", top_k=1)
        assert [r.text for r in results] == ["b"]

    def test_ensure_collection_should_be_idempotent(self, faiss_store: FAISSVectorStore) -> None:
        faiss_store.insert_many([_record("a", 0)])

        faiss_store.ensure_collection()

        assert faiss_store.count_by_document("d1") == 1

    def test_ensure_collection_with_other_dimension_should_raise(self, faiss_store: FAISSVectorStore) -> None:
        with pytest.raises(VectorStoreError):
            faiss_store.ensure_collection(dimension=TEST_DIMENSION + 1)


class TestFAISSPersistence:
    def test_index_should_survive_reload(self, tmp_path, embeddings) -> None:
        """A persisted index is loaded by a new store, and sequence numbers continue."""
        # Arrange
        first = FAISSVectorStore(embeddings, dimension=TEST_DIMENSION, persist_directory=str(tmp_path))
        first.insert_many([_record("a", 0)])

        # Act
        second = FAISSVectorStore(embeddings, dimension=TEST_DIMENSION, persist_directory=str(tmp_path))
        second.insert_many([_record("b", 0)])
        results = second.search(axis_vector(0), "u1", top_k=5)

        # Assert
        assert [r.text for r in results] == ["a", "b"]
