# tests/test_store.py
from unittest.mock import Mock

import pytest
from qdrant_client import QdrantClient

from docchat.errors import EmptyQueryError, StoreError
from docchat.memory.qdrant_client import QdrantVectorDB
from docchat.memory.store import ChunkStore, point_id


def _meta(file_name, index, total):
    return {"fileName": file_name, "chunkIndex": index, "totalChunks": total}


class TestAdd:

    def test_add_then_count(self, store):
        store.add(
            ids=["a_txt_chunk_0", "a_txt_chunk_1"],
            texts=["first chunk", "second chunk"],
            metadatas=[_meta("a.txt", 0, 2), _meta("a.txt", 1, 2)],
        )

        assert store.count() == 2

    def test_same_id_is_overwritten(self, store):
        store.add(["a_txt_chunk_0"], ["old text"], [_meta("a.txt", 0, 1)])
        store.add(["a_txt_chunk_0"], ["new text"], [_meta("a.txt", 0, 1)])

        assert store.count() == 1
        assert store.query("text", k=5)[0].text == "new text"

    def test_empty_add_is_rejected(self, store):
        with pytest.raises(StoreError, match="No documents to add"):
            store.add([], [], [])

    def test_length_mismatch_is_rejected(self, store):
        with pytest.raises(StoreError, match="length mismatch"):
            store.add(["only_one"], ["a", "b"], [_meta("x", 0, 2), _meta("x", 1, 2)])

    def test_backend_failure_is_wrapped(self, store, monkeypatch):
        def broken(texts):
            raise RuntimeError("rate limited")

        monkeypatch.setattr(store._embedder, "embed", broken)

        with pytest.raises(StoreError) as exc_info:
            store.add(["x_chunk_0"], ["text"], [_meta("x", 0, 1)])

        assert "Failed to add documents to collection" in str(exc_info.value)
        assert "rate limited" in str(exc_info.value)
        assert store.count() == 0


class TestQuery:

    def test_query_on_empty_collection_returns_nothing(self, store):
        assert store.query("anything at all") == []

    def test_query_returns_metadata(self, store):
        store.add(["notes_md_chunk_0"], ["banana smoothie recipe"], [_meta("notes.md", 0, 1)])

        result = store.query("banana smoothie")[0]

        assert result.text == "banana smoothie recipe"
        assert result.chunk_id == "notes_md_chunk_0"
        assert result.file_name == "notes.md"
        assert result.chunk_index == 0
        assert result.total_chunks == 1
        assert isinstance(result.similarity_score, float)

    def test_most_similar_chunk_ranks_first(self, store):
        store.add(
            ids=["doc_chunk_0", "doc_chunk_1", "doc_chunk_2"],
            texts=[
                "quarterly tax filing deadline",
                "banana smoothie recipe with oat milk",
                "kubernetes pod eviction policy",
            ],
            metadatas=[_meta("doc", i, 3) for i in range(3)],
        )

        results = store.query("how do I make a banana smoothie", k=3)

        assert results[0].chunk_id == "doc_chunk_1"

    def test_k_limits_results(self, store):
        store.add(
            ids=[f"doc_chunk_{i}" for i in range(6)],
            texts=[f"chunk number {i}" for i in range(6)],
            metadatas=[_meta("doc", i, 6) for i in range(6)],
        )

        assert len(store.query("chunk", k=5)) == 5

    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    def test_blank_query_is_rejected(self, store, query):
        with pytest.raises(EmptyQueryError, match="Query cannot be empty"):
            store.query(query)

    def test_backend_failure_is_wrapped(self, store, monkeypatch):
        def broken(**kwargs):
            raise ConnectionError("qdrant unreachable")

        monkeypatch.setattr(store._db.client, "query_points", broken)

        with pytest.raises(StoreError) as exc_info:
            store.query("question")

        assert "Failed to query collection: qdrant unreachable" == str(exc_info.value)


class TestHandle:

    def test_point_id_is_deterministic_uuid(self):
        assert point_id("a_chunk_0") == point_id("a_chunk_0")
        assert point_id("a_chunk_0") != point_id("a_chunk_1")

    def test_dimension_mismatch_is_rejected(self, embedder):
        db = QdrantVectorDB(
            dim=embedder.get_dimension() + 1,
            collection="other",
            client=QdrantClient(":memory:"),
        )

        with pytest.raises(ValueError):
            ChunkStore(db, embedder)

    def test_existing_collection_is_reused(self, embedder):
        client = QdrantClient(":memory:")

        first = ChunkStore(QdrantVectorDB(embedder.get_dimension(), "shared", client), embedder)
        first.add(["x_chunk_0"], ["persisted"], [_meta("x", 0, 1)])

        second = ChunkStore(QdrantVectorDB(embedder.get_dimension(), "shared", client), embedder)

        assert second.count() == 1
        assert second.collection == "shared"

    def test_bootstrap_creates_only_the_collection(self):
        client = Mock()
        client.collection_exists.return_value = False

        QdrantVectorDB(dim=8, collection="fresh", client=client)

        client.create_collection.assert_called_once()
        assert client.create_collection.call_args.kwargs["collection_name"] == "fresh"
        client.create_payload_index.assert_not_called()

    def test_connection_errors_propagate(self):
        client = Mock()
        client.collection_exists.side_effect = ConnectionError("qdrant unreachable")

        with pytest.raises(ConnectionError):
            QdrantVectorDB(dim=8, collection="fresh", client=client)
