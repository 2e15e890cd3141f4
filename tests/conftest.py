# tests/conftest.py
import hashlib
import re

import numpy as np
import pytest
from fastapi.testclient import TestClient
from qdrant_client import QdrantClient
import sys
import os

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from docchat.api import routes
from docchat.main import app
from docchat.memory.embedder import normalize
from docchat.memory.qdrant_client import QdrantVectorDB
from docchat.memory.store import ChunkStore
from docchat.observability.metrics import metrics_tracker


TEST_DIMENSION = 256


class FakeEmbedder:
    """
    Deterministic bag-of-words embedder.

    Each lower-cased word is hashed into one of TEST_DIMENSION buckets;
    the last bucket is always set so no vector is ever zero.
    """

    def __init__(self, dimension: int = TEST_DIMENSION):
        self._dimension = dimension
        self.calls = []

    def embed(self, texts):
        self.calls.append(list(texts))
        vectors = np.zeros((len(texts), self._dimension), dtype="float32")
        for row, text in enumerate(texts):
            for word in re.findall(r"\w+", text.lower()):
                digest = hashlib.md5(word.encode("utf-8")).hexdigest()
                vectors[row, int(digest, 16) % (self._dimension - 1)] += 1.0
            vectors[row, -1] = 0.5
        return normalize(vectors)

    def get_dimension(self):
        return self._dimension


class RecordingGenerator:
    """Answer generator that records its calls instead of hitting an API."""

    provider = "fake"

    def __init__(self, reply: str = "This is a mocked answer."):
        self.reply = reply
        self.calls = []

    def answer(self, question, context):
        self.calls.append({"question": question, "context": context})
        return self.reply


class FailingGenerator:

    provider = "failing"

    def __init__(self, error: Exception):
        self.error = error

    def answer(self, question, context):
        raise self.error


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def store(embedder):
    """Chunk store over an in-memory Qdrant collection."""
    db = QdrantVectorDB(
        dim=embedder.get_dimension(),
        collection="test_collection",
        client=QdrantClient(":memory:"),
    )
    return ChunkStore(db, embedder)


@pytest.fixture
def generator():
    return RecordingGenerator()


@pytest.fixture
def client(store, generator):
    """
    FastAPI test client wired to the in-memory store and fake generator.

    Startup events do not run (no context manager), so no real API
    clients are built.
    """
    app.dependency_overrides[routes.get_chunk_store] = lambda: store
    app.dependency_overrides[routes.get_answer_generator] = lambda: generator

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def in_memory_metrics(monkeypatch):
    """Keep request metrics off disk and reset between tests."""
    monkeypatch.setattr(metrics_tracker, "_path", None)
    metrics_tracker.reset()
    yield
    metrics_tracker.reset()


@pytest.fixture
def text_2500():
    """2500 characters of non-whitespace text, distinct at every 52nd offset."""
    letters = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
    return "".join(letters[i % len(letters)] for i in range(2500))


@pytest.fixture
def upload_text(client):
    """
    Upload a plain-text document and return the parsed response.
    """
    def _upload(file_name: str, content: str):
        response = client.post(
            "/upload",
            files={"file": (file_name, content.encode("utf-8"), "text/plain")}
        )
        assert response.status_code == 200, f"Upload failed: {response.json()}"
        return response.json()

    return _upload
