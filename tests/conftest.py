"""Shared pytest configuration and fixtures.

Everything here runs without OpenSearch or a real embedding model: the
node is wired to an in-memory backend through its injectable client
factory and vector-store class.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings

from opensearch_vectorstore.context import AI_DOCUMENT, AI_EMBEDDING, LocalExecutionContext
from opensearch_vectorstore.models import ConnectionConfig, FieldNameMapping, WorkItem
from opensearch_vectorstore.node import VectorStoreOpenSearchNode
from opensearch_vectorstore.retrieval.base import VectorStoreBase
from opensearch_vectorstore.retrieval.client import OpenSearchClientFactory


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes ───────────────────────────────────────────────────────────────


class FakeEmbeddings(Embeddings):
    """Deterministic embeddings that record every call."""

    def __init__(self) -> None:
        self.query_calls: list[str] = []
        self.document_calls: list[list[str]] = []

    @staticmethod
    def _vector(text: str) -> list[float]:
        return [float(len(text)), float(sum(map(ord, text)) % 97), 1.0]

    def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        return self._vector(text)

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls.append(list(texts))
        return [self._vector(t) for t in texts]


class FakeBackend:
    """Stand-in for the shared OpenSearch client; holds all store state."""

    def __init__(self, **options: Any) -> None:
        self.options = options
        self.hits: list[tuple[Document, float]] = []
        self.indices: list[str] = ["docs", "articles"]
        self.writes: list[dict[str, Any]] = []
        self.searches: list[dict[str, Any]] = []
        self.fail_on_write: int | None = None


class FakeVectorStore(VectorStoreBase):
    """In-memory store recording writes and searches on its backend."""

    def __init__(
        self,
        client: FakeBackend,
        embeddings: Embeddings,
        index_name: str,
        fields: FieldNameMapping | None = None,
    ) -> None:
        super().__init__(embeddings, index_name, fields)
        self.client = client

    def add_vectors(
        self,
        vectors: list[list[float]],
        documents: list[Document],
        *,
        ids: list[str] | None = None,
    ) -> list[str]:
        if self.client.fail_on_write == len(self.client.writes):
            raise RuntimeError("bulk request rejected")
        self.client.writes.append(
            {
                "index": self.index_name,
                "fields": self.fields,
                "vectors": vectors,
                "documents": list(documents),
                "ids": ids,
            }
        )
        return ids or [f"generated-{i}" for i in range(len(documents))]

    def similarity_search_vector_with_score(
        self,
        embedding: list[float],
        k: int,
        filter: dict[str, Any] | None = None,
    ) -> list[tuple[Document, float]]:
        self.client.searches.append(
            {"index": self.index_name, "embedding": embedding, "k": k, "filter": filter}
        )
        return self.client.hits[:k]

    def list_indices(self) -> list[str]:
        return list(self.client.indices)


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture()
def embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def store(backend: FakeBackend, embeddings: FakeEmbeddings) -> FakeVectorStore:
    return FakeVectorStore(backend, embeddings, "docs")


@pytest.fixture()
def factory(backend: FakeBackend) -> OpenSearchClientFactory:
    def build(**options: Any) -> FakeBackend:
        backend.options = options
        return backend

    return OpenSearchClientFactory(client_cls=build)


@pytest.fixture()
def node(factory: OpenSearchClientFactory) -> VectorStoreOpenSearchNode:
    return VectorStoreOpenSearchNode(factory, store_cls=FakeVectorStore)


@pytest.fixture()
def connection() -> ConnectionConfig:
    return ConnectionConfig(base_url="https://search.example.com:9200", username="admin", password="secret")


@pytest.fixture()
def make_context(
    embeddings: FakeEmbeddings, connection: ConnectionConfig
) -> Callable[..., LocalExecutionContext]:
    """Build a :class:`LocalExecutionContext` with sensible defaults."""

    def _make(
        mode: str,
        items: list[WorkItem] | None = None,
        *,
        documents: Any = None,
        item_parameters: dict[int, dict[str, Any]] | None = None,
        with_embeddings: bool = True,
        **parameters: Any,
    ) -> LocalExecutionContext:
        connections: dict[str, Any] = {}
        if with_embeddings:
            connections[AI_EMBEDDING] = embeddings
        if documents is not None:
            connections[AI_DOCUMENT] = documents
        return LocalExecutionContext(
            parameters={"mode": mode, "indexName": {"mode": "list", "value": "docs"}, **parameters},
            items=items if items is not None else [WorkItem(json={})],
            connections=connections,
            credentials=connection,
            item_parameters=item_parameters or {},
        )

    return _make
