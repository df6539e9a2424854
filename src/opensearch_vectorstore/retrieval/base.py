"""Abstract base class for vector-store backends.

The operation handlers only depend on :class:`VectorStoreBase`; the
OpenSearch backend is one implementation, the test-suite's in-memory fake
is another.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings

from opensearch_vectorstore.models import FieldNameMapping


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store client.

    Parameters
    ----------
    embeddings:
        Embedding provider used when documents are added without vectors
        and when searching by text.
    index_name:
        Logical name of the index / collection.
    fields:
        Names of the vector, content and metadata fields in the index.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        index_name: str,
        fields: FieldNameMapping | None = None,
    ) -> None:
        self.embeddings = embeddings
        self.index_name = index_name
        self.fields = fields or FieldNameMapping()

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def add_vectors(
        self,
        vectors: list[list[float]],
        documents: list[Document],
        *,
        ids: list[str] | None = None,
    ) -> list[str]:
        """Store *documents* with their pre-computed *vectors*.

        When *ids* are given, records with the same id are overwritten.
        Returns the ids of the written records.
        """
        ...

    @abstractmethod
    def similarity_search_vector_with_score(
        self,
        embedding: list[float],
        k: int,
        filter: dict[str, Any] | None = None,
    ) -> list[tuple[Document, float]]:
        """Return up to *k* ``(document, score)`` pairs, most similar first.

        Scores are whatever the backend reports; callers must not
        re-rank or normalise them.
        """
        ...

    @abstractmethod
    def list_indices(self) -> list[str]:
        """Return the names of the indices visible to the client."""
        ...

    # -- shared behaviour -----------------------------------------------------

    def add_documents(self, documents: list[Document], *, ids: list[str] | None = None) -> list[str]:
        """Embed *documents* with :attr:`embeddings` and store them."""
        if not documents:
            return []
        vectors = self.embeddings.embed_documents([doc.page_content for doc in documents])
        return self.add_vectors(vectors, documents, ids=ids)

    def similarity_search_by_text(
        self,
        query: str,
        k: int,
        filter: dict[str, Any] | None = None,
    ) -> list[tuple[Document, float]]:
        """Embed *query* and delegate to :meth:`similarity_search_vector_with_score`."""
        embedding = self.embeddings.embed_query(query)
        return self.similarity_search_vector_with_score(embedding, k, filter)
