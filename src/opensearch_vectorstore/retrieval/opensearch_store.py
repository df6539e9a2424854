"""OpenSearch implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from opensearchpy import OpenSearch

from opensearch_vectorstore.errors import VectorStoreError
from opensearch_vectorstore.models import FieldNameMapping
from opensearch_vectorstore.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)

_RANGE_OPERATORS = {"gt", "gte", "lt", "lte"}


def list_indices(client: OpenSearch) -> list[str]:
    """Names of the indices visible to *client*."""
    response = client.cat.indices(format="json")
    return [entry["index"] for entry in response]


def _build_opensearch_filter(filter: dict[str, Any] | None, metadata_field: str) -> list[dict[str, Any]]:
    """Convert a metadata filter mapping to OpenSearch ``bool.filter`` clauses.

    * scalar value → ``term``
    * list value → ``terms`` (any of)
    * dict of ``gt``/``gte``/``lt``/``lte`` → ``range``
    """
    if not filter:
        return []

    clauses: list[dict[str, Any]] = []
    for key, value in filter.items():
        path = f"{metadata_field}.{key}"
        if isinstance(value, (list, tuple)):
            clauses.append({"terms": {path: list(value)}})
        elif isinstance(value, dict):
            unsupported = set(value) - _RANGE_OPERATORS
            if unsupported:
                raise ValueError(f"Unsupported range operator(s) for {key!r}: {sorted(unsupported)}")
            clauses.append({"range": {path: value}})
        else:
            clauses.append({"term": {path: value}})
    return clauses


class OpenSearchVectorStore(VectorStoreBase):
    """OpenSearch-backed vector store using the k-NN plugin.

    Parameters
    ----------
    client:
        A shared :class:`opensearchpy.OpenSearch` client (see
        :mod:`~opensearch_vectorstore.retrieval.client`).
    embeddings:
        Embedding provider.
    index_name:
        Target index; created on first write when missing.
    fields:
        Vector / content / metadata field names in the index.
    engine, space_type, ef_construction, ef_search, m:
        HNSW settings used when the index has to be created.
    """

    def __init__(
        self,
        client: OpenSearch,
        embeddings: Embeddings,
        index_name: str,
        fields: FieldNameMapping | None = None,
        *,
        engine: str = "nmslib",
        space_type: str = "l2",
        ef_construction: int = 512,
        ef_search: int = 512,
        m: int = 16,
    ) -> None:
        super().__init__(embeddings, index_name, fields)
        self._client = client
        self.engine = engine
        self.space_type = space_type
        self.ef_construction = ef_construction
        self.ef_search = ef_search
        self.m = m

    @property
    def client(self) -> OpenSearch:
        return self._client

    # -- index management -----------------------------------------------------

    def _index_body(self, dimension: int) -> dict[str, Any]:
        return {
            "settings": {
                "index": {
                    "knn": True,
                    "knn.algo_param.ef_search": self.ef_search,
                }
            },
            "mappings": {
                "dynamic_templates": [
                    {"strings": {"match_mapping_type": "string", "mapping": {"type": "keyword"}}}
                ],
                "properties": {
                    self.fields.text_field: {"type": "text"},
                    self.fields.metadata_field: {"type": "object"},
                    self.fields.vector_field: {
                        "type": "knn_vector",
                        "dimension": dimension,
                        "method": {
                            "name": "hnsw",
                            "engine": self.engine,
                            "space_type": self.space_type,
                            "parameters": {"ef_construction": self.ef_construction, "m": self.m},
                        },
                    },
                },
            },
        }

    def ensure_index(self, dimension: int) -> None:
        """Create the index with a ``knn_vector`` mapping if it does not exist."""
        if self._client.indices.exists(index=self.index_name):
            return
        logger.info("Creating index %r (dimension=%d)", self.index_name, dimension)
        self._client.indices.create(index=self.index_name, body=self._index_body(dimension))

    # -- VectorStoreBase overrides --------------------------------------------

    def add_vectors(
        self,
        vectors: list[list[float]],
        documents: list[Document],
        *,
        ids: list[str] | None = None,
    ) -> list[str]:
        if len(vectors) != len(documents):
            raise ValueError(f"Got {len(vectors)} vectors for {len(documents)} documents")
        if not documents:
            return []
        if ids is not None and len(ids) != len(documents):
            raise ValueError(f"Got {len(ids)} ids for {len(documents)} documents")

        ids = list(ids) if ids is not None else [uuid4().hex for _ in documents]
        self.ensure_index(len(vectors[0]))

        operations: list[dict[str, Any]] = []
        for doc_id, vector, doc in zip(ids, vectors, documents):
            operations.append({"index": {"_index": self.index_name, "_id": doc_id}})
            operations.append(
                {
                    self.fields.vector_field: vector,
                    self.fields.text_field: doc.page_content,
                    self.fields.metadata_field: doc.metadata,
                }
            )

        response = self._client.bulk(body=operations)
        if response.get("errors"):
            failed = [
                item["index"]["error"]
                for item in response.get("items", [])
                if "error" in item.get("index", {})
            ]
            raise VectorStoreError(
                f"Bulk write to {self.index_name!r} failed for {len(failed)} document(s)", failed
            )

        self._client.indices.refresh(index=self.index_name)
        logger.debug("Indexed %d document(s) into %r", len(ids), self.index_name)
        return ids

    def similarity_search_vector_with_score(
        self,
        embedding: list[float],
        k: int,
        filter: dict[str, Any] | None = None,
    ) -> list[tuple[Document, float]]:
        body = {
            "size": k,
            "query": {
                "bool": {
                    "filter": _build_opensearch_filter(filter, self.fields.metadata_field),
                    "must": [{"knn": {self.fields.vector_field: {"vector": embedding, "k": k}}}],
                }
            },
        }
        response = self._client.search(index=self.index_name, body=body)

        results: list[tuple[Document, float]] = []
        for hit in response.get("hits", {}).get("hits", []):
            source = hit.get("_source", {})
            doc = Document(
                page_content=source.get(self.fields.text_field) or "",
                metadata=source.get(self.fields.metadata_field) or {},
            )
            results.append((doc, hit.get("_score")))
        return results

    def list_indices(self) -> list[str]:
        return list_indices(self._client)
