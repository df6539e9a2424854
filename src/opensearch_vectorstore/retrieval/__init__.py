"""
Retrieval — the vector-store client and everything built on it.

Public surface
--------------
- :class:`VectorStoreBase` — abstract backend the operation handlers use.
- :class:`OpenSearchVectorStore` — OpenSearch k-NN backend.
- :class:`OpenSearchClientFactory` / :data:`client_factory` — process-wide client.
- :func:`build_retrieval_tool` — similarity search as a LangChain tool.
"""

from opensearch_vectorstore.retrieval.base import VectorStoreBase
from opensearch_vectorstore.retrieval.client import OpenSearchClientFactory, client_factory
from opensearch_vectorstore.retrieval.opensearch_store import OpenSearchVectorStore
from opensearch_vectorstore.retrieval.tool import build_retrieval_tool

__all__ = [
    "OpenSearchClientFactory",
    "OpenSearchVectorStore",
    "VectorStoreBase",
    "build_retrieval_tool",
    "client_factory",
]
