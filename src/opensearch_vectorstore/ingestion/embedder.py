"""Default embedding provider for the HTTP host.

Inside a workflow the embedding provider arrives over the ``ai_embedding``
connection; the standalone HTTP host has no upstream node, so it uses the
sentence-transformer model named in the settings.
"""

from __future__ import annotations

from functools import lru_cache

from langchain_huggingface import HuggingFaceEmbeddings

from opensearch_vectorstore.config import settings


@lru_cache(maxsize=1)
def get_embedding_function() -> HuggingFaceEmbeddings:
    """Return the configured sentence-transformer embedding function (loaded once)."""
    return HuggingFaceEmbeddings(model_name=settings.embedding_model)
