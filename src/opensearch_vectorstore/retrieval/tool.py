"""LangChain tool exposing similarity search to an AI agent.

Used by the ``retrieve-as-tool`` data-supply mode: the node does not run
the search itself, it hands the agent a tool that does.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from langchain_core.tools import BaseTool, StructuredTool

from opensearch_vectorstore.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


def build_retrieval_tool(
    store: VectorStoreBase,
    *,
    name: str,
    description: str,
    top_k: int = 4,
    include_metadata: bool = True,
    metadata_filter: dict[str, Any] | None = None,
) -> BaseTool:
    """Return a tool that embeds a query and searches *store*.

    The tool output is a JSON array of ``{"page_content", "metadata"?}``
    objects, most similar first.
    """

    def search(query: str) -> str:
        hits = store.similarity_search_by_text(query, top_k, metadata_filter)
        logger.info("%s returned %d results for %r", name, len(hits), query)
        documents = []
        for doc, _score in hits:
            document: dict[str, Any] = {"page_content": doc.page_content}
            if include_metadata:
                document["metadata"] = doc.metadata
            documents.append(document)
        return json.dumps(documents, default=str)

    return StructuredTool.from_function(func=search, name=name, description=description)
