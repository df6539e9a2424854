"""Load ("get many") — ranked documents for a prompt."""

from __future__ import annotations

from typing import Any

from langchain_core.embeddings import Embeddings

from opensearch_vectorstore.models import LoadOperation, OutputRecord
from opensearch_vectorstore.retrieval.base import VectorStoreBase


def handle_load_operation(
    store: VectorStoreBase,
    embeddings: Embeddings,
    operation: LoadOperation,
    metadata_filter: dict[str, Any] | None,
    item_index: int,
) -> list[OutputRecord]:
    """Embed the prompt once, search, and return one record per hit.

    Hits keep the order and scores the store reports.
    """
    embedded_prompt = embeddings.embed_query(operation.prompt)
    hits = store.similarity_search_vector_with_score(embedded_prompt, operation.top_k, metadata_filter)

    records: list[OutputRecord] = []
    for doc, score in hits:
        document: dict[str, Any] = {"page_content": doc.page_content}
        if operation.include_document_metadata:
            document["metadata"] = doc.metadata
        records.append(OutputRecord(json={"document": document, "score": score}, paired_item=item_index))
    return records
