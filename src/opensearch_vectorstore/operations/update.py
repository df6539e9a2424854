"""Update — overwrite one stored record per input item."""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager, nullcontext
from typing import Callable

from langchain_core.embeddings import Embeddings

from opensearch_vectorstore.errors import DocumentValidationError
from opensearch_vectorstore.ingestion.documents import ExtractableDocuments, process_document
from opensearch_vectorstore.ingestion.loader import ItemLoader
from opensearch_vectorstore.models import OutputRecord, UpdateOperation, WorkItem
from opensearch_vectorstore.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


def handle_update_operation(
    items: list[WorkItem],
    loader: ItemLoader,
    get_store: Callable[[int], VectorStoreBase],
    embeddings: Embeddings,
    get_operation: Callable[[int], UpdateOperation],
    item_errors: Callable[[int], AbstractContextManager[None]] = lambda _i: nullcontext(),
) -> list[OutputRecord]:
    """Replace the record at each item's configured id with the item's document.

    Every item must yield exactly one document; anything else raises
    :class:`DocumentValidationError` before the store is written.
    Each item runs inside ``item_errors(item_index)``.
    """
    source = ExtractableDocuments(loader)
    records: list[OutputRecord] = []

    for item_index, item in enumerate(items):
        with item_errors(item_index):
            operation = get_operation(item_index)
            store = get_store(item_index)

            processed = process_document(source, item, item_index)
            if len(processed.documents) != 1:
                raise DocumentValidationError(
                    "Single document per item expected",
                    operation="update",
                    item_index=item_index,
                )
            records.extend(processed.echo)

            texts = [doc.page_content for doc in processed.documents]
            store.add_vectors(
                embeddings.embed_documents(texts), processed.documents, ids=[operation.id]
            )
            logger.debug("Item %d: updated record %r", item_index, operation.id)

    return records
