"""Insert — add the documents of every input item to the vector store."""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager, nullcontext
from typing import Callable

from opensearch_vectorstore.context import CancellationToken
from opensearch_vectorstore.ingestion.documents import DocumentSource, process_document
from opensearch_vectorstore.models import OutputRecord, WorkItem
from opensearch_vectorstore.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


def handle_insert_operation(
    items: list[WorkItem],
    document_source: DocumentSource,
    get_store: Callable[[int], VectorStoreBase],
    cancellation: CancellationToken | None = None,
    item_errors: Callable[[int], AbstractContextManager[None]] = lambda _i: nullcontext(),
) -> list[OutputRecord]:
    """Process and store items in index order.

    Cancellation is checked before each item; once set, the records
    accumulated so far are returned.  Documents already written stay
    written.  A failing write propagates and stops the remaining items.

    Parameters
    ----------
    items:
        Input work items.
    document_source:
        Pre-built documents or an extractor.
    get_store:
        Returns the vector store for an item index.
    cancellation:
        Cooperative cancellation token.
    item_errors:
        Context manager factory wrapped around each item, used to attach
        the item index to errors raised while processing it.
    """
    records: list[OutputRecord] = []

    for item_index, item in enumerate(items):
        if cancellation is not None and cancellation.cancelled:
            logger.info("Insert cancelled before item %d of %d", item_index, len(items))
            break

        with item_errors(item_index):
            processed = process_document(document_source, item, item_index)
            records.extend(processed.echo)

            store = get_store(item_index)
            store.add_documents(processed.documents)
            logger.debug("Item %d: inserted %d document(s)", item_index, len(processed.documents))

    return records
