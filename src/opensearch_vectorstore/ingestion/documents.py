"""Document processor — uniform documents + echo records for one item.

The document connection delivers either a pre-built list of documents or
an extractor.  :func:`as_document_source` turns that raw value into one of
the two :data:`DocumentSource` variants once, so operation handlers never
test types at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from langchain_core.documents import Document

from opensearch_vectorstore.errors import ConfigurationError
from opensearch_vectorstore.ingestion.loader import ItemLoader
from opensearch_vectorstore.models import OutputRecord, WorkItem


@dataclass(frozen=True)
class PrebuiltDocuments:
    """Documents produced upstream, applied as-is to every item."""

    documents: list[Document]

    def documents_for(self, item: WorkItem, item_index: int) -> list[Document]:
        # The full list is reused for every item; it is not partitioned.
        return self.documents


@dataclass(frozen=True)
class ExtractableDocuments:
    """Documents extracted from each item by *loader*."""

    loader: ItemLoader

    def documents_for(self, item: WorkItem, item_index: int) -> list[Document]:
        return self.loader.process_item(item, item_index)


DocumentSource = Union[PrebuiltDocuments, ExtractableDocuments]


@dataclass
class ProcessedDocuments:
    documents: list[Document] = field(default_factory=list)
    echo: list[OutputRecord] = field(default_factory=list)


def as_document_source(raw: Any) -> DocumentSource:
    """Wrap whatever the document connection supplied in a :data:`DocumentSource`."""
    if isinstance(raw, (PrebuiltDocuments, ExtractableDocuments)):
        return raw
    if isinstance(raw, ItemLoader):
        return ExtractableDocuments(raw)
    if isinstance(raw, (list, tuple)) and all(isinstance(doc, Document) for doc in raw):
        return PrebuiltDocuments(list(raw))
    raise ConfigurationError(
        f"Document input must be a list of documents or an item loader, got {type(raw).__name__}"
    )


def process_document(source: DocumentSource, item: WorkItem, item_index: int) -> ProcessedDocuments:
    """Return the documents for *item* and one echo record per document."""
    documents = source.documents_for(item, item_index)
    echo = [
        OutputRecord(
            json={"metadata": doc.metadata, "page_content": doc.page_content},
            paired_item=item_index,
        )
        for doc in documents
    ]
    return ProcessedDocuments(documents=documents, echo=echo)
