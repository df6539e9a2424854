"""
Ingestion — turning work items into LangChain documents.

Extractors (:class:`JsonItemLoader`, :class:`BinaryItemLoader`) pull
documents out of a single item; :func:`process_document` normalises both
extractor output and pre-built document lists into documents plus the
echo records emitted for traceability.
"""

from opensearch_vectorstore.ingestion.documents import (
    DocumentSource,
    ExtractableDocuments,
    PrebuiltDocuments,
    ProcessedDocuments,
    as_document_source,
    process_document,
)
from opensearch_vectorstore.ingestion.loader import BinaryItemLoader, ItemLoader, JsonItemLoader

__all__ = [
    "BinaryItemLoader",
    "DocumentSource",
    "ExtractableDocuments",
    "ItemLoader",
    "JsonItemLoader",
    "PrebuiltDocuments",
    "ProcessedDocuments",
    "as_document_source",
    "process_document",
]
