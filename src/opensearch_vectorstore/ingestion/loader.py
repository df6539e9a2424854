"""Item extractors — produce LangChain documents from one work item.

Both extractors expose ``process_item(item, item_index)``, the capability
the document processor relies on.  Binary payloads are handed to the
LangChain community loaders for their MIME type.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import TYPE_CHECKING, Any, Literal, Protocol, runtime_checkable

from langchain_community.document_loaders import CSVLoader, PyPDFLoader, TextLoader
from langchain_core.documents import Document

from opensearch_vectorstore.errors import DocumentValidationError
from opensearch_vectorstore.ingestion.chunker import split_documents
from opensearch_vectorstore.models import WorkItem

if TYPE_CHECKING:
    from langchain_text_splitters import TextSplitter

logger = logging.getLogger(__name__)


@runtime_checkable
class ItemLoader(Protocol):
    """Anything that can extract documents from a single work item."""

    def process_item(self, item: WorkItem, item_index: int) -> list[Document]: ...


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def _resolve_pointer(data: Any, pointer: str) -> Any:
    """Resolve an RFC 6901 JSON pointer; missing paths resolve to ``None``."""
    if pointer in ("", "/"):
        return data
    current = data
    for token in pointer.lstrip("/").split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict) and token in current:
            current = current[token]
        elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
            current = current[int(token)]
        else:
            return None
    return current


def _string_leaves(data: Any) -> list[str]:
    """Collect every string value under *data*, depth-first, in document order."""
    if isinstance(data, str):
        return [data]
    if isinstance(data, dict):
        return [leaf for value in data.values() for leaf in _string_leaves(value)]
    if isinstance(data, list):
        return [leaf for value in data for leaf in _string_leaves(value)]
    return []


class JsonItemLoader:
    """Extract documents from an item's JSON payload.

    Parameters
    ----------
    mode:
        ``"all_input_data"`` — every string value of the payload (or of the
        sub-trees selected by *pointers*) becomes one document.
        ``"expression_data"`` — the value of ``item.json[data_field]`` becomes
        a single document.
    pointers:
        JSON pointers (``/body/text``) restricting ``all_input_data``.
    data_field:
        Key read in ``expression_data`` mode.
    metadata:
        Static metadata merged into every produced document.
    text_splitter:
        Optional splitter applied to the extracted documents.
    """

    def __init__(
        self,
        *,
        mode: Literal["all_input_data", "expression_data"] = "all_input_data",
        pointers: list[str] | tuple[str, ...] = (),
        data_field: str = "data",
        metadata: dict[str, Any] | None = None,
        text_splitter: TextSplitter | None = None,
    ) -> None:
        self.mode = mode
        self.pointers = tuple(pointers)
        self.data_field = data_field
        self.metadata = dict(metadata or {})
        self.text_splitter = text_splitter

    def process_item(self, item: WorkItem, item_index: int) -> list[Document]:
        if self.mode == "expression_data":
            value = item.json.get(self.data_field)
            if value is None:
                return []
            text = value if isinstance(value, str) else json.dumps(value)
            documents = [Document(page_content=text, metadata=dict(self.metadata))]
        else:
            roots = [_resolve_pointer(item.json, p) for p in self.pointers] or [item.json]
            texts = [leaf for root in roots for leaf in _string_leaves(root)]
            documents = [
                Document(
                    page_content=text,
                    metadata={
                        "source": "blob",
                        "blob_type": "application/json",
                        "line": line,
                        **self.metadata,
                    },
                )
                for line, text in enumerate(texts, 1)
            ]

        logger.debug("Extracted %d JSON document(s) from item %d", len(documents), item_index)
        return split_documents(documents, self.text_splitter)


# ---------------------------------------------------------------------------
# Binary
# ---------------------------------------------------------------------------

_SUFFIXES = {
    "application/pdf": ".pdf",
    "text/csv": ".csv",
    "application/json": ".json",
}


def _loader_for(mime_type: str, path: str) -> Any:
    if mime_type == "application/pdf":
        return PyPDFLoader(path)
    if mime_type == "text/csv":
        return CSVLoader(file_path=path, encoding="utf-8")
    if mime_type == "application/json" or mime_type.startswith("text/"):
        return TextLoader(path, encoding="utf-8")
    return None


class BinaryItemLoader:
    """Extract documents from a binary attachment of an item.

    Parameters
    ----------
    binary_property:
        Key of the attachment in ``item.binary``.
    metadata:
        Static metadata merged into every produced document.
    text_splitter:
        Optional splitter applied to the loaded documents.
    """

    def __init__(
        self,
        *,
        binary_property: str = "data",
        metadata: dict[str, Any] | None = None,
        text_splitter: TextSplitter | None = None,
    ) -> None:
        self.binary_property = binary_property
        self.metadata = dict(metadata or {})
        self.text_splitter = text_splitter

    def process_item(self, item: WorkItem, item_index: int) -> list[Document]:
        binary = (item.binary or {}).get(self.binary_property)
        if binary is None:
            raise DocumentValidationError(
                f"Binary property {self.binary_property!r} not found on item",
                item_index=item_index,
            )

        mime_type = binary.mime_type.split(";")[0].strip().lower()
        suffix = _SUFFIXES.get(mime_type, ".txt")
        fh = tempfile.NamedTemporaryFile(suffix=suffix, delete=False)
        path = fh.name
        try:
            with fh:
                fh.write(binary.data)
            loader = _loader_for(mime_type, path)
            if loader is None:
                raise DocumentValidationError(
                    f"Unsupported MIME type {binary.mime_type!r}",
                    item_index=item_index,
                )
            documents = loader.load()
        finally:
            os.unlink(path)

        for doc in documents:
            doc.metadata.update(
                {
                    "source": binary.file_name or "blob",
                    "blob_type": mime_type,
                    **self.metadata,
                }
            )
        logger.debug(
            "Loaded %d document(s) from %s attachment of item %d",
            len(documents),
            mime_type,
            item_index,
        )
        return split_documents(documents, self.text_splitter)
