"""FastAPI application exposing the vector-store node as a REST API."""

from __future__ import annotations

import base64
import logging
from typing import Any, Literal

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from pydantic import BaseModel, ConfigDict, Field

from opensearch_vectorstore.config import settings
from opensearch_vectorstore.context import AI_DOCUMENT, AI_EMBEDDING, LocalExecutionContext
from opensearch_vectorstore.errors import ConfigurationError, DocumentValidationError, NodeOperationError
from opensearch_vectorstore.ingestion.chunker import build_text_splitter
from opensearch_vectorstore.ingestion.loader import BinaryItemLoader, JsonItemLoader
from opensearch_vectorstore.models import BinaryData, ConnectionConfig, WorkItem
from opensearch_vectorstore.node import VectorStoreOpenSearchNode

logger = logging.getLogger(__name__)

app = FastAPI(
    title="OpenSearch Vector Store Node",
    version="0.1.0",
    description="Run the OpenSearch vector-store node's load / insert / update operations over HTTP.",
)


# ── Request / Response schemas ────────────────────────────────────────
class BinaryPayload(BaseModel):
    """Base64-encoded attachment."""

    model_config = ConfigDict(populate_by_name=True)

    data: str
    mime_type: str = Field(default="application/octet-stream", alias="mimeType")
    file_name: str | None = Field(default=None, alias="fileName")


class ItemPayload(BaseModel):
    """One input item; ``json`` is the item payload."""

    model_config = ConfigDict(populate_by_name=True)

    payload: dict[str, Any] = Field(default_factory=dict, alias="json")
    binary: dict[str, BinaryPayload] | None = None

    def to_work_item(self) -> WorkItem:
        binary = None
        if self.binary:
            binary = {
                key: BinaryData(
                    data=base64.b64decode(value.data),
                    mime_type=value.mime_type,
                    file_name=value.file_name,
                )
                for key, value in self.binary.items()
            }
        return WorkItem(json=self.payload, binary=binary)


class DocumentPayload(BaseModel):
    page_content: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class LoaderOptions(BaseModel):
    """How documents are extracted from each item for ``insert``."""

    type: Literal["json", "binary"] = "json"
    mode: Literal["all_input_data", "expression_data"] = "all_input_data"
    pointers: list[str] = Field(default_factory=list)
    data_field: str = "data"
    binary_property: str = "data"
    metadata: dict[str, Any] = Field(default_factory=dict)
    chunk_size: int | None = None
    chunk_overlap: int = 200

    def build(self) -> JsonItemLoader | BinaryItemLoader:
        splitter = (
            build_text_splitter(self.chunk_size, self.chunk_overlap) if self.chunk_size else None
        )
        if self.type == "binary":
            return BinaryItemLoader(
                binary_property=self.binary_property, metadata=self.metadata, text_splitter=splitter
            )
        return JsonItemLoader(
            mode=self.mode,
            pointers=self.pointers,
            data_field=self.data_field,
            metadata=self.metadata,
            text_splitter=splitter,
        )


class ExecuteRequest(BaseModel):
    """Node parameters plus the input items (and, for insert, the document input)."""

    parameters: dict[str, Any]
    items: list[ItemPayload] = Field(default_factory=list)
    documents: list[DocumentPayload] | None = None
    loader: LoaderOptions | None = None


class OutputRecordResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payload: dict[str, Any] = Field(alias="json")
    paired_item: dict[str, int] = Field(alias="pairedItem")


# ── Dependencies ──────────────────────────────────────────────────────
_node = VectorStoreOpenSearchNode()


def get_node() -> VectorStoreOpenSearchNode:
    return _node


def get_embeddings() -> Embeddings:
    """Lazy-import to avoid loading the sentence-transformer stack at import time."""
    from opensearch_vectorstore.ingestion.embedder import get_embedding_function

    return get_embedding_function()


def get_connection() -> ConnectionConfig:
    return ConnectionConfig.from_settings(settings)


def _document_input(request: ExecuteRequest) -> Any:
    if request.documents is not None:
        return [Document(page_content=d.page_content, metadata=d.metadata) for d in request.documents]
    if request.loader is not None:
        return request.loader.build()
    return None


# ── Error mapping ─────────────────────────────────────────────────────
@app.exception_handler(NodeOperationError)
async def node_operation_error_handler(request: Request, exc: NodeOperationError) -> JSONResponse:
    status = 400 if isinstance(exc, (ConfigurationError, DocumentValidationError)) else 502
    logger.warning("Node operation failed: %s", exc)
    return JSONResponse(
        status_code=status,
        content={
            "error": exc.message,
            "operation": exc.operation,
            "item_index": exc.item_index,
        },
    )


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.get("/indices")
def indices(
    node: VectorStoreOpenSearchNode = Depends(get_node),
    connection: ConnectionConfig = Depends(get_connection),
) -> list[dict[str, str]]:
    """List the OpenSearch indices visible to the configured credentials."""
    return node.search_indices(LocalExecutionContext(credentials=connection))


@app.post("/execute", response_model=list[OutputRecordResponse])
def execute(
    request: ExecuteRequest,
    node: VectorStoreOpenSearchNode = Depends(get_node),
    embeddings: Embeddings = Depends(get_embeddings),
    connection: ConnectionConfig = Depends(get_connection),
) -> list[dict[str, Any]]:
    """Run the node's direct-execution path and return its output records."""
    parameters = {"indexName": settings.opensearch_index, **request.parameters}
    context = LocalExecutionContext(
        parameters=parameters,
        items=[item.to_work_item() for item in request.items],
        connections={AI_EMBEDDING: embeddings, AI_DOCUMENT: _document_input(request)},
        credentials=connection,
    )
    return [record.to_dict() for record in node.execute(context)]
