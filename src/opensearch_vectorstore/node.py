"""The OpenSearch vector-store node — mode dispatch for both entry points.

* :meth:`VectorStoreOpenSearchNode.execute` — direct execution; runs the
  ``load``, ``insert`` and ``update`` handlers over the input items.
* :meth:`VectorStoreOpenSearchNode.supply_data` — data supply; hands a
  vector store (``retrieve``) or a search tool (``retrieve-as-tool``) to a
  downstream AI node.

Usage::

    node = VectorStoreOpenSearchNode()
    records = node.execute(context)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, cast

from langchain_core.embeddings import Embeddings

from opensearch_vectorstore.context import AI_DOCUMENT, AI_EMBEDDING, ExecutionContext
from opensearch_vectorstore.errors import ConfigurationError, NodeOperationError
from opensearch_vectorstore.filters import build_metadata_filter
from opensearch_vectorstore.ingestion.documents import as_document_source
from opensearch_vectorstore.ingestion.loader import JsonItemLoader
from opensearch_vectorstore.models import (
    EXECUTE_MODES,
    SUPPLY_DATA_MODES,
    FieldNameMapping,
    LoadOperation,
    OperationMode,
    OutputRecord,
    RetrieveAsToolOperation,
    UpdateOperation,
)
from opensearch_vectorstore.operations import (
    handle_insert_operation,
    handle_load_operation,
    handle_update_operation,
)
from opensearch_vectorstore.parameters import (
    read_field_names,
    read_index_name,
    read_mode,
    read_operation,
)
from opensearch_vectorstore.retrieval.base import VectorStoreBase
from opensearch_vectorstore.retrieval.client import OpenSearchClientFactory, client_factory
from opensearch_vectorstore.retrieval.opensearch_store import OpenSearchVectorStore, list_indices
from opensearch_vectorstore.retrieval.tool import build_retrieval_tool

logger = logging.getLogger(__name__)


@dataclass
class SupplyData:
    """What the data-supply entry point hands to the downstream node."""

    response: Any


def _supported(modes: tuple[OperationMode, ...]) -> str:
    names = [f'"{mode.value}"' for mode in modes]
    return ", ".join(names[:-1]) + f" and {names[-1]}"


class VectorStoreOpenSearchNode:
    """Workflow node reading and writing an OpenSearch vector index.

    Parameters
    ----------
    factory:
        Client factory; defaults to the process-wide :data:`client_factory`.
    store_cls:
        Vector-store implementation built around the shared client.
    """

    def __init__(
        self,
        factory: OpenSearchClientFactory | None = None,
        store_cls: Callable[..., VectorStoreBase] = OpenSearchVectorStore,
    ) -> None:
        self._factory = factory or client_factory
        self._store_cls = store_cls

    # -- shared helpers -------------------------------------------------------

    def get_vector_store(
        self,
        context: ExecutionContext,
        embeddings: Embeddings,
        item_index: int,
        fields: FieldNameMapping | None = None,
    ) -> VectorStoreBase:
        """Build the vector store for *item_index* around the shared client."""
        client = self._factory.get_client(context.get_credentials())
        return self._store_cls(
            client,
            embeddings,
            read_index_name(context, item_index),
            fields or read_field_names(context),
        )

    def _store_provider(
        self, context: ExecutionContext, embeddings: Embeddings
    ) -> Callable[[int], VectorStoreBase]:
        fields = read_field_names(context)
        return lambda item_index: self.get_vector_store(context, embeddings, item_index, fields)

    @staticmethod
    def _get_embeddings(context: ExecutionContext) -> Embeddings:
        embeddings = context.get_input_connection_data(AI_EMBEDDING, 0)
        if embeddings is None:
            raise ConfigurationError(
                "No embedding model connected to the node", node_name=context.node_name
            )
        return embeddings

    @contextmanager
    def _operation_errors(
        self, context: ExecutionContext, mode: str, item_index: int | None = None
    ) -> Iterator[None]:
        """Attach node / operation context to anything escaping the block."""
        try:
            yield
        except NodeOperationError as exc:
            exc.node_name = exc.node_name or context.node_name
            exc.operation = exc.operation or mode
            if exc.item_index is None:
                exc.item_index = item_index
            raise
        except Exception as exc:
            raise NodeOperationError(
                str(exc) or type(exc).__name__,
                node_name=context.node_name,
                operation=mode,
                item_index=item_index,
            ) from exc

    # -- direct execution -----------------------------------------------------

    def execute(self, context: ExecutionContext) -> list[OutputRecord]:
        """Run the configured ``load`` / ``insert`` / ``update`` operation."""
        mode = read_mode(context)
        embeddings = self._get_embeddings(context)

        if mode == OperationMode.LOAD.value:
            records = self._execute_load(context, embeddings)
        elif mode == OperationMode.INSERT.value:
            records = self._execute_insert(context, embeddings)
        elif mode == OperationMode.UPDATE.value:
            records = self._execute_update(context, embeddings)
        else:
            raise ConfigurationError(
                f"Only the {_supported(EXECUTE_MODES)} operation modes are supported with execute",
                node_name=context.node_name,
                operation=mode,
            )

        logger.info("%s: %s produced %d record(s)", context.node_name, mode, len(records))
        return records

    def _execute_load(self, context: ExecutionContext, embeddings: Embeddings) -> list[OutputRecord]:
        get_store = self._store_provider(context, embeddings)
        records: list[OutputRecord] = []
        for item_index, _item in enumerate(context.get_input_data()):
            with self._operation_errors(context, "load", item_index):
                operation = cast(LoadOperation, read_operation(context, item_index))
                metadata_filter = build_metadata_filter(context, item_index)
                records.extend(
                    handle_load_operation(
                        get_store(item_index), embeddings, operation, metadata_filter, item_index
                    )
                )
        return records

    def _execute_insert(self, context: ExecutionContext, embeddings: Embeddings) -> list[OutputRecord]:
        with self._operation_errors(context, "insert"):
            raw = context.get_input_connection_data(AI_DOCUMENT, 0)
            if raw is None:
                raise ConfigurationError("No document input connected to the node")
            return handle_insert_operation(
                context.get_input_data(),
                as_document_source(raw),
                self._store_provider(context, embeddings),
                context.cancellation,
                item_errors=lambda item_index: self._operation_errors(context, "insert", item_index),
            )

    def _execute_update(self, context: ExecutionContext, embeddings: Embeddings) -> list[OutputRecord]:
        def get_operation(item_index: int) -> UpdateOperation:
            return cast(UpdateOperation, read_operation(context, item_index))

        with self._operation_errors(context, "update"):
            return handle_update_operation(
                context.get_input_data(),
                self._update_loader(context),
                self._store_provider(context, embeddings),
                embeddings,
                get_operation,
                item_errors=lambda item_index: self._operation_errors(context, "update", item_index),
            )

    @staticmethod
    def _update_loader(context: ExecutionContext) -> JsonItemLoader:
        """JSON extractor for update; update never takes a pre-built document list."""
        pointers = context.get_node_parameter("options.pointers", 0, "") or ""
        if isinstance(pointers, str):
            pointers = [p.strip() for p in pointers.split(",") if p.strip()]
        return JsonItemLoader(
            mode=context.get_node_parameter("options.jsonMode", 0, "all_input_data"),
            pointers=pointers,
            data_field=context.get_node_parameter("options.dataField", 0, "data"),
        )

    # -- data supply ----------------------------------------------------------

    def supply_data(self, context: ExecutionContext, item_index: int) -> SupplyData:
        """Expose the vector store (``retrieve``) or a search tool (``retrieve-as-tool``)."""
        mode = read_mode(context)
        embeddings = self._get_embeddings(context)

        if mode not in {m.value for m in SUPPLY_DATA_MODES}:
            raise ConfigurationError(
                f"Only the {_supported(SUPPLY_DATA_MODES)} operation modes are supported to supply data",
                node_name=context.node_name,
                operation=mode,
            )

        with self._operation_errors(context, mode, item_index):
            store = self.get_vector_store(context, embeddings, item_index)
            if mode == OperationMode.RETRIEVE.value:
                return SupplyData(response=store)

            operation = cast(RetrieveAsToolOperation, read_operation(context, item_index))
            tool = build_retrieval_tool(
                store,
                name=operation.tool_name,
                description=operation.tool_description,
                top_k=operation.top_k,
                include_metadata=operation.include_document_metadata,
                metadata_filter=build_metadata_filter(context, item_index),
            )
            return SupplyData(response=tool)

    # -- index listing --------------------------------------------------------

    def search_indices(self, context: ExecutionContext) -> list[dict[str, str]]:
        """List the indices visible to the configured credentials."""
        client = self._factory.get_client(context.get_credentials())
        try:
            indices = list_indices(client)
        except Exception as exc:
            raise NodeOperationError(f"Error: {exc}", node_name=context.node_name) from exc
        return [{"name": index, "value": index} for index in indices]
