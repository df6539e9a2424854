"""
OpenSearch vector-store node — read and write a vector index from a workflow step.

Public API
----------
- :class:`VectorStoreOpenSearchNode` — mode dispatcher (``execute`` / ``supply_data``).
- :class:`LocalExecutionContext` — in-process host context.
- :class:`WorkItem`, :class:`OutputRecord` — item shapes flowing in and out.
"""

from opensearch_vectorstore.context import CancellationToken, ExecutionContext, LocalExecutionContext
from opensearch_vectorstore.models import OperationMode, OutputRecord, WorkItem
from opensearch_vectorstore.node import SupplyData, VectorStoreOpenSearchNode

__all__ = [
    "CancellationToken",
    "ExecutionContext",
    "LocalExecutionContext",
    "OperationMode",
    "OutputRecord",
    "SupplyData",
    "VectorStoreOpenSearchNode",
    "WorkItem",
]
