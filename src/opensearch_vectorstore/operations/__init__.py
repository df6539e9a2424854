"""Operation handlers — one per direct-execution mode."""

from opensearch_vectorstore.operations.insert import handle_insert_operation
from opensearch_vectorstore.operations.load import handle_load_operation
from opensearch_vectorstore.operations.update import handle_update_operation

__all__ = [
    "handle_insert_operation",
    "handle_load_operation",
    "handle_update_operation",
]
