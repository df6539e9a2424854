"""Error taxonomy raised by the vector-store node.

Every error carries enough context (node name, operation mode, item index)
for the host to report *where* an invocation failed.  Collaborator failures
(embedding provider, OpenSearch) are chained as ``__cause__`` so the
original exception is never lost.
"""

from __future__ import annotations


class NodeOperationError(Exception):
    """Fatal failure of one node invocation."""

    def __init__(
        self,
        message: str,
        *,
        node_name: str | None = None,
        operation: str | None = None,
        item_index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.node_name = node_name
        self.operation = operation
        self.item_index = item_index

    def __str__(self) -> str:  # noqa: D105
        context = []
        if self.node_name:
            context.append(f"node={self.node_name}")
        if self.operation:
            context.append(f"operation={self.operation}")
        if self.item_index is not None:
            context.append(f"item={self.item_index}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class ConfigurationError(NodeOperationError):
    """The node is configured in a way that cannot run (bad mode, missing id, …)."""


class DocumentValidationError(NodeOperationError):
    """An input item produced documents the operation cannot accept."""


class VectorStoreError(Exception):
    """OpenSearch accepted a request but reported per-item failures in the body."""

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []
