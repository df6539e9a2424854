"""Host execution context — the seam between the node and the workflow engine.

The node never talks to the workflow engine directly; it only uses the
:class:`ExecutionContext` protocol.  :class:`LocalExecutionContext` is an
in-process implementation used by the HTTP host and the test-suite.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Protocol

from opensearch_vectorstore.errors import ConfigurationError
from opensearch_vectorstore.models import ConnectionConfig, WorkItem

AI_EMBEDDING = "ai_embedding"
AI_DOCUMENT = "ai_document"

_MISSING: Any = object()


class CancellationToken:
    """Cooperative cancellation flag, polled at item boundaries."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class ExecutionContext(Protocol):
    """What the node needs from its host."""

    node_name: str
    cancellation: CancellationToken

    def get_node_parameter(self, name: str, item_index: int, default: Any = _MISSING) -> Any: ...

    def get_input_data(self) -> list[WorkItem]: ...

    def get_input_connection_data(self, connection_type: str, index: int = 0) -> Any: ...

    def get_credentials(self) -> ConnectionConfig: ...


def _lookup(parameters: dict[str, Any], path: str) -> Any:
    """Resolve a dotted *path* (``options.fieldNames.values``) in nested dicts."""
    current: Any = parameters
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


@dataclass
class LocalExecutionContext:
    """In-process :class:`ExecutionContext`.

    Parameters
    ----------
    parameters:
        Node configuration shared by all items (nested dicts; dotted lookups).
    items:
        Input work items.
    connections:
        Upstream connection data keyed by connection type
        (:data:`AI_EMBEDDING`, :data:`AI_DOCUMENT`).
    credentials:
        OpenSearch connection configuration.
    item_parameters:
        Per-item overrides, keyed by item index.  An override wins over
        the shared value for the same dotted path.
    """

    parameters: dict[str, Any] = field(default_factory=dict)
    items: list[WorkItem] = field(default_factory=list)
    connections: dict[str, Any] = field(default_factory=dict)
    credentials: ConnectionConfig | None = None
    item_parameters: dict[int, dict[str, Any]] = field(default_factory=dict)
    node_name: str = "OpenSearch Vector Store"
    cancellation: CancellationToken = field(default_factory=CancellationToken)

    def get_node_parameter(self, name: str, item_index: int, default: Any = _MISSING) -> Any:
        value = _lookup(self.item_parameters.get(item_index, {}), name)
        if value is _MISSING:
            value = _lookup(self.parameters, name)
        if value is _MISSING:
            if default is _MISSING:
                raise ConfigurationError(
                    f"Could not get parameter {name!r}",
                    node_name=self.node_name,
                    item_index=item_index,
                )
            return default
        return value

    def get_input_data(self) -> list[WorkItem]:
        return self.items

    def get_input_connection_data(self, connection_type: str, index: int = 0) -> Any:
        # Each connection type accepts a single upstream node.
        return self.connections.get(connection_type)

    def get_credentials(self) -> ConnectionConfig:
        if self.credentials is None:
            raise ConfigurationError(
                "Node does not have OpenSearch credentials set", node_name=self.node_name
            )
        return self.credentials
