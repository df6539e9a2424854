"""Read node configuration into typed, validated models.

The host stores configuration as loosely-typed per-item parameters.  This
module is the only place that probes them; everything downstream receives
one of the tagged :mod:`~opensearch_vectorstore.models` variants.
"""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError

from opensearch_vectorstore.context import ExecutionContext
from opensearch_vectorstore.errors import ConfigurationError
from opensearch_vectorstore.models import FieldNameMapping, Operation, OperationMode

_OPERATION_ADAPTER: TypeAdapter[Operation] = TypeAdapter(Operation)

# Validation error types meaning "no value given" rather than "bad value".
_ABSENT_ERROR_TYPES = frozenset({"missing", "string_too_short"})

# Parameter names (and defaults) each mode reads, besides ``mode`` itself.
_MODE_PARAMETERS: dict[str, dict[str, Any]] = {
    OperationMode.LOAD.value: {"prompt": None, "topK": 4, "includeDocumentMetadata": True},
    OperationMode.INSERT.value: {},
    OperationMode.UPDATE.value: {"id": ""},
    OperationMode.RETRIEVE.value: {},
    OperationMode.RETRIEVE_AS_TOOL.value: {
        "topK": 4,
        "includeDocumentMetadata": True,
        "toolName": None,
        "toolDescription": None,
    },
}


def _extract_value(value: Any) -> Any:
    """Unwrap resource-locator values (``{"mode": "list", "value": "..."}``)."""
    if isinstance(value, dict) and "value" in value:
        return value["value"]
    return value


def read_mode(context: ExecutionContext) -> str:
    """Return the configured operation mode (always read at item 0)."""
    return str(context.get_node_parameter("mode", 0, OperationMode.RETRIEVE.value))


def read_operation(context: ExecutionContext, item_index: int) -> Operation:
    """Build the tagged operation variant for *item_index*.

    Raises
    ------
    ConfigurationError
        When the mode is unknown or a required field is missing/invalid.
    """
    mode = read_mode(context)
    names = _MODE_PARAMETERS.get(mode)
    if names is None:
        raise ConfigurationError(
            f"Unknown operation mode {mode!r}",
            node_name=context.node_name,
            item_index=item_index,
        )

    data: dict[str, Any] = {"mode": mode}
    for name, default in names.items():
        value = _extract_value(context.get_node_parameter(name, item_index, default))
        if value is not None:
            data[name] = value

    try:
        return _OPERATION_ADAPTER.validate_python(data)
    except ValidationError as exc:
        errors = [err for err in exc.errors() if err["loc"]]
        fields = {str(err["loc"][-1]) for err in errors}
        id_absent = any(
            err["loc"][-1] == "id" and err["type"] in _ABSENT_ERROR_TYPES for err in errors
        )
        if mode == OperationMode.UPDATE.value and id_absent:
            message = "ID of an embedding entry is required for update"
        else:
            message = f"Invalid parameters for {mode!r} operation: {', '.join(sorted(fields))}"
        raise ConfigurationError(
            message, node_name=context.node_name, operation=mode, item_index=item_index
        ) from exc


def read_field_names(context: ExecutionContext) -> FieldNameMapping:
    """Index field names, read once per invocation from item 0."""
    values = context.get_node_parameter("options.fieldNames.values", 0, {}) or {}
    try:
        return FieldNameMapping.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid index field names: {exc.errors()[0]['msg']}",
            node_name=context.node_name,
        ) from exc


def read_index_name(context: ExecutionContext, item_index: int) -> str:
    index_name = _extract_value(context.get_node_parameter("indexName", item_index, ""))
    if not index_name:
        raise ConfigurationError(
            "OpenSearch index name is required",
            node_name=context.node_name,
            item_index=item_index,
        )
    return str(index_name)
