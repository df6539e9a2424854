"""Metadata filter builder — per-item filter criteria for similarity search.

The result is a plain mapping of metadata key → expected value; the vector
store translates it into its own query syntax.  ``None`` means "no
restriction" and is returned whenever no criteria are configured, so an
empty mapping never reaches the store.
"""

from __future__ import annotations

import json
from typing import Any

from opensearch_vectorstore.context import ExecutionContext
from opensearch_vectorstore.errors import ConfigurationError


def build_metadata_filter(context: ExecutionContext, item_index: int) -> dict[str, Any] | None:
    """Return the metadata filter configured for *item_index*, or ``None``.

    Two sources are checked, in order:

    * ``options.metadata.metadataValues`` — a list of ``{"name", "value"}``
      pairs; later duplicates of a name win.
    * ``options.searchFilterJson`` — a JSON object (or its text form).
    """
    options = context.get_node_parameter("options", item_index, {}) or {}

    metadata_values = (options.get("metadata") or {}).get("metadataValues") or []
    if metadata_values:
        return {entry["name"]: entry.get("value") for entry in metadata_values if entry.get("name")} or None

    raw = options.get("searchFilterJson")
    if raw in (None, ""):
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                f"Search filter is not valid JSON: {exc.msg}",
                node_name=context.node_name,
                item_index=item_index,
            ) from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(
            "Search filter must be a JSON object",
            node_name=context.node_name,
            item_index=item_index,
        )
    return raw or None
