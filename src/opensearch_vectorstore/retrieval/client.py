"""Vector-store client factory — one OpenSearch client per process.

The first :meth:`OpenSearchClientFactory.get_client` call builds the client;
every later call returns that same client and ignores the configuration
it is given, so per-call credential switching is not supported.  The
first construction is serialised with a lock.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from opensearchpy import OpenSearch

from opensearch_vectorstore.models import ConnectionConfig

logger = logging.getLogger(__name__)


def client_options(connection: ConnectionConfig) -> dict[str, Any]:
    """Translate *connection* into ``OpenSearch`` constructor arguments."""
    options: dict[str, Any] = {"hosts": [connection.base_url]}
    if connection.username:
        options["http_auth"] = (connection.username, connection.password)
    if connection.ignore_ssl_issues:
        options.update(verify_certs=False, ssl_assert_hostname=False, ssl_show_warn=False)
    else:
        options["verify_certs"] = True
    return options


class OpenSearchClientFactory:
    """Lazily builds and memoises a single OpenSearch client.

    Parameters
    ----------
    client_cls:
        Callable constructing the client from keyword options; injectable
        for tests.
    """

    def __init__(self, client_cls: Callable[..., Any] = OpenSearch) -> None:
        self._client_cls = client_cls
        self._client: Any = None
        self._lock = threading.Lock()

    def get_client(self, connection: ConnectionConfig) -> Any:
        client = self._client
        if client is not None:
            logger.debug("Reusing OpenSearch client; ignoring connection for %s", connection.base_url)
            return client

        with self._lock:
            if self._client is None:
                logger.info(
                    "Creating OpenSearch client for %s (verify certificates: %s)",
                    connection.base_url,
                    not connection.ignore_ssl_issues,
                )
                self._client = self._client_cls(**client_options(connection))
            return self._client

    def reset(self) -> None:
        """Forget the memoised client.  Only meant for tests."""
        with self._lock:
            self._client = None


# Process-wide factory handed to the node by the composition root.
client_factory = OpenSearchClientFactory()
