"""Search Engine Scanner - Read-only HTTP queries to Elasticsearch/OpenSearch.

Requests go through curl on the reviewed host, which is where the
configured search hostname is meant to resolve.
"""

import json
import logging
import shlex
from typing import Any

from magento_doctor.connector.base import CommandError, Connector

logger = logging.getLogger(__name__)

# curl exit code for an HTTP status >= 400 with --fail
CURL_HTTP_ERROR = 22


class SearchEngineClient:
    """GET requests against one search engine base URL."""

    def __init__(
        self,
        connector: Connector,
        base_url: str,
        timeout: int = 5,
        connect_timeout: int = 2,
    ) -> None:
        self.connector = connector
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.connect_timeout = connect_timeout

    def get_json(self, path: str) -> dict[str, Any] | None:
        """Decoded JSON body, or None for an HTTP error or a non-JSON reply.

        Raises:
            CommandError: The engine could not be reached at all.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        command = (
            f"curl -sS --fail -m {int(self.timeout)} --connect-timeout {int(self.connect_timeout)} "
            f"{shlex.quote(url)}"
        )
        result = self.connector.run(command, timeout=self.timeout + 5)
        if result.exit_code == CURL_HTTP_ERROR:
            logger.debug("GET %s: %s", url, result.stderr.strip())
            return None
        if not result.success:
            raise CommandError(result)

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError:
            logger.debug("GET %s returned non-JSON content", url)
            return None
        return data if isinstance(data, dict) else None
