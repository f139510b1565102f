"""Read-only adapter for the ClickHouse analytical event store."""
import logging
from typing import Any, Callable, Dict, List, Optional

import clickhouse_connect

logger = logging.getLogger(__name__)


class ClickHouseTable:
    """Analytical tables queried by orgflow"""
    MESSAGE_STATUS = 'message_status'


class ClickHouseAdapter:
    """ClickHouse adapter for running parameterized read queries."""

    def __init__(self, host: str, port: int, username: str, password: str, database: str = 'default',
                 connection_resolver: Optional[Callable] = None):
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._database = database
        self._client = None

        if connection_resolver is None:
            self._connection_resolver = clickhouse_connect.get_client
        else:
            self._connection_resolver = connection_resolver

    def __enter__(self):
        self._client = self._connection_resolver(
            host=self._host,
            port=self._port,
            username=self._username,
            password=self._password,
            database=self._database
        )
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if self._client is not None:
            self._client.close()
            self._client = None

    def query(self, sql: str, parameters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        """
        Runs a query with server-side parameter binding.

        Args:
            sql (str): query text, using ``{name:Type}`` placeholders.
            parameters (dict): values for the placeholders.

        Returns:
            List[Dict[str, Any]]: result rows keyed by column name.
        """
        if self._client is None:
            raise Exception("No ClickHouse client is available.")
        logger.debug("Running ClickHouse query: %s", sql)
        result = self._client.query(sql, parameters=parameters or {})
        return list(result.named_results())
