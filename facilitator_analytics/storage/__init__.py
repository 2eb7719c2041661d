import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from chainswarm_core.observability import log_errors
from clickhouse_connect import get_client
from clickhouse_connect.driver import Client
from clickhouse_connect.driver.exceptions import ClickHouseError
from loguru import logger

from facilitator_analytics import get_metrics_registry
from facilitator_analytics.constants import DEFAULT_EVENTS_TABLE
from facilitator_analytics.exceptions import QueryExecutionError


def get_connection_params() -> Dict[str, Any]:
    """ClickHouse connection parameters for the events database, from the environment."""
    return {
        'host': os.getenv('CLICKHOUSE_HOST', 'localhost'),
        'port': int(os.getenv('CLICKHOUSE_PORT', '8123')),
        'user': os.getenv('CLICKHOUSE_USER', 'default'),
        'password': os.getenv('CLICKHOUSE_PASSWORD', ''),
        'database': os.getenv('CLICKHOUSE_DATABASE', 'base'),
        'max_execution_time': int(os.getenv('CLICKHOUSE_MAX_EXECUTION_TIME', '60')),
    }


def get_events_table() -> str:
    return os.getenv('EVENTS_TABLE', DEFAULT_EVENTS_TABLE)


class ClientFactory:

    def __init__(self, connection_params: Dict[str, Any]):
        self.connection_params = connection_params

    @log_errors
    def create_client(self) -> Client:
        """
        Open a read-only client. clickhouse-connect connects eagerly, so an
        unreachable server fails here rather than on the first query.

        Raises:
            QueryExecutionError: If the connection cannot be established
        """
        params = self.connection_params
        try:
            return get_client(
                host=params['host'],
                port=int(params['port']),
                username=params['user'],
                password=params['password'],
                database=params['database'],
                settings={
                    'readonly': 1,
                    'max_execution_time': params.get('max_execution_time', 60),
                }
            )
        except ClickHouseError as e:
            get_metrics_registry().record_error(type(e).__name__, component="storage")
            raise QueryExecutionError(
                f"Cannot connect to ClickHouse at {params['host']}:{params['port']}: {e}"
            ) from e

    @contextmanager
    def client_context(self) -> Iterator[Client]:
        client = self.create_client()
        try:
            yield client
        finally:
            try:
                client.close()
            except Exception as e:
                logger.warning(f"Error closing ClickHouse client: {e}")


@contextmanager
def client_context() -> Iterator[Client]:
    """Open a read-only client for the configured events database."""
    with ClientFactory(get_connection_params()).client_context() as client:
        yield client


__all__ = ['ClientFactory', 'client_context', 'get_connection_params', 'get_events_table']
