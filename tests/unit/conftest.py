"""
Pytest configuration for unit tests.

No ClickHouse instance is needed: services are pointed at a fake client that
records every query with its bound parameters and replays canned rows.
"""

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import pytest

from facilitator_analytics.cache import clear_cache
from facilitator_analytics.services import facilitator_service, seller_service, statistics_service


class FakeQueryResult:

    def __init__(self, rows: List[Dict[str, Any]]):
        self._rows = rows

    def named_results(self):
        return iter(self._rows)


class FakeClickHouseClient:
    """Stand-in for clickhouse_connect's Client; answers queries from a queue of row lists."""

    def __init__(self):
        self.responses: List[Any] = []
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def add_response(self, rows: List[Dict[str, Any]]):
        self.responses.append(rows)

    def add_error(self, error: Exception):
        self.responses.append(error)

    def query(self, query: str, parameters: Optional[Dict[str, Any]] = None):
        self.calls.append({'query': query, 'parameters': dict(parameters or {})})
        response = self.responses.pop(0) if self.responses else []
        if isinstance(response, Exception):
            raise response
        return FakeQueryResult(response)

    def close(self):
        self.closed = True

    @property
    def last_query(self) -> str:
        return self.calls[-1]['query']

    @property
    def last_parameters(self) -> Dict[str, Any]:
        return self.calls[-1]['parameters']


@pytest.fixture
def clickhouse_client():
    return FakeClickHouseClient()


@pytest.fixture
def fake_client(monkeypatch, clickhouse_client):
    """Route every service's client_context to the fake client."""

    @contextmanager
    def _client_context():
        yield clickhouse_client

    for module in (statistics_service, facilitator_service, seller_service):
        monkeypatch.setattr(module, 'client_context', _client_context)

    return clickhouse_client


@pytest.fixture(autouse=True)
def reset_cache():
    clear_cache()
    yield
    clear_cache()
