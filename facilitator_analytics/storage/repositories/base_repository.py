import time
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from chainswarm_core.observability import log_errors
from clickhouse_connect.driver import Client
from clickhouse_connect.driver.exceptions import ClickHouseError
from loguru import logger
from pydantic import BaseModel, ValidationError

from facilitator_analytics import get_metrics_registry
from facilitator_analytics.constants import TRANSFER_EVENT_SIGNATURE, UNKNOWN_FACILITATOR
from facilitator_analytics.exceptions import QueryExecutionError
from facilitator_analytics.facilitators import FacilitatorRegistry
from facilitator_analytics.storage import get_events_table
from facilitator_analytics.storage.repositories.utils import format_date_for_sql, in_placeholders

RowT = TypeVar('RowT', bound=BaseModel)


class BaseRepository:

    @classmethod
    def table_name(cls) -> str:
        return get_events_table()

    def __init__(self, client: Client, table_name: str = None):
        self.client = client
        self.events_table = table_name or self.table_name()

    @log_errors
    def run_query(self, query_name: str, query: str, parameters: Dict[str, Any], row_model: Type[RowT]) -> List[RowT]:
        """
        Execute a read-only query and validate every returned row.

        Raises:
            QueryExecutionError: If ClickHouse fails the query or a row does not match `row_model`
        """
        started = time.perf_counter()
        try:
            result = self.client.query(query, parameters=parameters)
        except ClickHouseError as e:
            get_metrics_registry().record_error(type(e).__name__, component="storage")
            raise QueryExecutionError(f"Query {query_name} failed: {e}", query_name) from e
        finally:
            elapsed = time.perf_counter() - started
            get_metrics_registry().query_duration.labels(query=query_name).observe(elapsed)

        try:
            rows = [row_model.model_validate(row) for row in result.named_results()]
        except ValidationError as e:
            get_metrics_registry().record_error(type(e).__name__, component="storage")
            raise QueryExecutionError(f"Query {query_name} returned unexpected rows: {e}", query_name) from e

        logger.debug(f"Query {query_name} returned {len(rows)} rows in {elapsed:.3f}s")
        return rows


class TransferEventsRepository(BaseRepository):
    """Shared WHERE-clause assembly for Transfer events in the events table."""

    def _transfer_conditions(
        self,
        parameters: Dict[str, Any],
        tokens: Sequence[str],
        facilitators: Sequence[str],
        recipients: Optional[Sequence[str]] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        max_value: Optional[int] = None,
    ) -> str:
        parameters['event_signature'] = TRANSFER_EVENT_SIGNATURE

        conditions = [
            "event_signature = %(event_signature)s",
            f"address IN ({in_placeholders('token', tokens, parameters)})",
            f"transaction_from IN ({in_placeholders('facilitator', facilitators, parameters)})",
        ]

        if max_value is not None:
            parameters['max_value'] = max_value
            conditions.append("parameters['value']::UInt256 < %(max_value)s")

        if recipients:
            conditions.append(f"parameters['to']::String IN ({in_placeholders('recipient', recipients, parameters)})")

        if start_date:
            parameters['start_date'] = format_date_for_sql(start_date)
            conditions.append("block_timestamp >= %(start_date)s")

        if end_date:
            parameters['end_date'] = format_date_for_sql(end_date)
            conditions.append("block_timestamp <= %(end_date)s")

        return "\n          AND ".join(conditions)

    @staticmethod
    def _bucket_expression(parameters: Dict[str, Any], bucket_size_seconds: int) -> str:
        parameters['bucket_size'] = int(bucket_size_seconds)
        return (
            "toDateTime(intDiv(toUnixTimestamp(block_timestamp), %(bucket_size)s) * %(bucket_size)s, 'UTC')"
        )

    @staticmethod
    def _facilitator_name_expression(parameters: Dict[str, Any], registry: FacilitatorRegistry) -> str:
        """CASE expression labelling transaction_from with its facilitator name."""
        parameters['unknown_facilitator'] = UNKNOWN_FACILITATOR
        branches = []
        for i, facilitator in enumerate(registry):
            parameters[f'facilitator_name_{i}'] = facilitator.name
            addresses = in_placeholders(f'facilitator_{i}_address', facilitator.addresses, parameters)
            branches.append(f"WHEN transaction_from IN ({addresses}) THEN %(facilitator_name_{i})s")

        if not branches:
            return "%(unknown_facilitator)s"

        return "CASE\n            " + "\n            ".join(branches) + "\n            ELSE %(unknown_facilitator)s\n        END"

    @staticmethod
    def _order_by(sort_id: str, desc: bool, allowed: Sequence[str]) -> str:
        if sort_id not in allowed:
            raise ValueError(f"Unsupported sort column: {sort_id}")
        return f"{sort_id} {'DESC' if desc else 'ASC'}"
