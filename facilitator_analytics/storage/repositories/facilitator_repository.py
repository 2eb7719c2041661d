from datetime import datetime
from typing import Dict, List, Optional, Sequence

from clickhouse_connect.driver import Client

from facilitator_analytics.constants import MAX_BUCKETED_TRANSFER_VALUE, FacilitatorSortIds
from facilitator_analytics.facilitators import FacilitatorRegistry
from facilitator_analytics.models.outputs import FacilitatorBucketRow, FacilitatorSummaryRow
from facilitator_analytics.storage.repositories.base_repository import TransferEventsRepository

FACILITATOR_SORT_COLUMNS = (
    FacilitatorSortIds.TX_COUNT,
    FacilitatorSortIds.TOTAL_AMOUNT,
    FacilitatorSortIds.LATEST_BLOCK_TIMESTAMP,
    FacilitatorSortIds.UNIQUE_BUYERS,
    FacilitatorSortIds.UNIQUE_SELLERS,
)


class FacilitatorRepository(TransferEventsRepository):
    """Aggregates grouped by facilitator, i.e. by the registry label of transaction_from."""

    def __init__(self, client: Client, registry: FacilitatorRegistry, table_name: str = None):
        super().__init__(client, table_name)
        self.registry = registry

    def get_top_facilitators(
        self,
        tokens: Sequence[str],
        sort_id: str,
        desc: bool,
        limit: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[FacilitatorSummaryRow]:
        """
        Leaderboard of facilitators.

        Fetches one row more than `limit` so callers can tell whether the
        list was truncated.
        """
        params: Dict = {}
        facilitator_name = self._facilitator_name_expression(params, self.registry)
        where = self._transfer_conditions(
            params, tokens, self.registry.all_addresses,
            start_date=start_date, end_date=end_date
        )
        order_by = self._order_by(sort_id, desc, FACILITATOR_SORT_COLUMNS)
        params['limit'] = int(limit) + 1

        query = f"""
        SELECT
            COUNT(DISTINCT parameters['to']::String) AS unique_sellers,
            COUNT(DISTINCT parameters['from']::String) AS unique_buyers,
            COUNT(DISTINCT transaction_hash) AS tx_count,
            SUM(parameters['value']::UInt256) AS total_amount,
            max(block_timestamp) AS latest_block_timestamp,
            {facilitator_name} AS facilitator_name
        FROM {self.events_table}
        WHERE {where}
        GROUP BY facilitator_name
        ORDER BY {order_by}
        LIMIT %(limit)s
        """

        return self.run_query('facilitators-list', query, params, FacilitatorSummaryRow)

    def get_bucketed_statistics(
        self,
        tokens: Sequence[str],
        bucket_size_seconds: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[FacilitatorBucketRow]:
        params: Dict = {}
        bucket = self._bucket_expression(params, bucket_size_seconds)
        facilitator_name = self._facilitator_name_expression(params, self.registry)
        where = self._transfer_conditions(
            params, tokens, self.registry.all_addresses,
            start_date=start_date, end_date=end_date,
            max_value=MAX_BUCKETED_TRANSFER_VALUE
        )

        query = f"""
        SELECT
            {bucket} AS bucket_start,
            COUNT(DISTINCT transaction_hash) AS total_transactions,
            SUM(parameters['value']::UInt256) AS total_amount,
            COUNT(DISTINCT parameters['from']::String) AS unique_buyers,
            COUNT(DISTINCT parameters['to']::String) AS unique_sellers,
            {facilitator_name} AS facilitator_name
        FROM {self.events_table}
        WHERE {where}
        GROUP BY facilitator_name, bucket_start
        ORDER BY bucket_start ASC
        """

        return self.run_query('bucketed-facilitators-statistics', query, params, FacilitatorBucketRow)
