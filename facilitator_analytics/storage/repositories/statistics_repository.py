from datetime import datetime
from typing import Dict, List, Optional, Sequence

from facilitator_analytics.constants import MAX_BUCKETED_TRANSFER_VALUE
from facilitator_analytics.models.outputs import BucketStatistics, OverallStatistics
from facilitator_analytics.storage.repositories.base_repository import TransferEventsRepository


class StatisticsRepository(TransferEventsRepository):

    def get_overall_statistics(
        self,
        tokens: Sequence[str],
        facilitators: Sequence[str],
        recipients: Optional[Sequence[str]] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Optional[OverallStatistics]:
        params: Dict = {}
        where = self._transfer_conditions(
            params, tokens, facilitators,
            recipients=recipients, start_date=start_date, end_date=end_date
        )

        query = f"""
        SELECT
            COUNT(DISTINCT transaction_hash) AS total_transactions,
            SUM(parameters['value']::UInt256) AS total_amount,
            COUNT(DISTINCT parameters['from']::String) AS unique_buyers,
            COUNT(DISTINCT parameters['to']::String) AS unique_sellers,
            max(block_timestamp) AS latest_block_timestamp
        FROM {self.events_table}
        WHERE {where}
        """

        rows = self.run_query('overall-statistics', query, params, OverallStatistics)
        return rows[0] if rows else None

    def get_bucketed_statistics(
        self,
        tokens: Sequence[str],
        facilitators: Sequence[str],
        bucket_size_seconds: int,
        recipients: Optional[Sequence[str]] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[BucketStatistics]:
        """Per-bucket aggregates; buckets without transfers are absent from the result."""
        params: Dict = {}
        bucket = self._bucket_expression(params, bucket_size_seconds)
        where = self._transfer_conditions(
            params, tokens, facilitators,
            recipients=recipients, start_date=start_date, end_date=end_date,
            max_value=MAX_BUCKETED_TRANSFER_VALUE
        )

        query = f"""
        SELECT
            {bucket} AS bucket_start,
            COUNT(DISTINCT transaction_hash) AS total_transactions,
            SUM(parameters['value']::UInt256) AS total_amount,
            COUNT(DISTINCT parameters['from']::String) AS unique_buyers,
            COUNT(DISTINCT parameters['to']::String) AS unique_sellers
        FROM {self.events_table}
        WHERE {where}
        GROUP BY bucket_start
        ORDER BY bucket_start ASC
        """

        return self.run_query('bucketed-statistics', query, params, BucketStatistics)
