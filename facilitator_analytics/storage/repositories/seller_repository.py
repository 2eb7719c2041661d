from datetime import datetime
from typing import Dict, List, Optional, Sequence

from facilitator_analytics.constants import SellerSortIds
from facilitator_analytics.models.outputs import SellerSummary
from facilitator_analytics.storage.repositories.base_repository import TransferEventsRepository

SELLER_SORT_COLUMNS = (
    SellerSortIds.TX_COUNT,
    SellerSortIds.TOTAL_AMOUNT,
    SellerSortIds.LATEST_BLOCK_TIMESTAMP,
    SellerSortIds.UNIQUE_BUYERS,
)


class SellerRepository(TransferEventsRepository):

    def get_top_sellers(
        self,
        tokens: Sequence[str],
        facilitators: Sequence[str],
        sort_id: str,
        desc: bool,
        limit: int,
        offset: int = 0,
        recipients: Optional[Sequence[str]] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[SellerSummary]:
        """Recipients ranked by the sort column; returns up to limit + 1 rows from `offset`."""
        params: Dict = {}
        where = self._transfer_conditions(
            params, tokens, facilitators,
            recipients=recipients, start_date=start_date, end_date=end_date
        )
        order_by = self._order_by(sort_id, desc, SELLER_SORT_COLUMNS)
        params['limit'] = int(limit) + 1
        params['offset'] = int(offset)

        query = f"""
        SELECT
            parameters['to']::String AS recipient,
            COUNT(DISTINCT transaction_hash) AS tx_count,
            SUM(parameters['value']::UInt256) AS total_amount,
            max(block_timestamp) AS latest_block_timestamp,
            COUNT(DISTINCT parameters['from']::String) AS unique_buyers,
            groupUniqArray(transaction_from) AS facilitators
        FROM {self.events_table}
        WHERE {where}
        GROUP BY recipient
        ORDER BY {order_by}, recipient ASC
        LIMIT %(limit)s
        OFFSET %(offset)s
        """

        return self.run_query('sellers-list', query, params, SellerSummary)
