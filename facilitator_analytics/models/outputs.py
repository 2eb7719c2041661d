from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from facilitator_analytics.facilitators import Facilitator
from facilitator_analytics.models.types import EthereumAddress, UtcDatetime


class TransferStatistics(BaseModel):
    total_transactions: int = 0
    total_amount: int = 0
    unique_buyers: int = 0
    unique_sellers: int = 0


class OverallStatistics(TransferStatistics):
    latest_block_timestamp: UtcDatetime


class BucketStatistics(TransferStatistics):
    bucket_start: UtcDatetime


class FacilitatorBucketRow(BucketStatistics):
    facilitator_name: str


class FacilitatorBucket(BaseModel):
    bucket_start: UtcDatetime
    facilitators: Dict[str, TransferStatistics] = Field(default_factory=dict)


class FacilitatorSummaryRow(BaseModel):
    facilitator_name: str
    tx_count: int
    total_amount: int
    unique_buyers: int
    unique_sellers: int
    latest_block_timestamp: UtcDatetime


class FacilitatorSummary(FacilitatorSummaryRow):
    facilitator: Optional[Facilitator] = None


class SellerSummary(BaseModel):
    recipient: EthereumAddress
    facilitators: List[EthereumAddress]
    tx_count: int
    total_amount: int
    latest_block_timestamp: UtcDatetime
    unique_buyers: int


ItemT = TypeVar('ItemT')


class PaginatedResponse(BaseModel, Generic[ItemT]):
    items: List[ItemT]
    limit: int
    cursor: int = 0
    has_next_page: bool
    next_cursor: Optional[int] = None
