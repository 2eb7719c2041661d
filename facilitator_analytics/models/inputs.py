from datetime import datetime
from typing import Any, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, model_validator

from facilitator_analytics.constants import (
    DEFAULT_LIST_LIMIT,
    DEFAULT_LOOKBACK_MONTHS,
    DEFAULT_NUM_BUCKETS,
    MAX_PAGE_LIMIT,
    USDC_ADDRESS,
    FacilitatorSortIds,
    SellerSortIds,
)
from facilitator_analytics.exceptions import InvalidInputError
from facilitator_analytics.facilitators import get_facilitators
from facilitator_analytics.models.types import EthereumAddress, UtcDatetime
from facilitator_analytics.utils import months_ago, utc_now

FacilitatorSortId = Literal[
    FacilitatorSortIds.TX_COUNT,
    FacilitatorSortIds.TOTAL_AMOUNT,
    FacilitatorSortIds.LATEST_BLOCK_TIMESTAMP,
    FacilitatorSortIds.UNIQUE_BUYERS,
    FacilitatorSortIds.UNIQUE_SELLERS,
]

SellerSortId = Literal[
    SellerSortIds.TX_COUNT,
    SellerSortIds.TOTAL_AMOUNT,
    SellerSortIds.LATEST_BLOCK_TIMESTAMP,
    SellerSortIds.UNIQUE_BUYERS,
]


def _default_tokens() -> List[str]:
    return [USDC_ADDRESS]


def _default_facilitator_addresses() -> List[str]:
    return get_facilitators().all_addresses


def _default_start_date() -> datetime:
    return months_ago(DEFAULT_LOOKBACK_MONTHS)


class FacilitatorSorting(BaseModel):
    id: FacilitatorSortId = FacilitatorSortIds.TX_COUNT
    desc: bool = True


class SellerSorting(BaseModel):
    id: SellerSortId
    desc: bool = True


class BaseQueryInput(BaseModel):
    tokens: List[EthereumAddress] = Field(default_factory=_default_tokens, min_length=1,
                                          description="Token contracts whose Transfer events are counted")
    facilitators: List[EthereumAddress] = Field(default_factory=_default_facilitator_addresses, min_length=1,
                                                description="Transaction senders (facilitator addresses) to include")


class DateRangeMixin(BaseModel):

    @model_validator(mode='after')
    def validate_date_order(self):
        start_date = getattr(self, 'start_date', None)
        end_date = getattr(self, 'end_date', None)
        if start_date is not None and end_date is not None and end_date < start_date:
            raise ValueError('end_date must not be before start_date')
        return self


class OverallStatisticsInput(BaseQueryInput, DateRangeMixin):
    addresses: Optional[List[EthereumAddress]] = Field(None, description="Restrict to these recipients")
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None


class BucketedStatisticsInput(BaseQueryInput, DateRangeMixin):
    addresses: Optional[List[EthereumAddress]] = Field(None, description="Restrict to these recipients")
    start_date: UtcDatetime = Field(default_factory=_default_start_date)
    end_date: UtcDatetime = Field(default_factory=utc_now)
    num_buckets: int = Field(DEFAULT_NUM_BUCKETS, ge=1, description="Number of time buckets in the series")


class BucketedFacilitatorsStatisticsInput(BaseQueryInput, DateRangeMixin):
    start_date: UtcDatetime = Field(default_factory=_default_start_date)
    end_date: UtcDatetime = Field(default_factory=utc_now)
    num_buckets: int = Field(DEFAULT_NUM_BUCKETS, ge=1, description="Number of time buckets in the series")


class ListTopFacilitatorsInput(DateRangeMixin):
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
    limit: int = Field(DEFAULT_LIST_LIMIT, ge=1)
    sorting: FacilitatorSorting = Field(default_factory=FacilitatorSorting)
    tokens: List[EthereumAddress] = Field(default_factory=_default_tokens, min_length=1)


class ListTopSellersInput(BaseQueryInput, DateRangeMixin):
    sorting: SellerSorting
    addresses: Optional[List[EthereumAddress]] = Field(None, description="Restrict to these recipients")
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None


class PaginationInput(BaseModel):
    limit: int = Field(DEFAULT_LIST_LIMIT, ge=1, le=MAX_PAGE_LIMIT)
    cursor: int = Field(0, ge=0, description="Offset of the first item of the page")


InputT = TypeVar('InputT', bound=BaseModel)


def parse_input(schema: Type[InputT], data: Any) -> InputT:
    """Validate raw input against a schema, raising InvalidInputError on failure."""
    if data is None:
        data = {}
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid input: {e}") from e
