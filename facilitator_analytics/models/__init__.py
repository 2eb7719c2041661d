from facilitator_analytics.models.inputs import (
    BaseQueryInput,
    BucketedFacilitatorsStatisticsInput,
    BucketedStatisticsInput,
    FacilitatorSorting,
    ListTopFacilitatorsInput,
    ListTopSellersInput,
    OverallStatisticsInput,
    PaginationInput,
    SellerSorting,
    parse_input,
)
from facilitator_analytics.models.outputs import (
    BucketStatistics,
    FacilitatorBucket,
    FacilitatorBucketRow,
    FacilitatorSummary,
    FacilitatorSummaryRow,
    OverallStatistics,
    PaginatedResponse,
    SellerSummary,
    TransferStatistics,
)

__all__ = [
    'BaseQueryInput',
    'BucketedFacilitatorsStatisticsInput',
    'BucketedStatisticsInput',
    'FacilitatorSorting',
    'ListTopFacilitatorsInput',
    'ListTopSellersInput',
    'OverallStatisticsInput',
    'PaginationInput',
    'SellerSorting',
    'parse_input',
    'BucketStatistics',
    'FacilitatorBucket',
    'FacilitatorBucketRow',
    'FacilitatorSummary',
    'FacilitatorSummaryRow',
    'OverallStatistics',
    'PaginatedResponse',
    'SellerSummary',
    'TransferStatistics',
]
