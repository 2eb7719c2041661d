from typing import Any, List

from loguru import logger

from facilitator_analytics.cache import create_cached_query
from facilitator_analytics.constants import CachePrefixes, CacheTags
from facilitator_analytics.models import (
    BucketedStatisticsInput,
    BucketStatistics,
    OverallStatistics,
    OverallStatisticsInput,
    parse_input,
)
from facilitator_analytics.storage import client_context
from facilitator_analytics.storage.repositories import StatisticsRepository
from facilitator_analytics.utils import utc_now
from facilitator_analytics.utils.time_buckets import compute_bucket_geometry, fill_time_series


def _get_overall_statistics_uncached(query_input: Any = None) -> OverallStatistics:
    params = parse_input(OverallStatisticsInput, query_input)

    with client_context() as client:
        row = StatisticsRepository(client).get_overall_statistics(
            tokens=params.tokens,
            facilitators=params.facilitators,
            recipients=params.addresses,
            start_date=params.start_date,
            end_date=params.end_date,
        )

    if row is None:
        return OverallStatistics(latest_block_timestamp=utc_now())
    return row


def _get_bucketed_statistics_uncached(query_input: Any = None) -> List[BucketStatistics]:
    """Time series of transfer statistics with one entry per bucket; empty buckets are zeros."""
    params = parse_input(BucketedStatisticsInput, query_input)
    geometry = compute_bucket_geometry(params.start_date, params.end_date, params.num_buckets)

    logger.bind(start_date=params.start_date.isoformat(), end_date=params.end_date.isoformat()).debug(
        f"Bucketed statistics: {geometry.num_buckets} buckets of {geometry.bucket_size_seconds}s"
    )

    with client_context() as client:
        rows = StatisticsRepository(client).get_bucketed_statistics(
            tokens=params.tokens,
            facilitators=params.facilitators,
            bucket_size_seconds=geometry.bucket_size_seconds,
            recipients=params.addresses,
            start_date=params.start_date,
            end_date=params.end_date,
        )

    return fill_time_series(rows, geometry)


get_overall_statistics = create_cached_query(
    _get_overall_statistics_uncached,
    cache_key_prefix=CachePrefixes.OVERALL_STATISTICS,
    tags=[CacheTags.STATISTICS],
)

get_bucketed_statistics = create_cached_query(
    _get_bucketed_statistics_uncached,
    cache_key_prefix=CachePrefixes.BUCKETED_STATISTICS,
    tags=[CacheTags.STATISTICS],
)
