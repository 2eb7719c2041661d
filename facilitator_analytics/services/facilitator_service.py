from typing import Any, List

from loguru import logger

from facilitator_analytics.cache import create_cached_query
from facilitator_analytics.constants import CachePrefixes, CacheTags
from facilitator_analytics.facilitators import get_facilitators
from facilitator_analytics.models import (
    BucketedFacilitatorsStatisticsInput,
    FacilitatorBucket,
    FacilitatorSummary,
    ListTopFacilitatorsInput,
    parse_input,
)
from facilitator_analytics.storage import client_context
from facilitator_analytics.storage.repositories import FacilitatorRepository
from facilitator_analytics.utils.time_buckets import compute_bucket_geometry, group_by_bucket


def _list_top_facilitators_uncached(query_input: Any = None) -> List[FacilitatorSummary]:
    params = parse_input(ListTopFacilitatorsInput, query_input)
    registry = get_facilitators()
    if not registry.all_addresses:
        logger.warning("Facilitator registry is empty, nothing to rank")
        return []

    with client_context() as client:
        rows = FacilitatorRepository(client, registry).get_top_facilitators(
            tokens=params.tokens,
            sort_id=params.sorting.id,
            desc=params.sorting.desc,
            limit=params.limit,
            start_date=params.start_date,
            end_date=params.end_date,
        )

    summaries = [
        FacilitatorSummary(**row.model_dump(), facilitator=registry.get_by_name(row.facilitator_name))
        for row in rows
    ]
    return summaries[:params.limit]


def _get_bucketed_facilitators_statistics_uncached(query_input: Any = None) -> List[FacilitatorBucket]:
    """
    Per-bucket statistics broken down by facilitator name.

    Only buckets with at least one transfer are returned; the query spans
    every registered facilitator regardless of the `facilitators` input.
    """
    params = parse_input(BucketedFacilitatorsStatisticsInput, query_input)
    registry = get_facilitators()
    if not registry.all_addresses:
        logger.warning("Facilitator registry is empty, no facilitator series to build")
        return []

    geometry = compute_bucket_geometry(params.start_date, params.end_date, params.num_buckets)

    with client_context() as client:
        rows = FacilitatorRepository(client, registry).get_bucketed_statistics(
            tokens=params.tokens,
            bucket_size_seconds=geometry.bucket_size_seconds,
            start_date=params.start_date,
            end_date=params.end_date,
        )

    return group_by_bucket(rows)


list_top_facilitators = create_cached_query(
    _list_top_facilitators_uncached,
    cache_key_prefix=CachePrefixes.FACILITATORS_LIST,
    tags=[CacheTags.FACILITATORS],
)

get_bucketed_facilitators_statistics = create_cached_query(
    _get_bucketed_facilitators_statistics_uncached,
    cache_key_prefix=CachePrefixes.BUCKETED_FACILITATORS_STATISTICS,
    tags=[CacheTags.FACILITATORS_STATISTICS],
)
