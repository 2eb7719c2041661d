from typing import Any

from facilitator_analytics.cache import create_cached_paginated_query
from facilitator_analytics.constants import CachePrefixes, CacheTags
from facilitator_analytics.models import ListTopSellersInput, PaginatedResponse, PaginationInput, parse_input
from facilitator_analytics.storage import client_context
from facilitator_analytics.storage.repositories import SellerRepository
from facilitator_analytics.utils.pagination import to_paginated_response


def _list_top_sellers_uncached(query_input: Any, pagination: Any = None) -> PaginatedResponse:
    params = parse_input(ListTopSellersInput, query_input)
    page = parse_input(PaginationInput, pagination)

    with client_context() as client:
        rows = SellerRepository(client).get_top_sellers(
            tokens=params.tokens,
            facilitators=params.facilitators,
            sort_id=params.sorting.id,
            desc=params.sorting.desc,
            limit=page.limit,
            offset=page.cursor,
            recipients=params.addresses,
            start_date=params.start_date,
            end_date=params.end_date,
        )

    return to_paginated_response(rows, limit=page.limit, cursor=page.cursor)


list_top_sellers = create_cached_paginated_query(
    _list_top_sellers_uncached,
    cache_key_prefix=CachePrefixes.SELLERS_LIST,
    tags=[CacheTags.SELLERS],
)
