from typing import List, TypeVar

from facilitator_analytics.models.outputs import PaginatedResponse

ItemT = TypeVar('ItemT')


def to_paginated_response(items: List[ItemT], limit: int, cursor: int = 0) -> PaginatedResponse:
    """
    Build a page from a result fetched with `limit + 1` rows: the extra row
    only signals that a next page exists and is not returned.
    """
    has_next_page = len(items) > limit
    return PaginatedResponse(
        items=items[:limit],
        limit=limit,
        cursor=cursor,
        has_next_page=has_next_page,
        next_cursor=cursor + limit if has_next_page else None,
    )
