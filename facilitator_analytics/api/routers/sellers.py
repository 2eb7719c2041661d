from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Query

from facilitator_analytics.api.routes import build_input, run_query
from facilitator_analytics.constants import DEFAULT_LIST_LIMIT, MAX_PAGE_LIMIT, SellerSortIds
from facilitator_analytics.models import PaginatedResponse, SellerSummary
from facilitator_analytics.services import list_top_sellers

router = APIRouter(tags=["sellers"])


@router.get("/sellers", response_model=PaginatedResponse[SellerSummary])
def top_sellers(
    tokens: Optional[List[str]] = Query(None),
    facilitators: Optional[List[str]] = Query(None),
    addresses: Optional[List[str]] = Query(None, description="Restrict to these recipients"),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    sort_by: str = Query(SellerSortIds.TX_COUNT, description="Sort column"),
    desc: bool = Query(True),
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    cursor: int = Query(0, ge=0, description="Offset returned as next_cursor by the previous page"),
):
    """
    Recipients ranked by the chosen column.

    Pages are offset-based: pass the previous response's `next_cursor` to
    continue. `has_next_page` is false on the last page.
    """
    query_input = build_input(
        tokens=tokens, facilitators=facilitators, addresses=addresses,
        start_date=start_date, end_date=end_date,
        sorting={"id": sort_by, "desc": desc}
    )
    pagination = {"limit": limit, "cursor": cursor}
    return run_query("top sellers", list_top_sellers, query_input, pagination)
