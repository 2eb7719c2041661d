from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Query

from facilitator_analytics.api.routes import build_input, run_query
from facilitator_analytics.constants import DEFAULT_LIST_LIMIT, DEFAULT_NUM_BUCKETS, FacilitatorSortIds
from facilitator_analytics.models import FacilitatorBucket, FacilitatorSummary
from facilitator_analytics.services import get_bucketed_facilitators_statistics, list_top_facilitators

router = APIRouter(tags=["facilitators"])


@router.get("/facilitators", response_model=List[FacilitatorSummary])
def top_facilitators(
    tokens: Optional[List[str]] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1),
    sort_by: str = Query(FacilitatorSortIds.TX_COUNT, description="Sort column"),
    desc: bool = Query(True),
):
    query_input = build_input(
        tokens=tokens, start_date=start_date, end_date=end_date, limit=limit,
        sorting={"id": sort_by, "desc": desc}
    )
    return run_query("top facilitators", list_top_facilitators, query_input)


@router.get("/facilitators/bucketed", response_model=List[FacilitatorBucket])
def bucketed_facilitators_statistics(
    tokens: Optional[List[str]] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    num_buckets: int = Query(DEFAULT_NUM_BUCKETS, ge=1),
):
    """Per-bucket statistics keyed by facilitator name; buckets without activity are omitted."""
    query_input = build_input(
        tokens=tokens, start_date=start_date, end_date=end_date, num_buckets=num_buckets
    )
    return run_query("bucketed facilitator statistics", get_bucketed_facilitators_statistics, query_input)
