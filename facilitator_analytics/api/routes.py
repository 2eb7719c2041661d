from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from loguru import logger
from pydantic import BaseModel, Field

from facilitator_analytics import generate_correlation_id, get_correlation_id, set_correlation_id
from facilitator_analytics.cache import revalidate_tag
from facilitator_analytics.constants import DEFAULT_NUM_BUCKETS, CacheTags
from facilitator_analytics.exceptions import InvalidInputError
from facilitator_analytics.models import BucketStatistics, OverallStatistics
from facilitator_analytics.services import get_bucketed_statistics, get_overall_statistics

router = APIRouter()


def build_input(**values: Any) -> Dict[str, Any]:
    """Drop unset query parameters so schema defaults apply."""
    return {key: value for key, value in values.items() if value is not None}


def run_query(name: str, query: Callable, *args):
    """Run a service call for a request, mapping validation failures to 400 and the rest to 500."""
    correlation_id = get_correlation_id() or generate_correlation_id()
    set_correlation_id(correlation_id)
    with logger.contextualize(correlation_id=correlation_id):
        try:
            return query(*args)
        except InvalidInputError as e:
            logger.warning(f"Rejected {name} request: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to compute {name}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        finally:
            set_correlation_id(None)


@router.get("/stats/overall", response_model=OverallStatistics)
def overall_statistics(
    tokens: Optional[List[str]] = Query(None, description="Token contract addresses"),
    facilitators: Optional[List[str]] = Query(None, description="Facilitator (transaction sender) addresses"),
    addresses: Optional[List[str]] = Query(None, description="Restrict to these recipients"),
    start_date: Optional[datetime] = Query(None, description="Inclusive lower bound on block time"),
    end_date: Optional[datetime] = Query(None, description="Inclusive upper bound on block time"),
):
    """Totals over the whole range: transactions, volume, unique buyers and sellers."""
    query_input = build_input(
        tokens=tokens, facilitators=facilitators, addresses=addresses,
        start_date=start_date, end_date=end_date
    )
    return run_query("overall statistics", get_overall_statistics, query_input)


@router.get("/stats/bucketed", response_model=List[BucketStatistics])
def bucketed_statistics(
    tokens: Optional[List[str]] = Query(None),
    facilitators: Optional[List[str]] = Query(None),
    addresses: Optional[List[str]] = Query(None),
    start_date: Optional[datetime] = Query(None, description="Defaults to one month ago"),
    end_date: Optional[datetime] = Query(None, description="Defaults to now"),
    num_buckets: int = Query(DEFAULT_NUM_BUCKETS, ge=1),
):
    """Zero-filled time series with exactly `num_buckets` entries."""
    query_input = build_input(
        tokens=tokens, facilitators=facilitators, addresses=addresses,
        start_date=start_date, end_date=end_date, num_buckets=num_buckets
    )
    return run_query("bucketed statistics", get_bucketed_statistics, query_input)


class RevalidateRequest(BaseModel):
    tag: str = Field(..., description="Cache tag to drop", examples=[CacheTags.STATISTICS])


@router.post("/cache/revalidate")
def revalidate_cache(request: RevalidateRequest):
    cleared = revalidate_tag(request.tag)
    return {"tag": request.tag, "queries_cleared": cleared}
