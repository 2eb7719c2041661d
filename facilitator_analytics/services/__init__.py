from facilitator_analytics.services.facilitator_service import (
    get_bucketed_facilitators_statistics,
    list_top_facilitators,
)
from facilitator_analytics.services.seller_service import list_top_sellers
from facilitator_analytics.services.statistics_service import get_bucketed_statistics, get_overall_statistics

__all__ = [
    'get_bucketed_facilitators_statistics',
    'get_bucketed_statistics',
    'get_overall_statistics',
    'list_top_facilitators',
    'list_top_sellers',
]
