TRANSFER_EVENT_SIGNATURE = "Transfer(address,address,uint256)"

# USDC on Base
USDC_ADDRESS = "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"

# Raw token units; bucketed series only count transfers below this value.
MAX_BUCKETED_TRANSFER_VALUE = 1_000_000_000

DEFAULT_NUM_BUCKETS = 48
DEFAULT_LOOKBACK_MONTHS = 1
DEFAULT_LIST_LIMIT = 100
MAX_PAGE_LIMIT = 1000

UNKNOWN_FACILITATOR = "Unknown"

DEFAULT_EVENTS_TABLE = "base.events"


class FacilitatorSortIds:
    TX_COUNT = "tx_count"
    TOTAL_AMOUNT = "total_amount"
    LATEST_BLOCK_TIMESTAMP = "latest_block_timestamp"
    UNIQUE_BUYERS = "unique_buyers"
    UNIQUE_SELLERS = "unique_sellers"


class SellerSortIds:
    TX_COUNT = "tx_count"
    TOTAL_AMOUNT = "total_amount"
    LATEST_BLOCK_TIMESTAMP = "latest_block_timestamp"
    UNIQUE_BUYERS = "unique_buyers"


class CacheTags:
    STATISTICS = "statistics"
    FACILITATORS_STATISTICS = "facilitators-statistics"
    FACILITATORS = "facilitators"
    SELLERS = "sellers"


class CachePrefixes:
    OVERALL_STATISTICS = "overall-statistics"
    BUCKETED_STATISTICS = "bucketed-statistics"
    BUCKETED_FACILITATORS_STATISTICS = "bucketed-facilitators-statistics"
    FACILITATORS_LIST = "facilitators-list"
    SELLERS_LIST = "sellers-list"
