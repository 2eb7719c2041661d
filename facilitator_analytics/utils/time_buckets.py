from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, NamedTuple

from facilitator_analytics.models.outputs import (
    BucketStatistics,
    FacilitatorBucket,
    FacilitatorBucketRow,
    TransferStatistics,
)
from facilitator_analytics.utils import to_utc

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)


class BucketGeometry(NamedTuple):
    bucket_size_seconds: int
    first_bucket_start: int
    num_buckets: int

    def bucket_starts(self) -> List[datetime]:
        return [
            EPOCH + timedelta(seconds=self.first_bucket_start + i * self.bucket_size_seconds)
            for i in range(self.num_buckets)
        ]


def _epoch_millis(dt: datetime) -> int:
    return (to_utc(dt) - EPOCH) // _MILLISECOND


def compute_bucket_geometry(start_date: datetime, end_date: datetime, num_buckets: int) -> BucketGeometry:
    """
    Split [start_date, end_date] into `num_buckets` equal buckets of whole seconds.

    The bucket size is floored to a whole second (at least one) and the first
    bucket is aligned down to a multiple of the size, matching the
    `intDiv(ts, size) * size` grouping used in SQL.
    """
    if num_buckets < 1:
        raise ValueError("num_buckets must be at least 1")

    range_ms = _epoch_millis(end_date) - _epoch_millis(start_date)
    bucket_size_ms = range_ms // num_buckets
    bucket_size_seconds = max(1, bucket_size_ms // 1000)

    start_seconds = _epoch_millis(start_date) // 1000
    first_bucket_start = (start_seconds // bucket_size_seconds) * bucket_size_seconds

    return BucketGeometry(bucket_size_seconds, first_bucket_start, num_buckets)


def fill_time_series(rows: Iterable[BucketStatistics], geometry: BucketGeometry) -> List[BucketStatistics]:
    """
    Return exactly one entry per bucket of `geometry`, zero-filled where no
    row matches the bucket start. Rows outside the generated buckets are dropped.
    """
    by_start = {to_utc(row.bucket_start): row for row in rows}

    series = []
    for bucket_start in geometry.bucket_starts():
        existing = by_start.get(bucket_start)
        if existing is not None:
            series.append(existing)
        else:
            series.append(BucketStatistics(bucket_start=bucket_start))
    return series


def group_by_bucket(rows: Iterable[FacilitatorBucketRow]) -> List[FacilitatorBucket]:
    """Collapse per-facilitator rows into one entry per bucket, keyed by facilitator name."""
    buckets: Dict[datetime, FacilitatorBucket] = {}

    for row in rows:
        bucket_start = to_utc(row.bucket_start)
        bucket = buckets.get(bucket_start)
        if bucket is None:
            bucket = FacilitatorBucket(bucket_start=bucket_start)
            buckets[bucket_start] = bucket

        bucket.facilitators[row.facilitator_name] = TransferStatistics(
            total_transactions=row.total_transactions,
            total_amount=row.total_amount,
            unique_buyers=row.unique_buyers,
            unique_sellers=row.unique_sellers,
        )

    return list(buckets.values())
