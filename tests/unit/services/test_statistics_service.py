from datetime import datetime, timedelta, timezone

import pytest
from clickhouse_connect.driver.exceptions import ClickHouseError

from facilitator_analytics.cache import revalidate_tag
from facilitator_analytics.constants import CacheTags
from facilitator_analytics.exceptions import InvalidInputError, QueryExecutionError
from facilitator_analytics.services import get_bucketed_statistics, get_overall_statistics

START = datetime(2025, 1, 1, tzinfo=timezone.utc)
END = datetime(2025, 1, 2, tzinfo=timezone.utc)


class TestOverallStatistics:

    def test_overall_statistics_returns_the_aggregate_row(self, fake_client):
        fake_client.add_response([{
            'total_transactions': 12, 'total_amount': 5_000_000, 'unique_buyers': 7, 'unique_sellers': 3,
            'latest_block_timestamp': datetime(2025, 1, 1, 23, 59),
        }])

        stats = get_overall_statistics({"start_date": START, "end_date": END})

        assert stats.total_transactions == 12
        assert stats.total_amount == 5_000_000
        assert stats.unique_buyers == 7
        assert stats.unique_sellers == 3
        assert stats.latest_block_timestamp == datetime(2025, 1, 1, 23, 59, tzinfo=timezone.utc)

    def test_overall_statistics_without_rows_are_zero(self, fake_client):
        before = datetime.now(timezone.utc)
        stats = get_overall_statistics()

        assert stats.total_transactions == 0
        assert stats.total_amount == 0
        assert stats.unique_buyers == 0 and stats.unique_sellers == 0
        assert stats.latest_block_timestamp >= before

    def test_recipient_filter_reaches_the_query(self, fake_client):
        recipient = "0x" + "E" * 40

        get_overall_statistics({"addresses": [recipient]})

        assert recipient.lower() in fake_client.last_parameters.values()

    def test_keyword_input_is_validated_and_cached(self, fake_client):
        stats = get_overall_statistics(query_input={"start_date": START, "end_date": END})
        get_overall_statistics({"start_date": START, "end_date": END})

        assert stats.total_transactions == 0
        assert len(fake_client.calls) == 1

        with pytest.raises(InvalidInputError):
            get_overall_statistics(query_input={"tokens": []})

    def test_invalid_input_fails_before_querying(self, fake_client):
        with pytest.raises(InvalidInputError):
            get_overall_statistics({"tokens": ["not-an-address"]})

        assert fake_client.calls == []


class TestStatisticsCaching:
    """Results are memoized per input until the statistics tag is revalidated."""

    def test_identical_inputs_are_served_from_cache(self, fake_client):
        get_overall_statistics({"start_date": START, "end_date": END})
        get_overall_statistics({"end_date": END, "start_date": START})

        assert len(fake_client.calls) == 1

    def test_cached_results_are_copies(self, fake_client):
        first = get_overall_statistics()
        first.total_transactions = 999

        assert get_overall_statistics().total_transactions == 0

    def test_revalidating_the_tag_forces_a_new_query(self, fake_client):
        get_overall_statistics()
        revalidate_tag(CacheTags.STATISTICS)
        get_overall_statistics()

        assert len(fake_client.calls) == 2

    def test_failed_queries_are_not_cached(self, fake_client):
        fake_client.add_error(ClickHouseError("connection reset"))

        with pytest.raises(QueryExecutionError):
            get_overall_statistics()

        get_overall_statistics()
        assert len(fake_client.calls) == 2


class TestBucketedStatistics:

    def test_bucketed_statistics_are_zero_filled(self, fake_client):
        fake_client.add_response([
            {'bucket_start': datetime(2025, 1, 1, 2, 0), 'total_transactions': 2, 'total_amount': 200,
             'unique_buyers': 2, 'unique_sellers': 1},
            {'bucket_start': datetime(2025, 1, 1, 10, 0), 'total_transactions': 1, 'total_amount': 100,
             'unique_buyers': 1, 'unique_sellers': 1},
        ])

        series = get_bucketed_statistics({"start_date": START, "end_date": END, "num_buckets": 24})

        assert len(series) == 24
        assert fake_client.last_parameters['bucket_size'] == 3600
        assert [b.bucket_start for b in series] == [START + timedelta(hours=i) for i in range(24)]
        assert series[2].total_transactions == 2
        assert series[10].total_amount == 100
        assert series[3].total_transactions == 0

    def test_bucketed_statistics_default_range(self, fake_client):
        series = get_bucketed_statistics()

        assert len(series) == 48
        assert all(b.total_transactions == 0 for b in series)
        assert 'start_date' in fake_client.last_parameters
        assert 'end_date' in fake_client.last_parameters

    def test_overall_and_bucketed_results_are_cached_separately(self, fake_client):
        query_input = {"start_date": START, "end_date": END}

        get_overall_statistics(query_input)
        get_bucketed_statistics(query_input)

        assert len(fake_client.calls) == 2
