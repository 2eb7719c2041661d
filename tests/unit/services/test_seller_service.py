from datetime import datetime

import pytest

from facilitator_analytics.exceptions import InvalidInputError
from facilitator_analytics.services import list_top_sellers

SORT_BY_VOLUME = {"sorting": {"id": "total_amount"}}


def seller_row(i):
    return {
        'recipient': "0x" + f"{i:040x}", 'facilitators': ["0x" + "a" * 40], 'tx_count': 10 - i,
        'total_amount': 1000 - i, 'latest_block_timestamp': datetime(2025, 1, 1), 'unique_buyers': 1,
    }


def test_full_page_reports_next_cursor(fake_client):
    fake_client.add_response([seller_row(i) for i in range(3)])

    page = list_top_sellers(SORT_BY_VOLUME, {"limit": 2})

    assert [s.recipient for s in page.items] == [seller_row(0)['recipient'], seller_row(1)['recipient']]
    assert page.has_next_page is True
    assert page.next_cursor == 2
    assert fake_client.last_parameters['limit'] == 3
    assert fake_client.last_parameters['offset'] == 0
    assert "ORDER BY total_amount DESC, recipient ASC" in fake_client.last_query


def test_cursor_becomes_the_query_offset(fake_client):
    fake_client.add_response([seller_row(0)])

    page = list_top_sellers(SORT_BY_VOLUME, {"limit": 2, "cursor": 4})

    assert fake_client.last_parameters['offset'] == 4
    assert page.cursor == 4
    assert page.has_next_page is False
    assert page.next_cursor is None


def test_each_page_is_cached_on_its_own(fake_client):
    list_top_sellers(SORT_BY_VOLUME, {"limit": 2, "cursor": 0})
    list_top_sellers(SORT_BY_VOLUME, {"limit": 2, "cursor": 2})
    list_top_sellers(SORT_BY_VOLUME, {"limit": 2, "cursor": 0})

    assert len(fake_client.calls) == 2


def test_default_pagination(fake_client):
    page = list_top_sellers(SORT_BY_VOLUME)

    assert page.limit == 100
    assert page.items == []
    assert fake_client.last_parameters['limit'] == 101


def test_missing_sorting_is_rejected(fake_client):
    with pytest.raises(InvalidInputError):
        list_top_sellers({})

    assert fake_client.calls == []


def test_keyword_arguments_are_accepted(fake_client):
    page = list_top_sellers(query_input=SORT_BY_VOLUME, pagination={"limit": 3})
    again = list_top_sellers(SORT_BY_VOLUME, {"limit": 3})

    assert page.limit == again.limit == 3
    assert len(fake_client.calls) == 1
