from facilitator_analytics.utils.pagination import to_paginated_response


def test_extra_row_signals_next_page_and_is_trimmed():
    page = to_paginated_response(list(range(11)), limit=10)

    assert page.items == list(range(10))
    assert page.has_next_page is True
    assert page.next_cursor == 10


def test_last_page_has_no_cursor():
    page = to_paginated_response(list(range(4)), limit=10, cursor=20)

    assert page.items == list(range(4))
    assert page.has_next_page is False
    assert page.next_cursor is None
    assert page.cursor == 20


def test_next_cursor_advances_from_current_offset():
    page = to_paginated_response(list(range(3)), limit=2, cursor=6)

    assert page.next_cursor == 8


def test_empty_result():
    page = to_paginated_response([], limit=5)

    assert page.items == []
    assert page.has_next_page is False
