import pytest
from pydantic import ValidationError

from services.feed.QueryBuilder import QueryBuilder
from services.feed.models.Cursor import PAGE_SIZE, PageCursor
from shared.clients.catalog.models.Query import DocumentQuery, SortOrder


def test_first_page_without_filters_omits_optional_params():
    request = QueryBuilder().build_query(PageCursor(), None, None, [])

    assert request.offset == 0
    assert request.count == PAGE_SIZE
    assert request.to_params() == {"count": 10, "offset": 0}


def test_offset_follows_the_cursor():
    request = QueryBuilder().build_query(PageCursor(page=2), None, None, [])
    assert request.offset == 20
    assert request.count == 10


def test_removed_documents_move_the_offset_back():
    request = QueryBuilder().build_query(PageCursor(page=2), None, None, [], removed=3)
    assert request.offset == 17
    assert request.count == 10

    assert QueryBuilder().build_query(PageCursor(), None, None, [], removed=4).offset == 0


def test_filters_are_comma_joined_and_deduplicated():
    request = QueryBuilder().build_query(PageCursor(), None, None, [3, 7, 3])

    assert request.tags == [3, 7]
    assert request.to_params()["tag"] == "3,7"


def test_order_and_query_are_sent():
    request = QueryBuilder().build_query(PageCursor(), SortOrder.EXTRACTED_DATE, "  invoice ", [])

    params = request.to_params()
    assert params["order"] == 1
    assert params["query"] == "invoice"


@pytest.mark.parametrize("query", ["", "   ", None])
def test_blank_query_is_omitted(query):
    request = QueryBuilder().build_query(PageCursor(), SortOrder.IMPORTED_DATE, query, [])

    assert request.query is None
    assert "query" not in request.to_params()
    assert request.to_params()["order"] == 0


def test_cursor_advance_is_immutable():
    cursor = PageCursor()
    following = cursor.advance()

    assert cursor.page == 0
    assert following.page == 1
    assert following.offset == PAGE_SIZE


def test_invalid_request_values_are_rejected():
    with pytest.raises(ValidationError):
        DocumentQuery(offset=-1, count=10)
    with pytest.raises(ValidationError):
        DocumentQuery(offset=0, count=0)
    with pytest.raises(ValidationError):
        PageCursor(page=-1)
