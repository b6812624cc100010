from datetime import date, datetime

import pytest

from helpdesk.core.exceptions import ValidationError
from helpdesk.utils.datetime import end_of_day, month_label, start_of_day, trailing_months_start
from helpdesk.utils.paging import page_offset, total_pages


@pytest.mark.parametrize(
    "total,limit,expected", [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (101, 100, 2)]
)
def test_total_pages_is_ceiling(total, limit, expected):
    assert total_pages(total, limit) == expected


def test_page_offset():
    assert page_offset(1, 10) == 0
    assert page_offset(3, 25) == 50


@pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (-1, 5)])
def test_page_offset_rejects_out_of_range(page, limit):
    with pytest.raises(ValidationError):
        page_offset(page, limit)


def test_day_bounds_cover_whole_day():
    d = date(2026, 2, 28)
    assert start_of_day(d) == datetime(2026, 2, 28, 0, 0)
    assert end_of_day(d) == datetime(2026, 2, 28, 23, 59, 59, 999999)
    assert start_of_day(None) is None and end_of_day(None) is None


def test_month_label_is_zero_padded():
    assert month_label(2026, 3) == "2026-03"


@pytest.mark.parametrize(
    "now,expected",
    [
        (datetime(2026, 10, 19, 12), datetime(2025, 11, 1)),
        (datetime(2026, 12, 31), datetime(2026, 1, 1)),
        (datetime(2026, 1, 1), datetime(2025, 2, 1)),
    ],
)
def test_trailing_twelve_months_start(now, expected):
    assert trailing_months_start(now, 12) == expected
