from datetime import date

import pytest

from conftest import make_row
from food_journal.core.exceptions import NoReviewsToExportError, NotFoundError
from food_journal.services.export_service import CSV_HEADERS, render_reviews_csv


def test_header_is_fixed():
    csv_text = render_reviews_csv([make_row()])
    header = csv_text.splitlines()[0]

    assert header == "Restaurant,City,Dish,Category,Would Order Again,Rating,Notes,Visited At,Created At"
    assert len(CSV_HEADERS) == 9


def test_quotes_are_doubled():
    csv_text = render_reviews_csv([make_row(notes='He said "wow"')])

    assert '"He said ""wow"""' in csv_text


def test_missing_fields_are_empty_quoted():
    row = make_row(
        restaurant_name="Lucali",
        city=None,
        dish_name="Calzone",
        category=None,
        would_order_again=False,
        rating=None,
        notes=None,
        visited_at=None,
    )
    line = render_reviews_csv([row]).splitlines()[1]

    assert line.startswith('"Lucali","","Calzone","","NO","","","",')
    assert "null" not in line
    assert "None" not in line


def test_values_and_order():
    first = make_row(dish_name="Slice", rating=5, visited_at=date(2024, 5, 30), minutes_ago=1)
    second = make_row(dish_name="Garlic Knots", minutes_ago=10)

    lines = render_reviews_csv([first, second]).splitlines()

    assert len(lines) == 3
    assert '"Slice"' in lines[1]
    assert '"YES","5"' in lines[1]
    assert '"2024-05-30"' in lines[1]
    assert '"Garlic Knots"' in lines[2]


def test_no_reviews_raises_not_found():
    with pytest.raises(NoReviewsToExportError) as exc_info:
        render_reviews_csv([])

    assert isinstance(exc_info.value, NotFoundError)
    assert str(exc_info.value) == "No reviews found"
