import pytest

from config import FILTER_ARRIVAL, FILTER_BOOKING
from conftest import make_booking
from reports.timeseries import (
    booking_hour_distribution,
    booking_month_by_arrival_month,
    daily_totals,
    month_of_year_comparison,
    month_of_year_totals,
    monthly_revenue_per_night_by_source,
    monthly_totals,
    postal_region_distribution,
    series_for,
)


def _bookings():
    return [
        make_booking(booking_date="2024-03-02", arrival_date="2024-07-01",
                     departure_date="2024-07-05", revenue=400.0, commission=40.0),
        make_booking(booking_date="2024-03-02", arrival_date="2024-08-01",
                     departure_date="2024-08-03", revenue=200.0, commission=20.0),
        make_booking(booking_date="2024-01-15", arrival_date="2024-07-10",
                     departure_date="2024-07-12", revenue=100.0, commission=10.0),
        make_booking(booking_date="", arrival_date="", departure_date=""),
    ]


def test_daily_totals_are_sparse_and_chronological() -> None:
    days = daily_totals(_bookings(), FILTER_BOOKING)
    assert [d.period for d in days] == ["2024-01-15", "2024-03-02"]
    assert days[1].bookings == 2
    assert days[1].revenue == pytest.approx(600.0)
    assert days[1].commission == pytest.approx(60.0)


def test_monthly_totals_by_arrival() -> None:
    months = monthly_totals(_bookings(), FILTER_ARRIVAL)
    assert [(m.period, m.bookings) for m in months] == [("2024-07", 2), ("2024-08", 1)]


def test_empty_series() -> None:
    assert daily_totals([]) == []
    assert monthly_totals([]) == []


def test_month_of_year_totals_fill_all_months() -> None:
    months = month_of_year_totals(_bookings(), FILTER_ARRIVAL)
    assert [m.month for m in months] == list(range(1, 13))
    assert months[6].bookings == 2
    assert months[6].nights == 6
    assert months[0].bookings == 0
    assert months[0].revenue == 0.0


def test_month_of_year_totals_empty() -> None:
    months = month_of_year_totals([])
    assert len(months) == 12
    assert all(m.bookings == 0 for m in months)


def test_month_of_year_comparison() -> None:
    previous = [make_booking(booking_date="2023-03-20", revenue=50.0)]
    months = month_of_year_comparison(_bookings(), previous, FILTER_BOOKING)
    march = months[2]
    assert march.current.bookings == 2
    assert march.comparison.bookings == 1
    assert march.delta["revenue"] == pytest.approx(550.0)


def test_booking_hour_distribution() -> None:
    bookings = [
        make_booking(booking_time="9:05:00"),
        make_booking(booking_time="09:45:10"),
        make_booking(booking_time="23:59:59"),
        make_booking(booking_time=""),
        make_booking(booking_time="25:00:00"),
    ]
    hours = booking_hour_distribution(bookings)
    assert len(hours) == 24
    assert hours[9] == 2
    assert hours[23] == 1
    assert sum(hours) == 3


def test_postal_regions() -> None:
    bookings = [make_booking(customer_zip="80331"), make_booking(customer_zip="81541"),
                make_booking(customer_zip="10115"), make_booking(customer_zip=""),
                make_booking(customer_zip="A-1010")]
    previous = [make_booking(customer_zip="20095")]
    regions = {r.region: r for r in postal_region_distribution(bookings, previous)}
    assert len(regions) == 10
    assert regions["8"].current == 2
    assert regions["1"].current == 1
    assert regions["2"].comparison == 1
    assert regions["0"].current == 0


def test_revenue_per_night_by_source() -> None:
    bookings = _bookings() + [make_booking(booking_source="Airbnb", arrival_date="2024-07-01",
                                           departure_date="2024-07-03", revenue=300.0)]
    table = monthly_revenue_per_night_by_source(bookings)
    assert list(table) == ["Airbnb", "Booking.com"]
    assert table["Airbnb"][6] == pytest.approx(150.0)
    # luglio: (400 + 100) / (4 + 2) notti
    assert table["Booking.com"][6] == pytest.approx(500 / 6)
    assert table["Booking.com"][0] == 0.0


def test_booking_month_by_arrival_month() -> None:
    result = booking_month_by_arrival_month(_bookings())
    matrix = result.current
    assert len(matrix) == 12 and all(len(row) == 12 for row in matrix)
    assert matrix[2][6] == 1
    assert matrix[2][7] == 1
    assert matrix[0][6] == 1
    assert sum(map(sum, matrix)) == 3
    assert result.current_totals[2] == 2
    assert result.current_totals[0] == 1
    assert result.comparison is None
    assert result.comparison_totals is None


def test_booking_month_by_arrival_month_with_comparison() -> None:
    previous = [
        make_booking(booking_date="2023-03-01", arrival_date="2023-07-01"),
        make_booking(booking_date="2023-03-09", arrival_date="2023-09-01"),
        make_booking(booking_date="2023-11-20", arrival_date="2024-01-05"),
    ]
    result = booking_month_by_arrival_month(_bookings(), previous)
    assert result.comparison[2][6] == 1
    assert result.comparison[2][8] == 1
    assert result.comparison[10][0] == 1
    assert result.comparison_totals[2] == 2
    assert result.current_totals[2] == 2


def test_booking_month_by_arrival_month_empty_comparison() -> None:
    result = booking_month_by_arrival_month(_bookings(), [])
    assert result.comparison == [[0] * 12 for _ in range(12)]
    assert result.comparison_totals == [0] * 12


def test_series_label() -> None:
    assert series_for(FILTER_ARRIVAL) == "Anreisedatum"
    assert series_for(FILTER_BOOKING) == "Buchungsdatum"
