import pytest

from config import UNSPECIFIED
from conftest import make_booking
from reports.sources import source_distribution


def test_distribution_sorted_by_bookings() -> None:
    bookings = [
        make_booking(booking_source="Airbnb", revenue=100.0),
        make_booking(booking_source="Booking.com", revenue=200.0),
        make_booking(booking_source="Booking.com", revenue=300.0),
        make_booking(booking_source="  ", revenue=50.0),
    ]
    shares = source_distribution(bookings)
    # a parità di prenotazioni decide il nome
    assert [s.source for s in shares] == ["Booking.com", UNSPECIFIED, "Airbnb"]
    assert shares[0].bookings == 2
    assert shares[0].percentage == pytest.approx(50.0)
    assert shares[0].revenue == pytest.approx(500.0)
    assert shares[0].delta is None
    assert sum(s.percentage for s in shares) == pytest.approx(100.0)


def test_empty_input() -> None:
    assert source_distribution([]) == []


def test_comparison_merges_sources_from_both_periods() -> None:
    current = [make_booking(booking_source="Airbnb", revenue=100.0)]
    previous = [
        make_booking(booking_source="Airbnb", revenue=40.0),
        make_booking(booking_source="Fewo-direkt", revenue=60.0),
    ]
    shares = {s.source: s for s in source_distribution(current, previous)}
    assert shares["Airbnb"].delta["revenue"] == pytest.approx(60.0)
    assert shares["Airbnb"].delta["percentage"] == pytest.approx(50.0)
    assert shares["Fewo-direkt"].bookings == 0
    assert shares["Fewo-direkt"].comparison_bookings == 1
    assert shares["Fewo-direkt"].delta["bookings"] == -1


def test_comparison_against_empty_period() -> None:
    shares = source_distribution([make_booking(booking_source="Airbnb")], [])
    assert shares[0].comparison_percentage == 0.0
    assert shares[0].delta["bookings"] == 1
