import pytest

from config import UNSPECIFIED
from parsers.row_mapper import (
    canonical_header,
    canonicalize_row,
    commission_percent_for,
    count_children,
    map_row,
    map_rows,
    phone_booking_for,
)


def _row(**values):
    row = {
        "Buchungsnummer": "4711",
        "Buchungsdatum": "10.05.2024",
        "Uhrzeit der Buchung": "9:05:00",
        "Anreisedatum": "01.06.2024",
        "Abreisedatum": "04.06.2024",
        "Objekt": "Haus Seeblick",
        "Wohnung": "Fewo 1",
        "Gesamtpreis": "1.234,56 €",
        "Provision": "123,46 €",
        "Erwachsene": "2",
    }
    row.update(values)
    return row


def test_map_row_normalizes_fields() -> None:
    booking = map_row(_row())
    assert booking.booking_code == "4711"
    assert booking.booking_date == "2024-05-10"
    assert booking.arrival_date == "2024-06-01"
    assert booking.departure_date == "2024-06-04"
    assert booking.revenue == pytest.approx(1234.56)
    assert booking.commission == pytest.approx(123.46)
    assert booking.adults == 2
    assert booking.is_cancelled is False


def test_row_without_code_and_arrival_is_rejected() -> None:
    assert map_row(_row(Buchungsnummer="", Anreisedatum="")) is None


def test_row_with_only_code_is_admitted() -> None:
    booking = map_row({"Buchungsnummer": "99"})
    assert booking is not None
    assert booking.arrival_date == ""
    assert booking.apartment_type == UNSPECIFIED


def test_row_with_only_arrival_is_admitted() -> None:
    booking = map_row({"Anreisedatum": "01.06.2024"})
    assert booking is not None
    assert booking.booking_code == ""


def test_nights_derived_from_dates_over_raw_field() -> None:
    assert map_row(_row(**{"Nächte": "7"})).nights == 3


def test_nights_fall_back_to_raw_field_without_dates() -> None:
    assert map_row(_row(Abreisedatum="", **{"Nächte": "5"})).nights == 5
    assert map_row(_row(Abreisedatum="", **{"Nächte": "-2"})).nights == 0


def test_departure_before_arrival_gives_zero_nights() -> None:
    assert map_row(_row(Abreisedatum="28.05.2024")).nights == 0


def test_count_children() -> None:
    assert count_children("5,7,9") == 3
    assert count_children("4") == 1
    assert count_children("") == 0
    assert count_children(None) == 0


def test_cancellation_only_for_negative_revenue() -> None:
    assert map_row(_row(Gesamtpreis="-100,00 €")).is_cancelled is True
    assert map_row(_row(Gesamtpreis="0,00 €")).is_cancelled is False
    assert map_row(_row(Gesamtpreis="")).is_cancelled is False


def test_phone_booking_codes() -> None:
    assert phone_booking_for("T Ma") == "Marquardt"
    assert phone_booking_for("T Ro") == "Rohde"
    assert phone_booking_for("SUMMER10") == ""
    assert map_row(_row(Gutscheincode="T Ro")).phone_booking == "Rohde"


def test_commission_percent_from_field_or_derived() -> None:
    assert commission_percent_for("12,5", 10.0, 100.0) == 12.5
    assert commission_percent_for("", 10.0, 30.0) == 33.33
    assert commission_percent_for("", 10.0, 0.0) == 0.0
    assert commission_percent_for("", 0.0, 100.0) == 0.0


def test_header_aliases() -> None:
    assert canonical_header("Datum") == "Buchungsdatum"
    assert canonical_header("\ufeffBuchungsnummer") == "Buchungsnummer"
    assert canonical_header("Extern") == "Buchung über"

    booking = map_row({
        "Buchungsnummer": "1",
        "Datum": "02.01.2024",
        "Extern": "Airbnb",
        "PLZ": "80331",
        "Kinderalter": "3,6",
        "Anzahl Haustiere gross": "1",
    })
    assert booking.booking_date == "2024-01-02"
    assert booking.booking_source == "Airbnb"
    assert booking.customer_zip == "80331"
    assert booking.children == 2
    assert booking.pets == 1


def test_duplicate_alias_keeps_first_non_empty_value() -> None:
    row = canonicalize_row({"Kinderalter": "", "Alter Kinder": "5,8"})
    assert row["Alter der Kinder"] == "5,8"


def test_broken_row_is_skipped_without_aborting() -> None:
    bookings = map_rows([_row(Buchungsnummer="1"), None, "kaputt", _row(Buchungsnummer="2")])
    assert [b.booking_code for b in bookings] == ["1", "2"]
