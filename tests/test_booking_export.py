from pathlib import Path

import pytest

from conftest import HEADER, export_bytes, export_line
from core.errors import IngestionError
from parsers.booking_export import parse_booking_export, parse_booking_export_file


def _lines():
    return [
        export_line(Buchungsnummer="1", Anreisedatum="01.06.2024", Abreisedatum="04.06.2024",
                    Objekt="Haus Seeblick", Gesamtpreis="300,00 €"),
        export_line(Buchungsnummer="2", Anreisedatum="02.06.2024", Abreisedatum="03.06.2024",
                    Objekt="Villa Sonne", Gesamtpreis="-80,00 €"),
        export_line(Objekt="ohne Nummer und Anreise", Gesamtpreis="50,00"),
    ]


def test_parse_counts_accepted_and_rejected_rows() -> None:
    result = parse_booking_export(export_bytes(_lines()))
    assert result.total_rows == 3
    assert result.accepted == 2
    assert result.rejected == 1
    assert result.message == "2 von 3 Zeilen importiert"
    assert [b.booking_code for b in result.bookings] == ["1", "2"]
    assert result.bookings[1].is_cancelled is True


def test_parse_is_deterministic() -> None:
    data = export_bytes(_lines())
    assert parse_booking_export(data) == parse_booking_export(data)


def test_undecodable_file() -> None:
    with pytest.raises(IngestionError, match="Fehler beim Lesen der Datei") as exc:
        parse_booking_export(b"\x41\x00\x42")
    assert exc.value.kind == IngestionError.DECODE


def test_header_only_file_is_empty() -> None:
    with pytest.raises(IngestionError, match="Keine Daten") as exc:
        parse_booking_export(export_bytes([]))
    assert exc.value.kind == IngestionError.EMPTY


def test_blank_file_is_empty() -> None:
    with pytest.raises(IngestionError) as exc:
        parse_booking_export("\n\n".encode("utf-16-le"))
    assert exc.value.kind == IngestionError.EMPTY


def test_no_valid_rows() -> None:
    data = export_bytes([export_line(Objekt="A"), export_line(Objekt="B")])
    with pytest.raises(IngestionError, match="Keine gültigen Daten gefunden") as exc:
        parse_booking_export(data)
    assert exc.value.kind == IngestionError.NO_VALID_ROWS


def test_row_with_too_many_fields_is_rejected() -> None:
    long_line = export_line(Buchungsnummer="3", Anreisedatum="05.06.2024") + ["extra"]
    result = parse_booking_export(export_bytes(_lines()[:1] + [long_line]))
    assert result.total_rows == 2
    assert result.accepted == 1
    assert result.rejected == 1


def test_short_rows_are_padded() -> None:
    result = parse_booking_export(export_bytes([["7", "10.05.2024"]]))
    assert result.accepted == 1
    assert result.bookings[0].booking_code == "7"
    assert result.bookings[0].booking_date == "2024-05-10"
    assert result.bookings[0].accommodation == ""


def test_blank_lines_are_ignored() -> None:
    text = "\n".join([";".join(HEADER), "", ";".join(_lines()[0]), ";;;", ""])
    result = parse_booking_export(text.encode("utf-16-le"))
    assert result.total_rows == 1
    assert result.accepted == 1


def test_alias_headers_in_file() -> None:
    header = ["Buchungsnummer", "Datum", "Anreisedatum", "Extern", "PLZ"]
    data = export_bytes([["9", "01.02.2024", "03.03.2024", "Fewo-direkt", "20095"]], header=header)
    booking = parse_booking_export(data).bookings[0]
    assert booking.booking_date == "2024-02-01"
    assert booking.booking_source == "Fewo-direkt"
    assert booking.customer_zip == "20095"


def test_parse_from_file(tmp_path: Path) -> None:
    path = tmp_path / "export.csv"
    path.write_bytes(export_bytes(_lines()))
    assert parse_booking_export_file(str(path)).accepted == 2


def test_missing_file() -> None:
    with pytest.raises(IngestionError) as exc:
        parse_booking_export_file("/nicht/vorhanden.csv")
    assert exc.value.kind == IngestionError.DECODE
