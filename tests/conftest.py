from typing import List

import pytest

from core.models import Booking

HEADER = [
    "Buchungsnummer", "Buchungsdatum", "Uhrzeit der Buchung", "Anreisedatum",
    "Abreisedatum", "Objekt", "Wohnung", "Gesamtpreis", "Provision",
    "Provision in %", "Nächte", "PLZ Kunde", "Ort Kunde", "Erwachsene",
    "Alter der Kinder", "Haustiere", "Buchung über", "Gutscheincode",
]


def export_bytes(lines: List[List[str]], header: List[str] = HEADER) -> bytes:
    """File di esportazione come lo produce il gestionale (UTF-16LE con BOM, ';')."""
    text = "\n".join(";".join(line) for line in [header] + lines)
    return ("\ufeff" + text).encode("utf-16-le")


def export_line(**values: str) -> List[str]:
    """Riga nell'ordine di HEADER; i campi non indicati restano vuoti."""
    return [values.get(h, "") for h in HEADER]


def make_booking(**overrides) -> Booking:
    data = dict(
        booking_code="B-1",
        booking_date="2024-05-10",
        booking_time="10:15:00",
        arrival_date="2024-06-01",
        departure_date="2024-06-04",
        accommodation="Haus Seeblick",
        apartment_type="Fewo 1",
        revenue=300.0,
        commission=30.0,
        commission_percent=10.0,
        nights=3,
        adults=2,
        booking_source="Booking.com",
    )
    data.update(overrides)
    return Booking(**data)


@pytest.fixture
def booking_factory():
    return make_booking
