"""
Mappa una riga del file esportato (dict intestazione → valore) in un Booking.

Regole:
  - le intestazioni alternative vengono ricondotte a quelle canoniche (HEADER_ALIASES)
  - una riga senza Buchungsnummer e senza Anreisedatum viene scartata
  - i campi derivati (notti, bambini, cancellazione, telefonica, % provvigione)
    vengono calcolati dai campi sorgente invece di fidarsi del valore grezzo
  - un errore su una riga scarta solo quella riga
"""

import logging
from typing import Dict, Iterable, List, Optional

from config import FIELD_HEADERS, HEADER_ALIASES, PHONE_BOOKING_CODES, UNSPECIFIED
from core.models import Booking
from core.normalizers import (
    clean_text,
    parse_german_date,
    parse_iso_date,
    to_amount,
    to_int,
    to_percent,
)

logger = logging.getLogger(__name__)


def canonical_header(header) -> str:
    """Intestazione colonna → nome canonico (alias risolti, spazi e BOM rimossi)."""
    name = clean_text(header).lstrip("\ufeff").strip()
    return HEADER_ALIASES.get(name, name)


def canonicalize_row(row: Dict) -> Dict[str, object]:
    """
    Applica gli alias alle chiavi della riga.
    Se due intestazioni finiscono sullo stesso nome vince il primo valore non vuoto.
    """
    out: Dict[str, object] = {}
    for header, value in row.items():
        name = canonical_header(header)
        if name not in out or not clean_text(out[name]):
            out[name] = value
    return out


def _field(row: Dict, key: str) -> str:
    return clean_text(row.get(FIELD_HEADERS[key]))


def count_children(ages: str) -> int:
    """Numero bambini ricavato dalle età indicate: "5,7,9" → 3, "" → 0."""
    ages = clean_text(ages)
    if not ages:
        return 0
    return ages.count(",") + 1


def stay_nights(arrival: str, departure: str) -> Optional[int]:
    """Notti tra due date canoniche (minimo 0); None se una delle date non è valida."""
    start = parse_iso_date(arrival)
    end = parse_iso_date(departure)
    if start is None or end is None:
        return None
    return max(0, (end - start).days)


def phone_booking_for(voucher_code: str) -> str:
    return PHONE_BOOKING_CODES.get(clean_text(voucher_code), "")


def commission_percent_for(raw_percent: str, commission: float, revenue: float) -> float:
    """% provvigione dal file se presente, altrimenti provvigione / prezzo * 100."""
    if raw_percent:
        percent = to_percent(raw_percent)
    elif commission > 0 and revenue > 0:
        percent = commission / revenue * 100
    else:
        percent = 0.0
    return round(percent, 2)


def is_admissible(row: Dict) -> bool:
    """Requisito minimo: Buchungsnummer oppure Anreisedatum presente."""
    return bool(_field(row, "booking_code") or _field(row, "arrival_date"))


def map_row(row: Dict) -> Optional[Booking]:
    """
    Converte una riga in Booking. Restituisce None se la riga non supera il
    requisito minimo. Righe strutturalmente rotte possono sollevare eccezioni:
    usare try_map_row nel ciclo di importazione.
    """
    row = canonicalize_row(row)
    if not is_admissible(row):
        return None

    arrival = parse_german_date(row.get(FIELD_HEADERS["arrival_date"]))
    departure = parse_german_date(row.get(FIELD_HEADERS["departure_date"]))
    revenue = to_amount(row.get(FIELD_HEADERS["revenue"]))
    commission = to_amount(row.get(FIELD_HEADERS["commission"]))

    nights = stay_nights(arrival, departure)
    if nights is None:
        nights = max(0, to_int(row.get(FIELD_HEADERS["nights"])))

    return Booking(
        booking_code=_field(row, "booking_code"),
        booking_date=parse_german_date(row.get(FIELD_HEADERS["booking_date"])),
        booking_time=_field(row, "booking_time"),
        arrival_date=arrival,
        departure_date=departure,
        accommodation=_field(row, "accommodation"),
        apartment_type=_field(row, "apartment_type") or UNSPECIFIED,
        revenue=revenue,
        commission=commission,
        commission_percent=commission_percent_for(
            _field(row, "commission_percent"), commission, revenue
        ),
        nights=nights,
        customer_zip=_field(row, "customer_zip"),
        customer_city=_field(row, "customer_city"),
        adults=max(0, to_int(row.get(FIELD_HEADERS["adults"]))),
        children=count_children(row.get(FIELD_HEADERS["children_ages"])),
        pets=max(0, to_int(row.get(FIELD_HEADERS["pets"]))),
        booking_source=_field(row, "booking_source"),
        is_cancelled=revenue < 0,
        phone_booking=phone_booking_for(row.get(FIELD_HEADERS["voucher_code"])),
    )


def try_map_row(row) -> Optional[Booking]:
    """Come map_row, ma un errore scarta la riga invece di interrompere l'importazione."""
    try:
        return map_row(row)
    except Exception as e:
        logger.warning("Riga scartata (%s): %r", e, row)
        return None


def map_rows(rows: Iterable[Dict]) -> List[Booking]:
    """Mappa tutte le righe mantenendo l'ordine; le righe scartate vengono saltate."""
    bookings = []
    for row in rows:
        booking = try_map_row(row)
        if booking is not None:
            bookings.append(booking)
    return bookings
