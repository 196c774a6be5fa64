"""
Selezione delle prenotazioni per periodo.

Il filtro lavora sulla data di arrivo o sulla data di prenotazione (filter_type)
e supporta due modalità:
  - intervallo: [inizio giorno start, fine giorno end], estremi inclusi
  - anno solare: tutte le prenotazioni con la data nell'anno indicato
La ricerca per struttura (sottostringa, senza distinzione maiuscole) si somma
sempre al filtro per data.

Prenotazioni con la data scelta mancante o non valida non compaiono mai
nei risultati.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Tuple

from config import FILTER_ARRIVAL, FILTER_BOOKING, FILTER_TYPES
from core.models import Booking
from core.normalizers import parse_iso_date

logger = logging.getLogger(__name__)


@dataclass
class FilterCriteria:
    """Parametri del filtro scelti dall'utente."""
    filter_type: str = FILTER_BOOKING
    start: Optional[date] = None
    end: Optional[date] = None
    year: Optional[int] = None
    search: str = ""
    compare: bool = False
    comparison_year: Optional[int] = None
    comparison_start: Optional[date] = None
    comparison_end: Optional[date] = None


@dataclass
class Selection:
    """
    Prenotazioni selezionate. `comparison` è None se il confronto è spento,
    lista (anche vuota) se è attivo. Le finestre servono per l'occupazione.
    """
    current: List[Booking]
    window: Optional[Tuple[date, date]] = None
    comparison: Optional[List[Booking]] = None
    comparison_window: Optional[Tuple[date, date]] = None


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _check_filter_type(filter_type: str) -> None:
    if filter_type not in FILTER_TYPES:
        raise ValueError(f"Tipo filtro non valido: {filter_type!r}")


def selected_date(booking: Booking, filter_type: str) -> Optional[date]:
    """Data su cui filtrare (arrivo o prenotazione); None se non valida."""
    raw = booking.arrival_date if filter_type == FILTER_ARRIVAL else booking.booking_date
    return parse_iso_date(raw)


def matches_search(booking: Booking, search: str) -> bool:
    search = (search or "").strip().lower()
    if not search:
        return True
    return search in booking.accommodation.lower()


def year_window(year: int) -> Tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def filter_by_range(
    bookings: List[Booking],
    filter_type: str,
    start,
    end,
    search: str = "",
) -> List[Booking]:
    """Prenotazioni con la data scelta tra start ed end (giorni interi, inclusi)."""
    _check_filter_type(filter_type)
    start, end = _as_date(start), _as_date(end)
    out = []
    invalid = 0
    for b in bookings:
        if not matches_search(b, search):
            continue
        d = selected_date(b, filter_type)
        if d is None:
            invalid += 1
        elif start <= d <= end:
            out.append(b)
    if invalid:
        logger.warning("%d prenotazioni escluse per data non valida (%s)", invalid, filter_type)
    return out


def filter_by_year(
    bookings: List[Booking],
    filter_type: str,
    year: int,
    search: str = "",
) -> List[Booking]:
    """Prenotazioni con la data scelta nell'anno solare indicato."""
    start, end = year_window(year)
    return filter_by_range(bookings, filter_type, start, end, search)


def select_bookings(bookings: List[Booking], criteria: FilterCriteria) -> Selection:
    """
    Applica il filtro principale e, se il confronto è attivo, quello di confronto.

    Modalità anno: criteria.year (e comparison_year per il confronto).
    Modalità intervallo: criteria.start/end (e comparison_start/end).
    """
    if criteria.year is not None:
        window = year_window(criteria.year)
    elif criteria.start is not None and criteria.end is not None:
        window = (_as_date(criteria.start), _as_date(criteria.end))
    else:
        raise ValueError("Indicare un anno oppure un intervallo di date")

    current = filter_by_range(bookings, criteria.filter_type, window[0], window[1], criteria.search)
    if not criteria.compare:
        return Selection(current=current, window=window)

    if criteria.comparison_year is not None:
        comparison_window = year_window(criteria.comparison_year)
    elif criteria.comparison_start is not None and criteria.comparison_end is not None:
        comparison_window = (_as_date(criteria.comparison_start), _as_date(criteria.comparison_end))
    else:
        raise ValueError("Confronto attivo: indicare anno o intervallo di confronto")

    comparison = filter_by_range(
        bookings, criteria.filter_type, comparison_window[0], comparison_window[1], criteria.search
    )
    return Selection(
        current=current,
        window=window,
        comparison=comparison,
        comparison_window=comparison_window,
    )


def date_bounds(bookings: List[Booking]) -> Optional[Tuple[date, date]]:
    """Prima e ultima data di arrivo valida (per i selettori di date)."""
    dates = [d for d in (parse_iso_date(b.arrival_date) for b in bookings) if d is not None]
    if not dates:
        return None
    return min(dates), max(dates)
