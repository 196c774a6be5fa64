"""
Riepilogo per struttura (Objekt) con dettaglio per appartamento (Wohnung).

Per ogni struttura: prezzo, provvigione, prenotazioni, cancellazioni, notti
nella finestra del filtro, occupazione e prenotazioni per canale.

Notti nella finestra: il soggiorno viene tagliato ai bordi del periodo
(in modalità anno: all'anno solare), le cancellazioni contano 0.
Occupazione struttura = notti / (giorni periodo × numero appartamenti) × 100;
occupazione appartamento = notti / giorni periodo × 100.

Senza ricerca e senza filtro canale si tengono solo le prime
TOP_ACCOMMODATIONS strutture per prezzo; l'ordinamento è sempre per prezzo
decrescente.
"""

from datetime import date
from typing import Dict, List, Optional, Tuple

import pandas as pd

from config import TOP_ACCOMMODATIONS, TOP_METRICS, UNSPECIFIED
from core.models import Booking
from reports.frame import bookings_frame, nights_in_window, ratio, to_float, window_days
from reports.results import (
    AccommodationStats,
    AccommodationSummary,
    ApartmentStats,
    RollupDelta,
    TopAccommodation,
)

Window = Optional[Tuple[date, date]]

_AGGREGATES = dict(
    total_revenue=("revenue", "sum"),
    total_commission=("commission", "sum"),
    booking_count=("revenue", "size"),
    cancelled_count=("is_cancelled", "sum"),
    total_nights=("nights_in_range", "sum"),
)


def _rollup_frame(bookings: List[Booking], window: Window) -> pd.DataFrame:
    df = bookings_frame(bookings)
    df["apartment_type"] = df["apartment_type"].replace("", UNSPECIFIED)
    df["nights_in_range"] = nights_in_window(df, window)
    return df


def _source_counts(df: pd.DataFrame, keys: List[str]) -> Dict[tuple, Dict[str, int]]:
    out: Dict[tuple, Dict[str, int]] = {}
    for idx, count in df.groupby(keys + ["source"]).size().items():
        out.setdefault(tuple(idx[:-1]), {})[idx[-1]] = int(count)
    return out


def compute_accommodation_stats(bookings: List[Booking], window: Window) -> Dict[str, AccommodationStats]:
    """Statistiche per struttura senza filtri né limite, indicizzate per nome."""
    if not bookings:
        return {}
    df = _rollup_frame(bookings, window)
    days = window_days(window)

    by_accommodation = df.groupby("accommodation").agg(
        apartment_count=("apartment_type", "nunique"), **_AGGREGATES
    )
    by_apartment = df.groupby(["accommodation", "apartment_type"]).agg(**_AGGREGATES)
    sources = _source_counts(df, ["accommodation"])
    apartment_sources = _source_counts(df, ["accommodation", "apartment_type"])

    stats: Dict[str, AccommodationStats] = {}
    for name, row in by_accommodation.iterrows():
        nights = int(row["total_nights"])
        apartment_count = int(row["apartment_count"])
        stats[name] = AccommodationStats(
            accommodation=name,
            total_revenue=to_float(row["total_revenue"]),
            total_commission=to_float(row["total_commission"]),
            booking_count=int(row["booking_count"]),
            cancelled_count=int(row["cancelled_count"]),
            total_nights=nights,
            occupancy_rate=ratio(nights, days * apartment_count, 100),
            apartment_count=apartment_count,
            booking_sources=sources.get((name,), {}),
        )

    for (name, apartment), row in by_apartment.iterrows():
        nights = int(row["total_nights"])
        stats[name].apartments[apartment] = ApartmentStats(
            apartment_type=apartment,
            total_revenue=to_float(row["total_revenue"]),
            total_commission=to_float(row["total_commission"]),
            booking_count=int(row["booking_count"]),
            cancelled_count=int(row["cancelled_count"]),
            total_nights=nights,
            occupancy_rate=ratio(nights, days, 100),
            booking_sources=apartment_sources.get((name, apartment), {}),
        )
    return stats


def _delta(current, comparison) -> RollupDelta:
    """current - comparison; un lato mancante conta come zero."""
    if comparison is None:
        return RollupDelta(
            revenue=current.total_revenue,
            commission=current.total_commission,
            bookings=current.booking_count,
            nights=current.total_nights,
        )
    return RollupDelta(
        revenue=current.total_revenue - comparison.total_revenue,
        commission=current.total_commission - comparison.total_commission,
        bookings=current.booking_count - comparison.booking_count,
        nights=current.total_nights - comparison.total_nights,
    )


def _matches(stat: AccommodationStats, search: str, source: Optional[str]) -> bool:
    if search and search.strip().lower() not in stat.accommodation.lower():
        return False
    if source and source not in stat.booking_sources:
        return False
    return True


def rollup_accommodations(
    bookings: List[Booking],
    window: Window,
    comparison: Optional[List[Booking]] = None,
    comparison_window: Window = None,
    search: str = "",
    source: Optional[str] = None,
) -> List[AccommodationStats]:
    """
    Strutture ordinate per prezzo decrescente.

    search  → sottostringa nel nome struttura (toglie il limite TOP_ACCOMMODATIONS)
    source  → solo strutture con almeno una prenotazione da quel canale
              (UNSPECIFIED per i canali vuoti; toglie il limite)
    comparison → se presente, ogni struttura e appartamento ha `difference`
    """
    search = (search or "").strip()
    current = compute_accommodation_stats(bookings, window)
    result = [s for s in current.values() if _matches(s, search, source)]
    # nome come secondo criterio: ordine stabile a parità di prezzo
    result.sort(key=lambda s: (-s.total_revenue, s.accommodation))
    if not search and not source:
        result = result[:TOP_ACCOMMODATIONS]

    if comparison is not None:
        previous = compute_accommodation_stats(comparison, comparison_window)
        for stat in result:
            other = previous.get(stat.accommodation)
            stat.difference = _delta(stat, other)
            for apartment_type, apartment in stat.apartments.items():
                other_apartment = other.apartments.get(apartment_type) if other else None
                apartment.difference = _delta(apartment, other_apartment)
    return result


def list_booking_sources(bookings: List[Booking], comparison: Optional[List[Booking]] = None) -> List[str]:
    """Canali presenti (per il selettore), in ordine alfabetico; UNSPECIFIED in fondo."""
    has_unspecified = False
    sources = set()
    for b in list(bookings) + list(comparison or []):
        name = (b.booking_source or "").strip()
        if name:
            sources.add(name)
        else:
            has_unspecified = True
    ordered = sorted(sources - {UNSPECIFIED})
    if has_unspecified or UNSPECIFIED in sources:
        ordered.append(UNSPECIFIED)
    return ordered


def accommodation_summary(bookings: List[Booking], accommodation: str) -> AccommodationSummary:
    """Scheda di dettaglio di una struttura (nome esatto)."""
    selected = [b for b in bookings if b.accommodation == accommodation]
    if not selected:
        return AccommodationSummary(accommodation=accommodation)
    df = bookings_frame(selected)
    revenue = to_float(df["revenue"].sum())
    return AccommodationSummary(
        accommodation=accommodation,
        total_revenue=revenue,
        total_bookings=len(df),
        average_revenue=ratio(revenue, len(df)),
        average_nights=ratio(df["nights"].sum(), len(df)),
        bookings_by_source={k: int(v) for k, v in df["source"].value_counts().items()},
    )


def top_accommodations(
    bookings: List[Booking],
    metric: str = "revenue",
    limit: int = TOP_ACCOMMODATIONS,
) -> List[TopAccommodation]:
    """
    Classifica delle strutture per una metrica (TOP_METRICS):
      revenue           → prezzo totale, cancellazioni comprese
      bookings / nights → solo prenotazioni non cancellate
      cancellation_rate → cancellazioni / prenotazioni totali × 100
    Strutture senza nome escluse; al massimo `limit` righe.
    """
    if metric not in TOP_METRICS:
        raise ValueError(f"Metrica non valida: {metric!r}")
    df = bookings_frame(bookings)
    if df.empty:
        return []
    df = df[df["accommodation"].str.strip() != ""]
    active = ~df["is_cancelled"]
    df = df.assign(active=active, active_nights=df["nights"].where(active, 0))

    grouped = df.groupby("accommodation").agg(
        revenue=("revenue", "sum"),
        bookings=("active", "sum"),
        nights=("active_nights", "sum"),
        cancellations=("is_cancelled", "sum"),
        total_bookings=("revenue", "size"),
    )
    result = []
    for name, row in grouped.iterrows():
        entry = TopAccommodation(
            accommodation=name,
            revenue=to_float(row["revenue"]),
            bookings=int(row["bookings"]),
            nights=int(row["nights"]),
            cancellations=int(row["cancellations"]),
            total_bookings=int(row["total_bookings"]),
        )
        entry.cancellation_rate = ratio(entry.cancellations, entry.total_bookings, 100)
        entry.value = float(getattr(entry, metric))
        result.append(entry)
    result.sort(key=lambda e: (-e.value, e.accommodation))
    return result[:limit]
