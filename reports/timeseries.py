"""
Serie temporali: totali giornalieri / mensili e distribuzioni per mese dell'anno.

  - daily_totals / monthly_totals → solo i periodi con dati (serie sparsa)
  - month_of_year_totals          → sempre 12 mesi, 0 dove non ci sono dati
                                    (asse fisso per i grafici mese su mese)
Prenotazioni con la data scelta non valida non entrano nelle serie.
"""

from typing import Dict, List, Optional

import pandas as pd

from config import FILTER_ARRIVAL, FILTER_BOOKING, POSTAL_REGIONS, UNSPECIFIED
from core.models import Booking
from reports.frame import bookings_frame, date_column, ratio, to_float
from reports.results import LeadTimeMatrix, MonthComparison, MonthTotals, PeriodTotals, RegionCount

MONTHS = list(range(1, 13))


def _period_totals(bookings: List[Booking], filter_type: str, fmt: str) -> List[PeriodTotals]:
    df = bookings_frame(bookings)
    df = df[df[date_column(filter_type)].notna()]
    if df.empty:
        return []
    df = df.assign(period=df[date_column(filter_type)].dt.strftime(fmt))
    grouped = df.groupby("period").agg(
        bookings=("period", "size"),
        revenue=("revenue", "sum"),
        commission=("commission", "sum"),
    )
    return [
        PeriodTotals(
            period=period,
            bookings=int(row["bookings"]),
            revenue=to_float(row["revenue"]),
            commission=to_float(row["commission"]),
        )
        for period, row in grouped.sort_index().iterrows()
    ]


def daily_totals(bookings: List[Booking], filter_type: str = FILTER_BOOKING) -> List[PeriodTotals]:
    """Prenotazioni, prezzo e provvigione per giorno (YYYY-MM-DD), in ordine cronologico."""
    return _period_totals(bookings, filter_type, "%Y-%m-%d")


def monthly_totals(bookings: List[Booking], filter_type: str = FILTER_BOOKING) -> List[PeriodTotals]:
    """Come daily_totals ma per mese (YYYY-MM)."""
    return _period_totals(bookings, filter_type, "%Y-%m")


def month_of_year_totals(bookings: List[Booking], filter_type: str = FILTER_BOOKING) -> List[MonthTotals]:
    """Totali per mese dell'anno (1..12), sempre tutti e 12 i mesi."""
    df = bookings_frame(bookings)
    df = df[df[date_column(filter_type)].notna()]
    result = {m: MonthTotals(month=m) for m in MONTHS}
    if df.empty:
        return list(result.values())

    df = df.assign(month=df[date_column(filter_type)].dt.month)
    grouped = df.groupby("month").agg(
        bookings=("month", "size"),
        revenue=("revenue", "sum"),
        commission=("commission", "sum"),
        nights=("stay_nights", "sum"),
        cancellations=("is_cancelled", "sum"),
    ).reindex(MONTHS, fill_value=0)

    for month, row in grouped.iterrows():
        result[month] = MonthTotals(
            month=int(month),
            bookings=int(row["bookings"]),
            revenue=to_float(row["revenue"]),
            commission=to_float(row["commission"]),
            nights=int(to_float(row["nights"])),
            cancellations=int(row["cancellations"]),
        )
    return list(result.values())


def month_of_year_comparison(
    bookings: List[Booking],
    comparison: List[Booking],
    filter_type: str = FILTER_BOOKING,
) -> List[MonthComparison]:
    """12 mesi affiancati: periodo corrente, confronto e differenza."""
    current = month_of_year_totals(bookings, filter_type)
    previous = month_of_year_totals(comparison or [], filter_type)
    out = []
    for cur, prev in zip(current, previous):
        out.append(MonthComparison(
            month=cur.month,
            current=cur,
            comparison=prev,
            delta={
                "bookings": cur.bookings - prev.bookings,
                "revenue": cur.revenue - prev.revenue,
                "commission": cur.commission - prev.commission,
                "nights": cur.nights - prev.nights,
                "cancellations": cur.cancellations - prev.cancellations,
            },
        ))
    return out


def booking_hour_distribution(bookings: List[Booking]) -> List[int]:
    """Prenotazioni per ora del giorno (0..23) da "Uhrzeit der Buchung" (H:MM:SS)."""
    df = bookings_frame(bookings)
    hours = pd.to_numeric(df["booking_time"].str.split(":").str[0], errors="coerce")
    hours = hours[(hours >= 0) & (hours < 24)].astype(int)
    counts = hours.value_counts().reindex(range(24), fill_value=0)
    return [int(c) for c in counts]


def _region_counts(bookings: List[Booking]) -> Dict[str, int]:
    df = bookings_frame(bookings)
    first = df["customer_zip"].str.strip().str[:1]
    first = first[first.str.isdigit().fillna(False).astype(bool)]
    return {k: int(v) for k, v in first.value_counts().items()}


def postal_region_distribution(
    bookings: List[Booking],
    comparison: Optional[List[Booking]] = None,
) -> List[RegionCount]:
    """Prenotazioni per regione postale (prima cifra del CAP cliente), regioni 0..9."""
    current = _region_counts(bookings)
    previous = _region_counts(comparison) if comparison is not None else {}
    return [
        RegionCount(
            region=region,
            description=description,
            current=current.get(region, 0),
            comparison=previous.get(region, 0),
        )
        for region, description in POSTAL_REGIONS.items()
    ]


def monthly_revenue_per_night_by_source(bookings: List[Booking]) -> Dict[str, List[float]]:
    """
    Prezzo medio per notte per canale e mese di arrivo (12 valori per canale).
    Soggiorni con 0 notti o date non valide sono esclusi.
    """
    df = bookings_frame(bookings)
    df = df[df["arrival_dt"].notna() & (df["stay_nights"] > 0)]
    if df.empty:
        return {}
    df = df.assign(month=df["arrival_dt"].dt.month)
    grouped = df.groupby(["source", "month"]).agg(
        revenue=("revenue", "sum"),
        nights=("stay_nights", "sum"),
    )
    out: Dict[str, List[float]] = {}
    for source in sorted(df["source"].unique(), key=lambda s: (s == UNSPECIFIED, s)):
        per_month = grouped.loc[source].reindex(MONTHS, fill_value=0)
        out[source] = [ratio(row["revenue"], row["nights"]) for _, row in per_month.iterrows()]
    return out


def _lead_time(bookings: List[Booking]) -> List[List[int]]:
    df = bookings_frame(bookings)
    df = df[df["booking_dt"].notna() & df["arrival_dt"].notna()]
    matrix = [[0] * 12 for _ in MONTHS]
    for booked, arrives in zip(df["booking_dt"].dt.month, df["arrival_dt"].dt.month):
        matrix[int(booked) - 1][int(arrives) - 1] += 1
    return matrix


def booking_month_by_arrival_month(
    bookings: List[Booking],
    comparison: Optional[List[Booking]] = None,
) -> LeadTimeMatrix:
    """
    Matrice 12×12: riga = mese di prenotazione, colonna = mese di arrivo,
    con i totali per mese di prenotazione. Servono entrambe le date valide.
    Con comparison (anche vuota) la stessa matrice per il periodo di confronto.
    """
    current = _lead_time(bookings)
    result = LeadTimeMatrix(current=current, current_totals=[sum(row) for row in current])
    if comparison is not None:
        result.comparison = _lead_time(comparison)
        result.comparison_totals = [sum(row) for row in result.comparison]
    return result


def series_for(filter_type: str) -> str:
    """Etichetta asse per i grafici (data di arrivo / di prenotazione)."""
    return "Anreisedatum" if filter_type == FILTER_ARRIVAL else "Buchungsdatum"
