"""
Prenotazioni normalizzate → DataFrame pandas con le colonne derivate
usate dai report (date tipizzate, notti ricalcolate, canale normalizzato).
"""

from dataclasses import asdict, fields
from datetime import date
from typing import List, Optional, Tuple

import pandas as pd

from config import FILTER_ARRIVAL, UNSPECIFIED
from core.models import Booking

COLUMNS = [f.name for f in fields(Booking)]

_DTYPES = {
    "revenue": "float64",
    "commission": "float64",
    "commission_percent": "float64",
    "nights": "int64",
    "adults": "int64",
    "children": "int64",
    "pets": "int64",
    "is_cancelled": "bool",
}


def date_column(filter_type: str) -> str:
    """Colonna data (tipizzata) usata dal filtro: arrivo o prenotazione."""
    return "arrival_dt" if filter_type == FILTER_ARRIVAL else "booking_dt"


def normalize_source(source: str) -> str:
    source = (source or "").strip()
    return source or UNSPECIFIED


def bookings_frame(bookings: List[Booking]) -> pd.DataFrame:
    """
    Una riga per prenotazione, nell'ordine originale. Colonne aggiunte:
      - arrival_dt, departure_dt, booking_dt → datetime (NaT se data non valida)
      - stay_nights → partenza - arrivo in giorni, minimo 0 (NaN se date non valide)
      - source      → canale con i vuoti ricondotti a UNSPECIFIED
    is_cancelled viene sempre ricalcolato dal segno del prezzo.
    """
    df = pd.DataFrame([asdict(b) for b in bookings], columns=COLUMNS)
    df = df.astype(_DTYPES)
    df["is_cancelled"] = df["revenue"] < 0

    for col, src in (("arrival_dt", "arrival_date"),
                     ("departure_dt", "departure_date"),
                     ("booking_dt", "booking_date")):
        df[col] = pd.to_datetime(df[src], format="%Y-%m-%d", errors="coerce")

    df["stay_nights"] = (df["departure_dt"] - df["arrival_dt"]).dt.days.clip(lower=0)
    df["source"] = [normalize_source(s) for s in df["booking_source"]]
    return df


def nights_in_window(df: pd.DataFrame, window: Optional[Tuple[date, date]]) -> pd.Series:
    """
    Notti di ogni soggiorno comprese tra inizio e fine della finestra.
    Arrivo e partenza vengono tagliati ai bordi della finestra: la notte che
    inizia il giorno di fine non conta. Prenotazioni cancellate o con date
    non valide contano 0.
    """
    if window is None or df.empty:
        return pd.Series(0, index=df.index, dtype="int64")

    start = pd.Timestamp(window[0])
    end = pd.Timestamp(window[1])

    arrival = df["arrival_dt"]
    departure = df["departure_dt"]
    valid = arrival.notna() & departure.notna() & ~df["is_cancelled"]

    clipped_arrival = arrival.where(arrival >= start, start)
    clipped_departure = departure.where(departure <= end, end)
    nights = (clipped_departure - clipped_arrival).dt.days.clip(lower=0)
    return nights.where(valid, 0).fillna(0).astype("int64")


def window_days(window: Optional[Tuple[date, date]]) -> int:
    """Giorni nella finestra, estremi inclusi. Senza finestra → 1."""
    if window is None:
        return 1
    return max(1, (window[1] - window[0]).days + 1)


def to_float(value) -> float:
    """Scalare numpy/pandas → float; NaN → 0.0."""
    if value is None or pd.isna(value):
        return 0.0
    return float(value)


def ratio(numerator, denominator, scale: float = 1.0) -> float:
    """numerator / denominator * scale, 0.0 se il denominatore è 0."""
    denominator = to_float(denominator)
    if denominator == 0:
        return 0.0
    return to_float(numerator) / denominator * scale
