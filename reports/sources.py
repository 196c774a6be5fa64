"""
Ripartizione delle prenotazioni per canale (Buchung über).

Canali vuoti finiscono in UNSPECIFIED. Con il confronto attivo i due periodi
vengono uniti per canale: un canale presente solo da un lato vale 0 dall'altro.
"""

from typing import Dict, List, Optional

import pandas as pd

from core.models import Booking
from reports.frame import bookings_frame, ratio, to_float
from reports.results import SourceShare


def _by_source(bookings: List[Booking]) -> pd.DataFrame:
    df = bookings_frame(bookings)
    if df.empty:
        return pd.DataFrame(columns=["bookings", "revenue", "commission"])
    return df.groupby("source").agg(
        bookings=("source", "size"),
        revenue=("revenue", "sum"),
        commission=("commission", "sum"),
    )


def source_distribution(
    bookings: List[Booking],
    comparison: Optional[List[Booking]] = None,
) -> List[SourceShare]:
    """Canali ordinati per numero di prenotazioni (decrescente), poi per nome."""
    current = _by_source(bookings)
    total = len(bookings)
    previous = _by_source(comparison) if comparison is not None else None
    previous_total = len(comparison) if comparison is not None else 0

    names = set(current.index)
    if previous is not None:
        names |= set(previous.index)

    shares = []
    for name in names:
        share = SourceShare(source=name)
        if name in current.index:
            row = current.loc[name]
            share.bookings = int(row["bookings"])
            share.revenue = to_float(row["revenue"])
            share.commission = to_float(row["commission"])
        share.percentage = ratio(share.bookings, total, 100)

        if previous is not None:
            if name in previous.index:
                row = previous.loc[name]
                share.comparison_bookings = int(row["bookings"])
                share.comparison_revenue = to_float(row["revenue"])
                share.comparison_commission = to_float(row["commission"])
            share.comparison_percentage = ratio(share.comparison_bookings, previous_total, 100)
            share.delta = _delta(share)
        shares.append(share)

    return sorted(shares, key=lambda s: (-s.bookings, s.source))


def _delta(share: SourceShare) -> Dict[str, float]:
    return {
        "bookings": share.bookings - share.comparison_bookings,
        "percentage": share.percentage - share.comparison_percentage,
        "revenue": share.revenue - share.comparison_revenue,
        "commission": share.commission - share.comparison_commission,
    }
