"""
KPI del periodo selezionato (e del periodo di confronto).

Note di calcolo:
  - provvigione totale = provvigioni + SERVICE_FEE per ogni prenotazione
    con prezzo > SERVICE_FEE_THRESHOLD
  - notti ricalcolate da arrivo/partenza (minimo 0), ignorando il campo Nächte
  - "Mit Kindern" e "Mit Haustieren" non sono esclusivi: una prenotazione con
    bambini e animali conta in entrambi, le percentuali possono superare 100
  - ogni media / percentuale su denominatore 0 vale 0
"""

from dataclasses import fields
from typing import Dict, List, Optional

from config import PHONE_BOOKING_CODES, SERVICE_FEE, SERVICE_FEE_THRESHOLD
from core.models import Booking
from reports.frame import bookings_frame, ratio, to_float
from reports.results import BookingTypeStats, KpiBundle, KpiReport, PhoneBookingStats

# Campi numerici per cui si calcola la differenza col periodo di confronto
DELTA_FIELDS = [
    f.name for f in fields(KpiBundle)
    if f.name not in ("booking_types", "phone_bookings_by_person")
]


def compute_kpis(bookings: List[Booking]) -> KpiBundle:
    df = bookings_frame(bookings)
    total = len(df)
    if total == 0:
        return KpiBundle(
            booking_types=_booking_type_stats(0, 0, 0, 0),
            phone_bookings_by_person=_phone_stats({}, 0),
        )

    revenue = to_float(df["revenue"].sum())
    commission = to_float(df["commission"].sum())
    with_fee = df["revenue"] > SERVICE_FEE_THRESHOLD
    fee_count = int(with_fee.sum())
    service_fee = fee_count * SERVICE_FEE

    stays = df["stay_nights"].dropna()
    total_nights = int(stays.sum())

    has_children = df["children"] > 0
    has_pets = df["pets"] > 0
    adults_only = int((~has_children & ~has_pets).sum())

    phone = df.loc[df["phone_booking"] != "", "phone_booking"]
    cancelled = int(df["is_cancelled"].sum())

    return KpiBundle(
        total_revenue=revenue,
        total_commission=commission + service_fee,
        commission_without_fee=commission,
        total_service_fee=service_fee,
        bookings_with_service_fee=fee_count,
        total_bookings=total,
        total_nights=total_nights,
        average_nights=ratio(stays.sum(), len(stays)),
        average_revenue_per_night=ratio(revenue, total_nights),
        average_revenue=ratio(revenue, total),
        booking_types=_booking_type_stats(
            total, adults_only, int(has_children.sum()), int(has_pets.sum())
        ),
        phone_bookings=len(phone),
        phone_bookings_percent=ratio(len(phone), total, 100),
        phone_bookings_by_person=_phone_stats(phone.value_counts().to_dict(), len(phone)),
        total_guests=int(df["adults"].sum() + df["children"].sum()),
        average_commission_percent=ratio(df["commission_percent"].sum(), total),
        cancelled_bookings=cancelled,
        cancellation_rate=ratio(cancelled, total, 100),
    )


def _booking_type_stats(total: int, adults_only: int, with_children: int, with_pets: int) -> List[BookingTypeStats]:
    return [
        BookingTypeStats("Nur Erwachsene", adults_only, ratio(adults_only, total, 100)),
        BookingTypeStats("Mit Kindern", with_children, ratio(with_children, total, 100)),
        BookingTypeStats("Mit Haustieren", with_pets, ratio(with_pets, total, 100)),
    ]


def _phone_stats(counts: Dict[str, int], phone_total: int) -> List[PhoneBookingStats]:
    """Tutti i collaboratori noti (anche a 0), ordinati per numero di prenotazioni."""
    people = list(PHONE_BOOKING_CODES.values())
    people += [p for p in counts if p not in people]
    stats = [
        PhoneBookingStats(p, int(counts.get(p, 0)), ratio(counts.get(p, 0), phone_total, 100))
        for p in people
    ]
    return sorted(stats, key=lambda s: -s.count)


def kpi_delta(current: KpiBundle, comparison: KpiBundle) -> Dict[str, float]:
    """Differenza current - comparison per ogni KPI numerico (negativa se il confronto era meglio)."""
    return {name: getattr(current, name) - getattr(comparison, name) for name in DELTA_FIELDS}


def compare_kpis(current: List[Booking], comparison: Optional[List[Booking]] = None) -> KpiReport:
    """KPI del periodo; se comparison non è None aggiunge KPI di confronto e differenze."""
    current_kpis = compute_kpis(current)
    if comparison is None:
        return KpiReport(current=current_kpis)
    comparison_kpis = compute_kpis(comparison)
    return KpiReport(
        current=current_kpis,
        comparison=comparison_kpis,
        delta=kpi_delta(current_kpis, comparison_kpis),
    )
