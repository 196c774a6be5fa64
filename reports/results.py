"""
Strutture dati restituite dai report: semplici dataclass senza logica,
da passare così come sono allo strato di presentazione (Streamlit, export, ...).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class BookingTypeStats:
    label: str          # "Nur Erwachsene" | "Mit Kindern" | "Mit Haustieren"
    count: int
    percentage: float


@dataclass
class PhoneBookingStats:
    person: str
    count: int
    percentage: float   # sul totale delle prenotazioni telefoniche


@dataclass
class KpiBundle:
    total_revenue: float = 0.0
    total_commission: float = 0.0       # provvigione + service fee
    commission_without_fee: float = 0.0
    total_service_fee: float = 0.0
    bookings_with_service_fee: int = 0
    total_bookings: int = 0
    total_nights: int = 0
    average_nights: float = 0.0
    average_revenue_per_night: float = 0.0
    average_revenue: float = 0.0
    booking_types: List[BookingTypeStats] = field(default_factory=list)
    phone_bookings: int = 0
    phone_bookings_percent: float = 0.0
    phone_bookings_by_person: List[PhoneBookingStats] = field(default_factory=list)
    total_guests: int = 0
    average_commission_percent: float = 0.0
    cancelled_bookings: int = 0
    cancellation_rate: float = 0.0


@dataclass
class KpiReport:
    current: KpiBundle
    comparison: Optional[KpiBundle] = None
    delta: Optional[Dict[str, float]] = None    # current - comparison


@dataclass
class RollupDelta:
    revenue: float = 0.0
    commission: float = 0.0
    bookings: int = 0
    nights: int = 0


@dataclass
class ApartmentStats:
    apartment_type: str
    total_revenue: float = 0.0
    total_commission: float = 0.0
    booking_count: int = 0
    cancelled_count: int = 0
    total_nights: int = 0               # notti nella finestra del filtro
    occupancy_rate: float = 0.0
    booking_sources: Dict[str, int] = field(default_factory=dict)
    difference: Optional[RollupDelta] = None


@dataclass
class AccommodationStats:
    accommodation: str
    total_revenue: float = 0.0
    total_commission: float = 0.0
    booking_count: int = 0
    cancelled_count: int = 0
    total_nights: int = 0               # notti nella finestra del filtro
    occupancy_rate: float = 0.0
    apartment_count: int = 0
    booking_sources: Dict[str, int] = field(default_factory=dict)
    apartments: Dict[str, ApartmentStats] = field(default_factory=dict)
    difference: Optional[RollupDelta] = None


@dataclass
class AccommodationSummary:
    accommodation: str
    total_revenue: float = 0.0
    total_bookings: int = 0
    average_revenue: float = 0.0
    average_nights: float = 0.0
    bookings_by_source: Dict[str, int] = field(default_factory=dict)


@dataclass
class SourceShare:
    source: str
    bookings: int = 0
    percentage: float = 0.0
    revenue: float = 0.0
    commission: float = 0.0
    comparison_bookings: int = 0
    comparison_percentage: float = 0.0
    comparison_revenue: float = 0.0
    comparison_commission: float = 0.0
    delta: Optional[Dict[str, float]] = None


@dataclass
class PeriodTotals:
    period: str         # "YYYY-MM-DD" (giornaliero) o "YYYY-MM" (mensile)
    bookings: int = 0
    revenue: float = 0.0
    commission: float = 0.0


@dataclass
class MonthTotals:
    month: int          # 1..12
    bookings: int = 0
    revenue: float = 0.0
    commission: float = 0.0
    nights: int = 0
    cancellations: int = 0


@dataclass
class MonthComparison:
    month: int
    current: MonthTotals
    comparison: MonthTotals
    delta: Dict[str, float] = field(default_factory=dict)


@dataclass
class RegionCount:
    region: str         # prima cifra del CAP
    description: str
    current: int = 0
    comparison: int = 0


@dataclass
class LeadTimeMatrix:
    """Righe = mese di prenotazione, colonne = mese di arrivo (12×12)."""
    current: List[List[int]]
    current_totals: List[int]                       # prenotazioni per mese di prenotazione
    comparison: Optional[List[List[int]]] = None
    comparison_totals: Optional[List[int]] = None


@dataclass
class TopAccommodation:
    accommodation: str
    revenue: float = 0.0                # cancellazioni incluse (negative)
    bookings: int = 0                   # solo attive
    nights: int = 0                     # solo attive
    cancellations: int = 0
    total_bookings: int = 0
    cancellation_rate: float = 0.0
    value: float = 0.0                  # valore della metrica scelta
