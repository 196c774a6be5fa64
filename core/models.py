"""
Modelli dati: Booking (prenotazione normalizzata) e ImportResult (esito importazione).
"""

from dataclasses import dataclass, field
from typing import List

from config import UNSPECIFIED


@dataclass
class Booking:
    """Una prenotazione dal file esportato, già normalizzata."""
    booking_code: str           # Buchungsnummer, può essere vuoto
    booking_date: str           # YYYY-MM-DD oppure "" se mancante/non valida
    booking_time: str           # H:MM:SS, testo libero
    arrival_date: str           # YYYY-MM-DD oppure ""
    departure_date: str         # YYYY-MM-DD oppure ""
    accommodation: str          # Objekt
    apartment_type: str = UNSPECIFIED
    revenue: float = 0.0        # Gesamtpreis, negativo = cancellazione
    commission: float = 0.0
    commission_percent: float = 0.0
    nights: int = 0
    customer_zip: str = ""
    customer_city: str = ""
    adults: int = 0
    children: int = 0           # virgole in "Alter der Kinder" + 1
    pets: int = 0
    booking_source: str = ""    # "" = canale non indicato
    is_cancelled: bool = False
    phone_booking: str = ""     # collaboratore, solo per Gutscheincode noti


@dataclass
class ImportResult:
    """Esito di una importazione riuscita."""
    bookings: List[Booking] = field(default_factory=list)
    total_rows: int = 0
    accepted: int = 0
    rejected: int = 0

    @property
    def message(self) -> str:
        return f"{self.accepted} von {self.total_rows} Zeilen importiert"
