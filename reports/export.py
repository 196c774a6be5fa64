"""
Esportazione delle prenotazioni filtrate (CSV / Excel) con intestazioni tedesche.
"""

import io
from typing import List

import pandas as pd

from config import SERVICE_FEE, SERVICE_FEE_THRESHOLD
from core.models import Booking
from reports.frame import bookings_frame

EXPORT_COLUMNS = {
    "booking_code":       "Buchungscode",
    "booking_date":       "Buchungsdatum",
    "booking_time":       "Uhrzeit",
    "arrival_date":       "Anreisedatum",
    "departure_date":     "Abreisedatum",
    "accommodation":      "Unterkunft",
    "apartment_type":     "Wohnung",
    "revenue":            "Umsatz",
    "cancelled":          "Stornierung",
    "phone_booking":      "Telefonische Buchung",
    "commission":         "Provision",
    "commission_percent": "Provision %",
    "service_fee":        "Servicepauschale",
    "stay_nights":        "Nächte",
    "booking_source":     "Buchung über",
    "customer_zip":       "PLZ Kunde",
    "customer_city":      "Ort Kunde",
    "adults":             "Erwachsene",
    "children":           "Kinder",
    "pets":               "Haustiere",
}


def export_frame(bookings: List[Booking]) -> pd.DataFrame:
    """Tabella prenotazioni per download: date dd.mm.yyyy, service fee e notti calcolate."""
    df = bookings_frame(bookings)
    for col, src in (("booking_date", "booking_dt"),
                     ("arrival_date", "arrival_dt"),
                     ("departure_date", "departure_dt")):
        df[col] = df[src].dt.strftime("%d.%m.%Y").fillna("")
    df["cancelled"] = df["is_cancelled"].map({True: "Ja", False: ""})
    df["service_fee"] = (df["revenue"] > SERVICE_FEE_THRESHOLD) * SERVICE_FEE
    df["stay_nights"] = df["stay_nights"].fillna(0).astype("int64")
    return df[list(EXPORT_COLUMNS)].rename(columns=EXPORT_COLUMNS)


def to_csv_bytes(df: pd.DataFrame) -> bytes:
    """CSV con separatore ';' e virgola decimale, leggibile da Excel tedesco."""
    return df.to_csv(index=False, sep=";", decimal=",").encode("utf-8-sig")


def to_excel_bytes(df: pd.DataFrame, sheet_name: str = "Buchungen") -> bytes:
    """Converte DataFrame in bytes XLSX per il download."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return buf.getvalue()
