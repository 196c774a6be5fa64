"""
Configurazione centralizzata - modifica qui costanti di business e mapping colonne.
"""

import os

# Livello di logging (unico valore letto dall'ambiente)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# Formato del file esportato dal gestionale
EXPORT_ENCODING = "utf-16-le"
EXPORT_DELIMITER = ";"

# Servicepauschale: importo fisso aggiunto alla provisione se il prezzo supera la soglia
SERVICE_FEE = 25.0
SERVICE_FEE_THRESHOLD = 150.0

# Numero massimo di strutture mostrate senza ricerca / filtro canale
TOP_ACCOMMODATIONS = 30

# Metriche per la classifica delle strutture
TOP_METRICS = ("revenue", "bookings", "nights", "cancellation_rate")

# Etichetta per canale o appartamento non indicato
UNSPECIFIED = "ABC"

# Filtro per data di arrivo o data di prenotazione
FILTER_ARRIVAL = "arrival"
FILTER_BOOKING = "booking"
FILTER_TYPES = (FILTER_ARRIVAL, FILTER_BOOKING)

# Gutscheincode → collaboratore che ha preso la prenotazione al telefono
PHONE_BOOKING_CODES = {
    "T Ma": "Marquardt",
    "T Ro": "Rohde",
}

# Mapping campo canonico → intestazione colonna nel file esportato
FIELD_HEADERS = {
    "booking_code":       "Buchungsnummer",
    "booking_date":       "Buchungsdatum",
    "booking_time":       "Uhrzeit der Buchung",
    "arrival_date":       "Anreisedatum",
    "departure_date":     "Abreisedatum",
    "accommodation":      "Objekt",
    "apartment_type":     "Wohnung",
    "revenue":            "Gesamtpreis",
    "commission":         "Provision",
    "commission_percent": "Provision in %",
    "nights":             "Nächte",
    "customer_zip":       "PLZ Kunde",
    "customer_city":      "Ort Kunde",
    "adults":             "Erwachsene",
    "children_ages":      "Alter der Kinder",  # il numero bambini deriva dalle età
    "pets":               "Haustiere",
    "booking_source":     "Buchung über",
    "voucher_code":       "Gutscheincode",
}

# Intestazioni alternative (vecchi export / altri gestionali) → intestazione canonica
HEADER_ALIASES = {
    "Datum":                      "Buchungsdatum",
    "Uhrzeit":                    "Uhrzeit der Buchung",
    "Zimmer/Wohnung/Appartement": "Wohnung",
    "Prozent":                    "Provision in %",
    "PLZ":                        "PLZ Kunde",
    "Ort":                        "Ort Kunde",
    "Anzahl Erwachsene":          "Erwachsene",
    "Kinderalter":                "Alter der Kinder",
    "Alter Kinder":               "Alter der Kinder",
    "Anzahl Haustiere gross":     "Haustiere",
    "Extern":                     "Buchung über",
}

# Regioni postali tedesche per prima cifra del CAP
POSTAL_REGIONS = {
    "0": "Dresden, Erfurt",
    "1": "Berlin, Leipzig",
    "2": "Hamburg, Rostock",
    "3": "Hannover, Braunschweig",
    "4": "Bremen, Osnabrück",
    "5": "Köln, Dortmund",
    "6": "Frankfurt, Kassel",
    "7": "Stuttgart, Mannheim",
    "8": "München, Nürnberg",
    "9": "Nürnberg, Regensburg",
}
