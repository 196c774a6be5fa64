"""
Conversione dei campi del file esportato (formato tedesco, EUR).

Tutte le funzioni sono totali: non sollevano eccezioni e su valori mancanti
o malformati restituiscono un default utilizzabile (0, 0.0 oppure "").
"""

import math
import re
from datetime import date, datetime
from typing import Optional

_NOT_NUMBER = re.compile(r"[^0-9,.-]")
_LEADING_INT = re.compile(r"^[+-]?\d+")


def clean_text(val) -> str:
    """Valore cella → stringa pulita. None e NaN di pandas → ""."""
    if val is None:
        return ""
    if isinstance(val, float) and math.isnan(val):
        return ""
    s = str(val).strip()
    if s.lower() == "nan":
        return ""
    return s


def parse_german_date(val) -> str:
    """
    Converte data DD.MM.YYYY in YYYY-MM-DD.
    Una data già in formato YYYY-MM-DD resta invariata; un eventuale orario
    dopo la data viene ignorato. Data mancante o impossibile → "".
    """
    s = clean_text(val)
    if not s:
        return ""
    s = s.split()[0]
    for fmt in ("%d.%m.%Y", "%Y-%m-%d"):
        try:
            return datetime.strptime(s, fmt).date().isoformat()
        except ValueError:
            continue
    return ""


def parse_iso_date(val) -> Optional[date]:
    """Data canonica YYYY-MM-DD → date. "" o valore non valido → None (mai epoch)."""
    s = clean_text(val)
    if not s:
        return None
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        return None


def to_amount(val) -> float:
    """
    Converte importo tedesco in float: "1.234,56 €" → 1234.56.
    Il segno viene mantenuto (negativo = cancellazione). Errore → 0.0.
    """
    if isinstance(val, bool):
        return 0.0
    if isinstance(val, (int, float)):
        return float(val) if math.isfinite(val) else 0.0
    s = _NOT_NUMBER.sub("", clean_text(val))
    if "," in s:
        # virgola decimale: i punti sono separatori delle migliaia
        s = s.replace(".", "").replace(",", ".")
    elif s.count(".") > 1:
        s = s.replace(".", "")
    try:
        result = float(s)
    except ValueError:
        return 0.0
    return result if math.isfinite(result) else 0.0


def to_percent(val) -> float:
    """Percentuale ("12,5 %") → 12.5. Stessa regola degli importi."""
    return to_amount(val)


def to_int(val) -> int:
    """Intero in base 10 all'inizio del valore ("3 Pers." → 3). Errore → 0."""
    if isinstance(val, bool):
        return 0
    if isinstance(val, int):
        return val
    if isinstance(val, float):
        return int(val) if math.isfinite(val) else 0
    match = _LEADING_INT.match(clean_text(val))
    if not match:
        return 0
    return int(match.group(0))
