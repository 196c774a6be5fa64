"""
Parser per il file di esportazione prenotazioni del gestionale (formato tedesco).

Struttura: testo UTF-16LE, separatore ';', una riga di intestazione,
una riga per prenotazione. Intestazioni principali (vedi config.FIELD_HEADERS):
  Buchungsnummer, Buchungsdatum, Uhrzeit der Buchung, Anreisedatum, Abreisedatum,
  Objekt, Wohnung, Gesamtpreis, Provision, Provision in %, PLZ Kunde, Ort Kunde,
  Erwachsene, Alter der Kinder, Haustiere, Buchung über, Gutscheincode

Date in formato DD.MM.YYYY, importi come "1.234,56 €".
Alcuni export usano intestazioni diverse (Datum, PLZ, Extern, ...): vengono
ricondotte a quelle canoniche prima della mappatura (config.HEADER_ALIASES).

Esito:
  - ImportResult con le prenotazioni valide nell'ordine del file
  - IngestionError se il file non è leggibile, è vuoto o nessuna riga è valida
"""

import csv
import io
import logging
from typing import Dict, List, Tuple

from config import EXPORT_DELIMITER, EXPORT_ENCODING
from core.errors import IngestionError
from core.models import ImportResult
from parsers.row_mapper import canonical_header, map_rows

logger = logging.getLogger(__name__)


def decode_export(data: bytes, encoding: str = EXPORT_ENCODING) -> str:
    """Bytes del file → testo. Il BOM iniziale viene rimosso."""
    try:
        text = data.decode(encoding)
    except (UnicodeDecodeError, LookupError, AttributeError) as e:
        raise IngestionError(IngestionError.DECODE, f"Fehler beim Lesen der Datei: {e}")
    return text.lstrip("\ufeff")


def read_rows(text: str, delimiter: str = EXPORT_DELIMITER) -> Tuple[List[Dict[str, str]], int]:
    """
    Testo delimitato → righe come dict intestazione canonica → valore.

    Restituisce (righe, righe_rotte). Una riga con più campi non vuoti
    dell'intestazione è strutturalmente rotta: non viene letta ma contata,
    così compare nel riepilogo come scartata. Le righe corte vengono
    completate con "" e le righe completamente vuote ignorate.
    """
    try:
        reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
        lines = [line for line in reader if any(cell.strip() for cell in line)]
    except csv.Error as e:
        raise IngestionError(IngestionError.DECODE, f"Fehler beim Lesen der Datei: {e}")

    if not lines:
        return [], 0

    headers = [canonical_header(h) for h in lines[0]]
    rows = []
    broken = 0
    for line in lines[1:]:
        extra = line[len(headers):]
        if any(cell.strip() for cell in extra):
            broken += 1
            continue
        values = line[:len(headers)] + [""] * (len(headers) - len(line))
        row: Dict[str, str] = {}
        for header, value in zip(headers, values):
            # alias doppi (es. Kinderalter + Alter Kinder): vince il primo valore non vuoto
            if header not in row or not row[header].strip():
                row[header] = value
        rows.append(row)

    if broken:
        logger.warning("%d righe con troppi campi ignorate", broken)
    return rows, broken


def parse_booking_export(
    data: bytes,
    delimiter: str = EXPORT_DELIMITER,
    encoding: str = EXPORT_ENCODING,
) -> ImportResult:
    """
    Legge il file esportato e restituisce ImportResult.

    Solleva IngestionError con kind:
      - DECODE        → file non decodificabile / non leggibile
      - EMPTY         → nessuna riga dati nel file
      - NO_VALID_ROWS → nessuna riga ha superato la mappatura
    """
    text = decode_export(data, encoding)
    rows, broken = read_rows(text, delimiter)

    total = len(rows) + broken
    if total == 0:
        raise IngestionError(IngestionError.EMPTY, "Keine Daten in der CSV-Datei gefunden")

    bookings = map_rows(rows)
    if not bookings:
        raise IngestionError(IngestionError.NO_VALID_ROWS, "Keine gültigen Daten gefunden")

    result = ImportResult(
        bookings=bookings,
        total_rows=total,
        accepted=len(bookings),
        rejected=total - len(bookings),
    )
    logger.info(result.message)
    return result


def parse_booking_export_file(filepath: str, delimiter: str = EXPORT_DELIMITER) -> ImportResult:
    """Legge il file da disco e lo passa a parse_booking_export."""
    try:
        with open(filepath, "rb") as f:
            data = f.read()
    except OSError as e:
        raise IngestionError(IngestionError.DECODE, f"Fehler beim Lesen der Datei: {e}")
    return parse_booking_export(data, delimiter=delimiter)
