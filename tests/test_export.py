import io

import pandas as pd
import pytest

from conftest import make_booking
from reports.export import EXPORT_COLUMNS, export_frame, to_csv_bytes, to_excel_bytes


def _frame():
    return export_frame([
        make_booking(revenue=300.0),
        make_booking(booking_code="B-2", revenue=-80.0, is_cancelled=True,
                     arrival_date="", departure_date=""),
    ])


def test_export_frame_columns_and_values() -> None:
    df = _frame()
    assert list(df.columns) == list(EXPORT_COLUMNS.values())
    first = df.iloc[0]
    assert first["Anreisedatum"] == "01.06.2024"
    assert first["Buchungsdatum"] == "10.05.2024"
    assert first["Servicepauschale"] == pytest.approx(25.0)
    assert first["Nächte"] == 3
    assert first["Stornierung"] == ""
    second = df.iloc[1]
    assert second["Stornierung"] == "Ja"
    assert second["Anreisedatum"] == ""
    assert second["Nächte"] == 0
    assert second["Servicepauschale"] == 0


def test_export_empty() -> None:
    df = export_frame([])
    assert df.empty
    assert list(df.columns) == list(EXPORT_COLUMNS.values())


def test_csv_bytes() -> None:
    data = to_csv_bytes(_frame())
    text = data.decode("utf-8-sig")
    header = text.splitlines()[0].split(";")
    assert header[0] == "Buchungscode"
    assert "300,0" in text


def test_excel_bytes_roundtrip() -> None:
    data = to_excel_bytes(_frame())
    assert data[:2] == b"PK"
    df = pd.read_excel(io.BytesIO(data), sheet_name="Buchungen")
    assert len(df) == 2
    assert df.columns[0] == "Buchungscode"
