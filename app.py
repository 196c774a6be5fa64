"""
Analisi prenotazioni - dashboard Streamlit sul file esportato dal gestionale.
I dati restano in memoria (session_state) e vengono sostituiti a ogni upload.
"""

import streamlit as st
import pandas as pd
import os
import sys
from dataclasses import asdict
from datetime import date

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import FILTER_ARRIVAL, FILTER_BOOKING, TOP_METRICS, UNSPECIFIED
from core.errors import IngestionError
from core.logs import configure_logging
from parsers.booking_export import parse_booking_export
from reports.export import export_frame, to_csv_bytes, to_excel_bytes
from reports.filters import FilterCriteria, date_bounds, select_bookings
from reports.kpi import compare_kpis
from reports.rollup import (
    accommodation_summary,
    list_booking_sources,
    rollup_accommodations,
    top_accommodations,
)
from reports.sources import source_distribution
from reports.timeseries import (
    booking_hour_distribution,
    booking_month_by_arrival_month,
    daily_totals,
    month_of_year_comparison,
    month_of_year_totals,
    monthly_revenue_per_night_by_source,
    postal_region_distribution,
    series_for,
)

configure_logging()

st.set_page_config(
    page_title="Buchungsanalyse",
    page_icon="📊",
    layout="wide",
)

st.title("📊 Buchungsanalyse")


def fmt_eur(value: float) -> str:
    return f"{value:,.2f} €".replace(",", "X").replace(".", ",").replace("X", ".")


# ── Upload ───────────────────────────────────────────────────────────────────
with st.sidebar:
    st.header("Daten importieren")
    uploaded = st.file_uploader("Export-Datei (CSV, UTF-16)", type=["csv", "txt"])
    file_key = (uploaded.name, uploaded.size) if uploaded is not None else None
    if file_key is not None and st.session_state.get("file_key") != file_key:
        try:
            result = parse_booking_export(uploaded.getvalue())
            st.session_state["bookings"] = result.bookings
            st.session_state["file_key"] = file_key
            st.session_state["import_message"] = result.message
        except IngestionError as e:
            # nessun risultato parziale: i dati precedenti vengono scartati
            st.session_state.pop("bookings", None)
            st.session_state.pop("file_key", None)
            st.error(e.message)
    if "import_message" in st.session_state and "bookings" in st.session_state:
        st.success(st.session_state["import_message"])

bookings = st.session_state.get("bookings", [])
if not bookings:
    st.info("Keine Daten. Bitte die Export-Datei in der Seitenleiste hochladen.")
    st.stop()


# ── Filtri ───────────────────────────────────────────────────────────────────
col1, col2, col3 = st.columns(3)
with col1:
    filter_type = st.selectbox(
        "Filtermodus",
        [FILTER_BOOKING, FILTER_ARRIVAL],
        format_func=lambda x: "Nach Buchungsdatum" if x == FILTER_BOOKING else "Nach Anreisedatum",
    )
    compare = st.toggle("Jahresvergleich", value=False)
with col2:
    today = date.today()
    if compare:
        year = st.number_input("Jahr", value=today.year, step=1)
        comparison_year = st.number_input("Vergleichsjahr", value=today.year - 1, step=1)
        criteria = FilterCriteria(filter_type=filter_type, year=int(year), compare=True,
                                  comparison_year=int(comparison_year))
    else:
        bounds = date_bounds(bookings)
        # default: mese dell'ultimo arrivo presente nel file
        last = bounds[1] if bounds else today
        default = (last.replace(day=1), last)
        picked = st.date_input("Zeitraum", value=default)
        start, end = picked if isinstance(picked, tuple) and len(picked) == 2 else default
        criteria = FilterCriteria(filter_type=filter_type, start=start, end=end)
with col3:
    criteria.search = st.text_input("Unterkunft suchen", value="")
    sources = ["Alle"] + list_booking_sources(bookings)
    sel_source = st.selectbox("Buchungsquelle", sources)

selection = select_bookings(bookings, criteria)
current, comparison = selection.current, selection.comparison


# ── KPI ──────────────────────────────────────────────────────────────────────
report = compare_kpis(current, comparison)
kpi = report.current
delta = report.delta or {}

k1, k2, k3, k4 = st.columns(4)
k1.metric("Umsatz", fmt_eur(kpi.total_revenue),
          fmt_eur(delta["total_revenue"]) if delta else None)
k2.metric("Provision inkl. Servicepauschale", fmt_eur(kpi.total_commission),
          fmt_eur(delta["total_commission"]) if delta else None)
k3.metric("Buchungen", kpi.total_bookings,
          int(delta["total_bookings"]) if delta else None)
k4.metric("Stornoquote", f"{kpi.cancellation_rate:.1f} %",
          f"{delta['cancellation_rate']:.1f} %" if delta else None, delta_color="inverse")

k5, k6, k7, k8 = st.columns(4)
k5.metric("Nächte", kpi.total_nights, int(delta["total_nights"]) if delta else None)
k6.metric("Ø Nächte", f"{kpi.average_nights:.2f}")
k7.metric("Ø Umsatz pro Nacht", fmt_eur(kpi.average_revenue_per_night))
k8.metric("Telefonische Buchungen", f"{kpi.phone_bookings} ({kpi.phone_bookings_percent:.1f} %)")

with st.expander("Buchungsarten und Telefonbuchungen"):
    st.dataframe(pd.DataFrame([asdict(t) for t in kpi.booking_types]).round(1),
                 use_container_width=True, hide_index=True)
    st.dataframe(pd.DataFrame([asdict(p) for p in kpi.phone_bookings_by_person]).round(1),
                 use_container_width=True, hide_index=True)

st.divider()


# ── Tabs ─────────────────────────────────────────────────────────────────────
tab_top, tab_ranking, tab_sources, tab_months, tab_more, tab_list = st.tabs(
    ["🏠 Unterkünfte", "🏆 Top 30", "🔗 Buchungsquellen", "📅 Monate", "📈 Analysen", "📋 Buchungen"]
)

with tab_top:
    stats = rollup_accommodations(
        current,
        selection.window,
        comparison=comparison,
        comparison_window=selection.comparison_window,
        search=criteria.search,
        source=None if sel_source == "Alle" else sel_source,
    )
    rows = []
    for s in stats:
        rows.append({
            "Unterkunft": s.accommodation or UNSPECIFIED,
            "Umsatz €": round(s.total_revenue, 2),
            "Provision €": round(s.total_commission, 2),
            "Buchungen": s.booking_count,
            "Stornos": s.cancelled_count,
            "Nächte": s.total_nights,
            "Auslastung %": round(s.occupancy_rate, 1),
            "Δ Umsatz €": round(s.difference.revenue, 2) if s.difference else None,
            "Quellen": ", ".join(f"{k}: {v}" for k, v in s.booking_sources.items()),
        })
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
    st.divider()
    names = [s.accommodation for s in stats]
    if names:
        sel_acc = st.selectbox("Details zur Unterkunft", names)
        summary = accommodation_summary(current, sel_acc)
        d1, d2, d3, d4 = st.columns(4)
        d1.metric("Umsatz", fmt_eur(summary.total_revenue))
        d2.metric("Buchungen", summary.total_bookings)
        d3.metric("Ø Umsatz", fmt_eur(summary.average_revenue))
        d4.metric("Ø Nächte", f"{summary.average_nights:.1f}")
        apartments = stats[names.index(sel_acc)].apartments.values()
        st.dataframe(pd.DataFrame([{
            "Wohnung": a.apartment_type,
            "Umsatz €": round(a.total_revenue, 2),
            "Buchungen": a.booking_count,
            "Nächte": a.total_nights,
            "Auslastung %": round(a.occupancy_rate, 1),
        } for a in apartments]), use_container_width=True, hide_index=True)

METRIC_LABELS = {
    "revenue": "Umsatz",
    "bookings": "Aktive Buchungen",
    "nights": "Aktive Nächte",
    "cancellation_rate": "Stornoquote",
}

with tab_ranking:
    metric = st.radio("Kennzahl", TOP_METRICS, format_func=METRIC_LABELS.get, horizontal=True)
    ranking = top_accommodations(current, metric)
    if ranking:
        st.bar_chart(pd.DataFrame({METRIC_LABELS[metric]: [e.value for e in ranking]},
                                  index=[e.accommodation for e in ranking]))
        st.dataframe(pd.DataFrame([{
            "Unterkunft": e.accommodation,
            "Umsatz €": round(e.revenue, 2),
            "Aktive Buchungen": e.bookings,
            "Aktive Nächte": e.nights,
            "Stornos": e.cancellations,
            "Stornoquote %": round(e.cancellation_rate, 1),
        } for e in ranking]), use_container_width=True, hide_index=True)

with tab_sources:
    shares = source_distribution(current, comparison)
    if shares:
        df_sources = pd.DataFrame([asdict(s) for s in shares]).drop(columns=["delta"])
        st.dataframe(df_sources.round(2), use_container_width=True, hide_index=True)

with tab_months:
    if comparison is not None:
        st.subheader(f"Provision pro Monat ({series_for(filter_type)})")
        months = month_of_year_comparison(current, comparison, filter_type)
        chart = pd.DataFrame({
            "Aktuell": [m.current.commission for m in months],
            "Vergleich": [m.comparison.commission for m in months],
        }, index=[m.month for m in months])
        st.line_chart(chart)
    else:
        st.subheader(f"Buchungen pro Monat ({series_for(filter_type)})")
        months = month_of_year_totals(current, filter_type)
        st.bar_chart(pd.DataFrame({"Buchungen": [m.bookings for m in months]},
                                  index=[m.month for m in months]))
        st.subheader("Tagesübersicht")
        st.dataframe(pd.DataFrame([asdict(d) for d in daily_totals(current, filter_type)]).round(2),
                     use_container_width=True, hide_index=True)

with tab_more:
    st.subheader("Buchungen nach Uhrzeit")
    st.bar_chart(pd.DataFrame({"Buchungen": booking_hour_distribution(current)}))

    st.subheader("Postleitzahlregionen")
    regions = postal_region_distribution(current, comparison)
    df_regions = pd.DataFrame([asdict(r) for r in regions])
    if comparison is None:
        df_regions = df_regions.drop(columns=["comparison"])
    st.dataframe(df_regions, use_container_width=True, hide_index=True)

    st.subheader("Ø Umsatz pro Nacht nach Quelle (Anreisemonat)")
    per_night = monthly_revenue_per_night_by_source(current)
    if per_night:
        st.line_chart(pd.DataFrame(per_night, index=range(1, 13)))

    st.subheader("Buchungsmonat × Anreisemonat")
    lead_time = booking_month_by_arrival_month(current, comparison)
    st.dataframe(pd.DataFrame(lead_time.current, index=range(1, 13), columns=range(1, 13)),
                 use_container_width=True)
    if lead_time.comparison is not None:
        st.bar_chart(pd.DataFrame({
            "Aktuell": lead_time.current_totals,
            "Vergleich": lead_time.comparison_totals,
        }, index=range(1, 13)))

with tab_list:
    df_show = export_frame(current)
    st.dataframe(df_show, use_container_width=True, hide_index=True)

    col_csv, col_xlsx = st.columns(2)
    with col_csv:
        st.download_button(
            "⬇️ CSV herunterladen",
            to_csv_bytes(df_show),
            file_name="buchungen.csv",
            mime="text/csv",
        )
    with col_xlsx:
        st.download_button(
            "⬇️ Excel herunterladen",
            to_excel_bytes(df_show),
            file_name="buchungen.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
