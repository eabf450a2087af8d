import logging

import pandas as pd
import streamlit as st

from ev_core.charts import build_charts
from ev_core.dashboard import EXPORT_FILENAME, EVDashboard, ExportError
from ev_core.data import format_currency_0
from ev_core.filters import FILTER_LABELS, describe_filters

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin: 6px 0 12px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@st.cache_resource(show_spinner="Loading EV data…")
def load_dashboard() -> EVDashboard:
    return EVDashboard.load()


def get_session_dashboard() -> EVDashboard:
    # One session per browser tab, sharing the cached original records.
    if "dashboard" not in st.session_state:
        st.session_state["dashboard"] = load_dashboard().fork()
    return st.session_state["dashboard"]


def option_label(name: str):
    return lambda value: FILTER_LABELS[name] if value == "all" else value


def render_export_button(dashboard: EVDashboard):
    try:
        payload = dashboard.export_json()
    except ExportError as exc:
        st.error(f"Error exporting data: {exc}")
        return
    st.download_button("Export JSON", data=payload.encode("utf-8"), file_name=EXPORT_FILENAME, mime="application/json")


# ---------- UI setup ----------
st.set_page_config(page_title="EV Analytics Dashboard", layout="wide")
inject_base_styles()
st.title("Electric Vehicle Analytics Dashboard")

dashboard = get_session_dashboard()
if dashboard.used_fallback:
    st.caption("Showing built-in sample data; the registrations CSV could not be loaded.")
else:
    st.caption(f"Source: {dashboard.source} · {len(dashboard.original_records):,} records")

# ----- Sidebar: filters -----
options = dashboard.options()
with st.sidebar:
    st.markdown("### Filters")
    selected = {
        "manufacturer": st.selectbox("Manufacturer", options["manufacturer"], format_func=option_label("manufacturer")),
        "ev_type": st.selectbox("EV Type", options["ev_type"], format_func=option_label("ev_type")),
        "county": st.selectbox("County", options["county"], format_func=option_label("county")),
        "price_range": st.selectbox("Price Range", options["price_range"], format_func=option_label("price_range")),
    }

if selected != dashboard.filters.as_dict():
    dashboard.apply(selected)
summary = dashboard.summary

chips = "".join(f"<span class='chip'>{txt}</span>" for txt in describe_filters(dashboard.filters))
st.markdown(f"<div class='chip-row'>{chips}</div>", unsafe_allow_html=True)
render_export_button(dashboard)

# ----- KPIs -----
kpis = summary["kpis"]
k1, k2, k3, k4 = st.columns(4)
k1.metric("Total EVs", f"{kpis['total_evs']:,}")
k2.metric("Avg Electric Range", f"{kpis['avg_range']:.1f} mi")
k3.metric("Avg Base MSRP", format_currency_0(kpis["avg_price"]))
k4.metric("Battery Electric", f"{kpis['bev_percentage']}%")

# ----- Charts -----
charts = build_charts(summary)
st.altair_chart(charts["adoption"], use_container_width=True)
c1, c2 = st.columns(2)
c1.altair_chart(charts["manufacturers"], use_container_width=True)
c2.altair_chart(charts["counties"], use_container_width=True)
c3, c4 = st.columns(2)
c3.altair_chart(charts["ev_types"], use_container_width=True)
c4.altair_chart(charts["prices"], use_container_width=True)

# ----- Tables -----
t1, t2 = st.columns(2)
with t1:
    st.subheader("Top Models")
    top_models = pd.DataFrame(summary["top_models"], columns=["make", "model", "count"])
    top_models.insert(0, "rank", range(1, len(top_models) + 1))
    st.dataframe(top_models, hide_index=True, use_container_width=True)
with t2:
    st.subheader("Average Price by Manufacturer")
    manufacturers = summary["manufacturers"]
    prices = pd.DataFrame(
        {
            "manufacturer": manufacturers["manufacturers"],
            "avg_price": [format_currency_0(p) for p in manufacturers["avg_prices"]],
        }
    )
    st.dataframe(prices, hide_index=True, use_container_width=True)
