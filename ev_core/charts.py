from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def adoption_chart(yearly: Dict[str, Any]) -> alt.Chart:
    df = pd.DataFrame({"year": yearly.get("years", []), "count": yearly.get("counts", [])})
    return (
        alt.Chart(df, title="EV Adoption Trends Over Time")
        .mark_area(line=True, point={"filled": True, "size": 50}, opacity=0.15)
        .encode(
            x=alt.X("year:O", title="Model Year", axis=alt.Axis(grid=False)),
            y=alt.Y("count:Q", title="Number of Vehicles", axis=alt.Axis(format="~s", gridDash=[4, 4])),
            tooltip=["year", alt.Tooltip("count:Q", format=",")],
        )
        .properties(height=280)
    )


def manufacturer_chart(stats: Dict[str, Any]) -> alt.Chart:
    df = pd.DataFrame({"manufacturer": stats.get("manufacturers", []), "count": stats.get("counts", [])})
    return (
        alt.Chart(df, title="Top Manufacturers by Registrations")
        .mark_bar(cornerRadiusEnd=4)
        .encode(
            y=alt.Y("manufacturer:N", sort="-x", title=None),
            x=alt.X("count:Q", title="Vehicles", axis=alt.Axis(format="~s")),
            tooltip=["manufacturer", alt.Tooltip("count:Q", format=",")],
        )
        .properties(height=280)
    )


def county_chart(stats: Dict[str, Any]) -> alt.Chart:
    df = pd.DataFrame({"county": stats.get("counties", []), "count": stats.get("counts", [])})
    return (
        alt.Chart(df, title="EV Distribution by County")
        .mark_bar(cornerRadiusEnd=4)
        .encode(
            x=alt.X("county:N", sort="-y", title="County"),
            y=alt.Y("count:Q", title="Vehicles", axis=alt.Axis(format="~s")),
            tooltip=["county", alt.Tooltip("count:Q", format=",")],
        )
        .properties(height=280)
    )


def ev_type_chart(stats: Dict[str, Any]) -> alt.Chart:
    df = pd.DataFrame({"type": stats.get("types", []), "count": stats.get("counts", [])})
    return (
        alt.Chart(df, title="EV Type Distribution")
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("count:Q"),
            color=alt.Color("type:N", title="Type"),
            tooltip=["type", alt.Tooltip("count:Q", format=",")],
        )
        .properties(height=280)
    )


def price_chart(stats: Dict[str, Any]) -> alt.Chart:
    df = pd.DataFrame({"manufacturer": stats.get("manufacturers", []), "avg_price": stats.get("avg_prices", [])})
    return (
        alt.Chart(df, title="Average Price by Manufacturer")
        .mark_bar(color="#f59e0b", cornerRadiusEnd=4)
        .encode(
            x=alt.X("manufacturer:N", sort=None, title="Manufacturer"),
            y=alt.Y("avg_price:Q", title="Average Price ($)", axis=alt.Axis(format="$,.0f")),
            tooltip=["manufacturer", alt.Tooltip("avg_price:Q", format="$,.0f")],
        )
        .properties(height=280)
    )


def build_charts(summary: Dict[str, Any]) -> Dict[str, alt.Chart]:
    return {
        "adoption": adoption_chart(summary.get("yearly_trends", {})),
        "manufacturers": manufacturer_chart(summary.get("manufacturers", {})),
        "counties": county_chart(summary.get("counties", {})),
        "ev_types": ev_type_chart(summary.get("ev_types", {})),
        "prices": price_chart(summary.get("manufacturers", {})),
    }


def build_chart_specs(summary: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    return {name: to_vega_spec(chart) for name, chart in build_charts(summary).items()}
