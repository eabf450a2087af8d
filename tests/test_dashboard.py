"""Tests for the dashboard session: filter transitions, fallback and export."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from ev_core.dashboard import EXPORT_FILENAME, EVDashboard, ExportError
from ev_core.data import BEV_LABEL
from ev_core.fallback import FALLBACK_SUMMARY
from ev_core.filters import DashboardFilters


def test_initial_state_summarizes_all_records(sample_csv: str) -> None:
    """A new session has default filters and a summary of the full data."""

    dashboard = EVDashboard.from_text(sample_csv, source="memory")

    assert dashboard.filters == DashboardFilters()
    assert dashboard.summary["kpis"]["total_evs"] == 6
    assert dashboard.source == "memory"
    assert not dashboard.used_fallback


def test_set_filter_recomputes_from_original(sample_csv: str) -> None:
    """Each transition filters the original records, not the previous subset."""

    dashboard = EVDashboard.from_text(sample_csv)

    dashboard.set_filter("manufacturer", "NISSAN")
    assert dashboard.summary["kpis"]["total_evs"] == 1

    dashboard.set_filter("manufacturer", "tesla")
    assert dashboard.filters.manufacturer == "TESLA"
    assert dashboard.summary["kpis"]["total_evs"] == 3
    assert dashboard.summary["manufacturers"]["manufacturers"] == ["TESLA"]

    dashboard.set_filter("county", "King")
    assert dashboard.summary["kpis"]["total_evs"] == 3
    assert len(dashboard.current_records) == 3
    assert len(dashboard.original_records) == 6

    dashboard.set_filter("manufacturer", "all")
    dashboard.set_filter("county", "all")
    assert dashboard.summary["kpis"]["total_evs"] == 6


def test_set_filter_unknown_selector_raises(sample_csv: str) -> None:
    """Only known selectors can change."""

    dashboard = EVDashboard.from_text(sample_csv)
    with pytest.raises(ValueError):
        dashboard.set_filter("city", "Seattle")


def test_zero_match_filter_yields_empty_views(sample_csv: str) -> None:
    """A filter matching nothing produces empty views and zero KPIs."""

    dashboard = EVDashboard.from_text(sample_csv)
    summary = dashboard.set_filter("manufacturer", "RIVIAN")

    assert summary["yearly_trends"] == {"years": [], "counts": []}
    assert summary["manufacturers"]["manufacturers"] == []
    assert summary["counties"]["counties"] == []
    assert summary["ev_types"]["types"] == []
    assert summary["top_models"] == []
    assert summary["kpis"]["total_evs"] == 0
    assert summary["kpis"]["avg_range"] == 0


def test_same_filters_give_identical_output(sample_csv: str) -> None:
    """Summaries are a pure function of the original records and filters."""

    dashboard = EVDashboard.from_text(sample_csv)
    filters = {"ev_type": BEV_LABEL, "price_range": "40k-60k"}

    first = json.dumps(dashboard.apply(filters), sort_keys=True)
    second = json.dumps(dashboard.apply(filters), sort_keys=True)

    assert first == second
    assert json.dumps(dashboard.summary_for(filters), sort_keys=True) == first


def test_summary_for_does_not_change_session(sample_csv: str) -> None:
    """Ad-hoc summaries leave the session filters alone."""

    dashboard = EVDashboard.from_text(sample_csv)
    dashboard.summary_for({"manufacturer": "FORD"})

    assert dashboard.filters == DashboardFilters()
    assert dashboard.summary["kpis"]["total_evs"] == 6


def test_fallback_session_uses_builtin_summaries() -> None:
    """Without any source the built-in sample is shown, then filtered from its raw rows."""

    dashboard = EVDashboard.load(sources=["missing.csv"], fetch=lambda source: None)

    assert dashboard.used_fallback
    assert dashboard.source is None
    assert dashboard.summary == FALLBACK_SUMMARY

    dashboard.set_filter("manufacturer", "TESLA")
    assert dashboard.summary["kpis"]["total_evs"] == 2
    assert dashboard.summary["top_models"] == [
        {"make": "TESLA", "model": "MODEL Y", "count": 1},
        {"make": "TESLA", "model": "MODEL 3", "count": 1},
    ]

    dashboard.reset()
    assert dashboard.summary == FALLBACK_SUMMARY


def test_fork_starts_with_default_filters(sample_csv: str) -> None:
    """Forked sessions share records but not filter state."""

    dashboard = EVDashboard.from_text(sample_csv)
    dashboard.set_filter("county", "King")
    forked = dashboard.fork()

    assert forked.filters == DashboardFilters()
    assert forked.summary["kpis"]["total_evs"] == 6
    assert dashboard.filters.county == "King"


def test_export_payload_contains_views_filters_and_timestamp(sample_csv: str) -> None:
    """The export bundles the current views with the active filters."""

    dashboard = EVDashboard.from_text(sample_csv)
    dashboard.set_filter("county", "King")
    now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    payload = json.loads(dashboard.export_json(now=now))

    assert payload["export_date"] == "2024-01-02T03:04:05.000Z"
    assert payload["filters"] == {"manufacturer": "all", "ev_type": "all", "county": "King", "price_range": "all"}
    assert payload["summary"] == dashboard.summary["kpis"]
    assert payload["counties"] == {"counties": ["King"], "counts": [3]}
    assert set(payload) == {
        "summary",
        "yearly_trends",
        "manufacturers",
        "counties",
        "ev_types",
        "top_models",
        "export_date",
        "filters",
    }
    assert EXPORT_FILENAME == "ev-analytics-data.json"


def test_export_failure_raises_export_error(sample_csv: str) -> None:
    """Serialization problems surface as ExportError."""

    dashboard = EVDashboard.from_text(sample_csv)
    dashboard.summary = {**dashboard.summary, "kpis": {"total_evs": object()}}

    with pytest.raises(ExportError):
        dashboard.export_json()


def test_returned_records_do_not_alter_session(sample_csv: str) -> None:
    """Editing the exposed record frames leaves later summaries unchanged."""

    dashboard = EVDashboard.from_text(sample_csv)
    options = dashboard.options()

    dashboard.original_records["Make"] = "CHANGED"
    dashboard.current_records["Make"] = "CHANGED"
    dashboard.set_filter("manufacturer", "TESLA")

    assert dashboard.summary["kpis"]["total_evs"] == 3
    dashboard.current_records["Make"] = "CHANGED"
    dashboard.reset()
    assert dashboard.summary["manufacturers"]["manufacturers"] == ["TESLA", "NISSAN", "CHEVROLET", "FORD"]
    assert dashboard.options() == options


def test_fallback_options_list_displayed_values() -> None:
    """Fallback selectors offer what the precomputed view shows, then the sample values."""

    options = EVDashboard.fallback().options()

    assert options["manufacturer"] == [
        "all", "TESLA", "NISSAN", "CHEVROLET", "BMW", "FORD", "AUDI", "KIA", "HYUNDAI", "MERCEDES-BENZ", "VOLKSWAGEN",
    ]
    assert options["county"][:4] == ["all", "King", "Snohomish", "Pierce"]
    assert len(options["county"]) == 11
    assert options["ev_type"][0] == "all"
    assert options["ev_type"][1] == BEV_LABEL
