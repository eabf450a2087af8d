from __future__ import annotations

import copy
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd

from ev_core.data import parse_csv
from ev_core.fallback import fallback_records, fallback_summary
from ev_core.filters import (
    ALL,
    DashboardFilters,
    apply_filters,
    filter_options,
    normalize_filters,
)
from ev_core.metrics_geography import compute_county_stats
from ev_core.metrics_kpis import compute_kpis
from ev_core.metrics_market import compute_ev_type_stats, compute_manufacturer_stats, compute_top_models
from ev_core.metrics_trends import compute_yearly_trends
from ev_core.sources import Fetcher, fetch_text, load_first_available


logger = logging.getLogger(__name__)

EXPORT_FILENAME = "ev-analytics-data.json"

FiltersLike = Union[DashboardFilters, Mapping[str, object], None]


class ExportError(RuntimeError):
    """The summary bundle could not be serialized for download."""


def compute_summary(df: pd.DataFrame) -> Dict[str, Any]:
    """Every summary view for one record set. Each view is computed independently."""
    return {
        "yearly_trends": compute_yearly_trends(df),
        "manufacturers": compute_manufacturer_stats(df),
        "counties": compute_county_stats(df),
        "ev_types": compute_ev_type_stats(df),
        "top_models": compute_top_models(df),
        "kpis": compute_kpis(df),
    }


def _as_filters(filters: FiltersLike) -> DashboardFilters:
    if isinstance(filters, DashboardFilters):
        return filters
    return normalize_filters(filters)


class EVDashboard:
    """One dashboard session: the original records, the active filters and the current summaries.

    The original frame is never modified. Every filter change filters it from
    scratch and replaces the summary bundle as a whole.
    """

    def __init__(
        self,
        records: pd.DataFrame,
        *,
        source: Optional[str] = None,
        baseline_summary: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._original = records.copy()
        self._baseline = copy.deepcopy(baseline_summary) if baseline_summary is not None else None
        self.source = source
        self.filters = DashboardFilters()
        self.current_records = self._original
        self.summary = self._summarize(self.filters)

    # ---------------- Construction ----------------
    @classmethod
    def from_text(cls, text: str, *, source: Optional[str] = None) -> "EVDashboard":
        return cls(parse_csv(text), source=source)

    @classmethod
    def fallback(cls) -> "EVDashboard":
        return cls(fallback_records(), baseline_summary=fallback_summary())

    @classmethod
    def load(cls, sources: Optional[Sequence[str]] = None, fetch: Fetcher = fetch_text) -> "EVDashboard":
        loaded = load_first_available(sources, fetch=fetch)
        if loaded.used_fallback:
            return cls.fallback()
        return cls(loaded.records, source=loaded.source)

    # ---------------- State ----------------
    @property
    def original_records(self) -> pd.DataFrame:
        """Copy of the records the session was built from."""
        return self._original.copy()

    @property
    def used_fallback(self) -> bool:
        return self._baseline is not None

    def fork(self) -> "EVDashboard":
        """New session over the same original records, with default filters."""
        return EVDashboard(self._original, source=self.source, baseline_summary=self._baseline)

    def options(self) -> Dict[str, List[str]]:
        options = filter_options(self._original)
        if self._baseline is None:
            return options
        # Offer the values the precomputed view displays, then any extra ones
        # found in the sample rows.
        shown = {
            "manufacturer": self._baseline["manufacturers"]["manufacturers"],
            "ev_type": self._baseline["ev_types"]["types"],
            "county": self._baseline["counties"]["counties"],
        }
        for name, values in shown.items():
            merged = [ALL] + [str(v) for v in values if v != ALL]
            merged += [v for v in options[name] if v not in merged]
            options[name] = merged
        return options

    def _summarize(self, filters: DashboardFilters) -> Dict[str, Any]:
        # The built-in sample only carries a few raw rows, so its unfiltered
        # view comes from the precomputed summaries.
        if self._baseline is not None and filters.is_default:
            self.current_records = self._original.copy()
            return copy.deepcopy(self._baseline)
        self.current_records = apply_filters(self._original, filters)
        return compute_summary(self.current_records)

    def apply(self, filters: FiltersLike) -> Dict[str, Any]:
        self.filters = _as_filters(filters)
        self.summary = self._summarize(self.filters)
        logger.debug("Applied filters %s -> %d records", self.filters.as_dict(), len(self.current_records))
        return self.summary

    def set_filter(self, name: str, value: Optional[str]) -> Dict[str, Any]:
        return self.apply(self.filters.with_value(name, value))

    def reset(self) -> Dict[str, Any]:
        return self.apply(DashboardFilters())

    def summary_for(self, filters: FiltersLike) -> Dict[str, Any]:
        """Summary bundle for ``filters`` without touching the session state."""
        filt = _as_filters(filters)
        if self._baseline is not None and filt.is_default:
            return copy.deepcopy(self._baseline)
        return compute_summary(apply_filters(self._original, filt))

    # ---------------- Export ----------------
    def export_payload(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        return {
            "summary": self.summary["kpis"],
            "yearly_trends": self.summary["yearly_trends"],
            "manufacturers": self.summary["manufacturers"],
            "counties": self.summary["counties"],
            "ev_types": self.summary["ev_types"],
            "top_models": self.summary["top_models"],
            "export_date": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "filters": self.filters.as_dict(),
        }

    def export_json(self, now: Optional[datetime] = None) -> str:
        try:
            return json.dumps(self.export_payload(now), indent=2)
        except (KeyError, TypeError, ValueError) as exc:
            logger.exception("Export failed")
            raise ExportError(f"Could not export dashboard data: {exc}") from exc
