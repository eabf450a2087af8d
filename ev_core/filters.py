from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

import pandas as pd

from ev_core.data import (
    COUNTY_COL,
    MAKE_COL,
    PRICE_COL,
    distinct_ordered,
    ev_type_column,
    normalize_ev_type,
    numeric_column,
    text_column,
)


logger = logging.getLogger(__name__)

ALL = "all"

FILTER_FIELDS = ("manufacturer", "ev_type", "county", "price_range")

# Lower bound inclusive, upper bound exclusive; records without a price only
# match ALL.
PRICE_RANGES: Dict[str, Tuple[float, float]] = {
    "under-40k": (0.0, 40000.0),
    "40k-60k": (40000.0, 60000.0),
    "60k-80k": (60000.0, 80000.0),
    "80k-plus": (80000.0, math.inf),
}

FILTER_LABELS = {
    "manufacturer": "All Manufacturers",
    "ev_type": "All Types",
    "county": "All Counties",
    "price_range": "All Prices",
}


@dataclass(frozen=True)
class DashboardFilters:
    manufacturer: str = ALL
    ev_type: str = ALL
    county: str = ALL
    price_range: str = ALL

    def with_value(self, name: str, value: Optional[str]) -> "DashboardFilters":
        if name not in FILTER_FIELDS:
            raise ValueError(f"Unknown filter: {name!r}")
        return normalize_filters({**self.as_dict(), name: value})

    def as_dict(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in FILTER_FIELDS}

    @property
    def is_default(self) -> bool:
        return all(v == ALL for v in self.as_dict().values())


def _as_choice(value: object) -> str:
    if value is None:
        return ALL
    s = str(value).strip()
    if not s or s.lower() == ALL:
        return ALL
    return s


def normalize_filters(raw: Optional[Mapping[str, object]]) -> DashboardFilters:
    raw = raw or {}
    manufacturer = _as_choice(raw.get("manufacturer"))
    if manufacturer != ALL:
        manufacturer = manufacturer.upper()

    price_range = _as_choice(raw.get("price_range"))
    if price_range != ALL and price_range not in PRICE_RANGES:
        logger.warning("Ignoring unknown price range %r", price_range)
        price_range = ALL

    ev_type = _as_choice(raw.get("ev_type"))
    if ev_type != ALL:
        ev_type = normalize_ev_type(ev_type) or ALL

    return DashboardFilters(
        manufacturer=manufacturer,
        ev_type=ev_type,
        county=_as_choice(raw.get("county")),
        price_range=price_range,
    )


def price_range_mask(prices: pd.Series, price_range: str) -> pd.Series:
    low, high = PRICE_RANGES[price_range]
    return (prices > 0) & (prices >= low) & (prices < high)


def apply_filters(df: pd.DataFrame, filters: DashboardFilters) -> pd.DataFrame:
    """Rows of ``df`` matching every selected filter. ``df`` is not modified."""
    if df.empty:
        return df.copy()

    mask = pd.Series(True, index=df.index)
    if filters.manufacturer != ALL:
        mask &= text_column(df, MAKE_COL, upper=True).eq(filters.manufacturer)
    if filters.ev_type != ALL:
        mask &= ev_type_column(df).eq(filters.ev_type)
    if filters.county != ALL:
        mask &= text_column(df, COUNTY_COL).eq(filters.county)
    if filters.price_range != ALL:
        mask &= price_range_mask(numeric_column(df, PRICE_COL), filters.price_range)
    return df[mask].copy()


def filter_options(df: pd.DataFrame) -> Dict[str, List[str]]:
    """Selector options drawn from the unfiltered dataset, ALL first."""
    return {
        "manufacturer": [ALL] + distinct_ordered(text_column(df, MAKE_COL, upper=True)),
        "ev_type": [ALL] + distinct_ordered(ev_type_column(df)),
        "county": [ALL] + distinct_ordered(text_column(df, COUNTY_COL)),
        "price_range": [ALL] + list(PRICE_RANGES),
    }


def describe_filters(filters: DashboardFilters) -> List[str]:
    chips = []
    for name, value in filters.as_dict().items():
        chips.append(FILTER_LABELS[name] if value == ALL else f"{name.replace('_', ' ').title()}: {value}")
    return chips
