from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from ev_core.data import (
    BEV_LABEL,
    PRICE_COL,
    RANGE_COL,
    ev_type_column,
    numeric_column,
    positive_mean,
    round_half_up,
    round_int,
)


def compute_kpis(df: pd.DataFrame) -> Dict[str, Any]:
    """Headline numbers for the KPI tiles.

    Averages only count positive values, so records with a missing or zero
    range/price do not drag the mean down. Every figure is 0 for an empty set.
    """
    total = int(len(df))

    avg_range = positive_mean(numeric_column(df, RANGE_COL))
    avg_price = positive_mean(numeric_column(df, PRICE_COL))
    bev_count = int(ev_type_column(df).eq(BEV_LABEL).sum()) if total else 0

    return {
        "total_evs": total,
        "avg_range": round_half_up(avg_range, 1) if avg_range is not None else 0.0,
        "avg_price": round_int(avg_price) if avg_price is not None else 0,
        "bev_percentage": round_int(100.0 * bev_count / total) if total else 0,
    }
