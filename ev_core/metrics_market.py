from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from ev_core.data import (
    MAKE_COL,
    MODEL_COL,
    PRICE_COL,
    TOP_N,
    count_by_key,
    ev_type_column,
    numeric_column,
    positive_mean,
    round_int,
    text_column,
    top_counts,
)


def compute_manufacturer_stats(df: pd.DataFrame, *, top_n: int = TOP_N) -> Dict[str, Any]:
    """Top manufacturers by registrations with their average base price.

    Makes are compared upper-cased. The average ignores records without a
    positive price and is 0 for a make that has none.
    """
    makes = text_column(df, MAKE_COL, upper=True)
    top = top_counts(count_by_key(makes), n=top_n)

    prices = numeric_column(df, PRICE_COL)
    avg_prices: List[int] = []
    for make in top.index:
        mean = positive_mean(prices[makes == make])
        avg_prices.append(round_int(mean) if mean is not None else 0)

    return {
        "manufacturers": [str(m) for m in top.index.tolist()],
        "counts": [int(c) for c in top.tolist()],
        "avg_prices": avg_prices,
    }


def compute_top_models(df: pd.DataFrame, *, top_n: int = TOP_N) -> List[Dict[str, Any]]:
    pairs = pd.DataFrame(
        {
            "make": text_column(df, MAKE_COL),
            "model": text_column(df, MODEL_COL),
        }
    ).dropna()
    if pairs.empty:
        return []
    counts = pairs.groupby(["make", "model"], sort=False).size()
    top = top_counts(counts, n=top_n)
    return [{"make": str(make), "model": str(model), "count": int(count)} for (make, model), count in top.items()]


def compute_ev_type_stats(df: pd.DataFrame) -> Dict[str, Any]:
    counts = count_by_key(ev_type_column(df))
    return {
        "types": [str(t) for t in counts.index.tolist()],
        "counts": [int(c) for c in counts.tolist()],
    }
