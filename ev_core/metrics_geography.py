from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from ev_core.data import COUNTY_COL, TOP_N, count_by_key, text_column, top_counts


def compute_county_stats(df: pd.DataFrame, *, top_n: int = TOP_N) -> Dict[str, Any]:
    top = top_counts(count_by_key(text_column(df, COUNTY_COL)), n=top_n)
    return {
        "counties": [str(c) for c in top.index.tolist()],
        "counts": [int(v) for v in top.tolist()],
    }
