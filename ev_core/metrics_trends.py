from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from ev_core.data import MAX_MODEL_YEAR, MIN_MODEL_YEAR, year_column


def compute_yearly_trends(df: pd.DataFrame) -> Dict[str, Any]:
    """Registrations per model year within the tracked window, ascending."""
    years = year_column(df)
    years = years[(years >= MIN_MODEL_YEAR) & (years <= MAX_MODEL_YEAR)]
    counts = years.value_counts().sort_index()
    return {
        "years": [int(y) for y in counts.index.tolist()],
        "counts": [int(c) for c in counts.tolist()],
    }
