from __future__ import annotations

import logging
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd


logger = logging.getLogger(__name__)

# Source columns referenced by name. Renaming one in the CSV silently empties
# the views that depend on it.
MAKE_COL = "Make"
MODEL_COL = "Model"
MODEL_YEAR_COL = "Model Year"
COUNTY_COL = "County"
EV_TYPE_COL = "Electric Vehicle Type"
RANGE_COL = "Electric Range"
PRICE_COL = "Base MSRP"

MIN_MODEL_YEAR = 2010
MAX_MODEL_YEAR = 2024
TOP_N = 10
RAGGED_ROW_TOLERANCE = 2

PLACEHOLDER_TOKENS = {"", "NULL"}

BEV_LABEL = "Battery Electric Vehicle (BEV)"
PHEV_LABEL = "Plug-in Hybrid Electric Vehicle (PHEV)"

QUOTE_CHARS = "\"'"


# ---------------- Parsing ----------------
def parse_csv_line(line: str) -> List[str]:
    """Split one line on commas, treating double-quoted spans as literal text.

    This is a restricted format, not RFC 4180: a double quote only toggles the
    quoted state and is never kept, so escaped quotes (``""``) inside a field
    are dropped rather than unescaped.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


def clean_cell(value: Optional[str]) -> str:
    if not value:
        return ""
    return value.strip().strip(QUOTE_CHARS)


def parse_csv(text: str) -> pd.DataFrame:
    """Parse delimited text into a frame of string cells keyed by header name.

    Rows with fewer than ``len(headers) - 2`` fields are dropped; shorter
    accepted rows are padded with empty strings. Input without at least a
    header and one more line yields an empty frame.
    """
    lines = (text or "").strip().splitlines()
    if len(lines) < 2:
        logger.warning("CSV text has %d line(s); expected a header and data rows", len(lines))
        return pd.DataFrame()

    headers = [clean_cell(h) for h in parse_csv_line(lines[0])]
    min_fields = len(headers) - RAGGED_ROW_TOLERANCE

    rows: List[List[str]] = []
    dropped = 0
    for raw_line in lines[1:]:
        line = raw_line.strip()
        if not line:
            continue
        values = parse_csv_line(line)
        if len(values) < min_fields:
            dropped += 1
            continue
        rows.append([clean_cell(values[i]) if i < len(values) else "" for i in range(len(headers))])

    if dropped:
        logger.debug("Dropped %d ragged CSV row(s)", dropped)
    logger.info("Parsed %d record(s) with %d column(s)", len(rows), len(headers))
    return pd.DataFrame(rows, columns=headers, dtype=object)


def records_to_frame(records: Iterable[Dict[str, object]]) -> pd.DataFrame:
    """Build a string-valued record frame from already-mapped records."""
    rows = [{str(k): ("" if v is None else str(v)) for k, v in r.items()} for r in records]
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame.from_records(rows).fillna("").astype(object)


# ---------------- Column helpers ----------------
def column_as_series(df: pd.DataFrame, col: str) -> pd.Series:
    if col not in df.columns:
        return pd.Series("", index=df.index, dtype=object)
    val = df[col]
    if isinstance(val, pd.DataFrame):
        return val.iloc[:, 0]
    return val


def text_column(df: pd.DataFrame, col: str, *, upper: bool = False) -> pd.Series:
    """Trimmed text values with placeholders replaced by NA."""
    series = column_as_series(df, col).fillna("").astype(str).str.strip()
    if upper:
        series = series.str.upper()
    return series.mask(series.isin(PLACEHOLDER_TOKENS))


def numeric_column(df: pd.DataFrame, col: str) -> pd.Series:
    """Numeric values of a column with anything unparseable coerced to 0."""
    series = pd.to_numeric(column_as_series(df, col), errors="coerce")
    return series.replace([np.inf, -np.inf], np.nan).fillna(0.0).astype(float)


def year_column(df: pd.DataFrame, col: str = MODEL_YEAR_COL) -> pd.Series:
    """Leading integer of each value (``"2020.0"`` -> 2020), 0 when absent."""
    digits = column_as_series(df, col).fillna("").astype(str).str.extract(r"^\s*([+-]?\d+)", expand=False)
    return pd.to_numeric(digits, errors="coerce").fillna(0).astype(int)


def normalize_ev_type(value: object) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    s = str(value)
    if "Battery Electric" in s or "BEV" in s:
        return BEV_LABEL
    if "Plug-in Hybrid" in s or "PHEV" in s:
        return PHEV_LABEL
    s = s.strip()
    if s in PLACEHOLDER_TOKENS:
        return None
    return s


def ev_type_column(df: pd.DataFrame) -> pd.Series:
    return column_as_series(df, EV_TYPE_COL).map(normalize_ev_type)


def count_by_key(keys: pd.Series) -> pd.Series:
    """Counts per non-null key, in order of first occurrence."""
    keys = keys.dropna()
    if keys.empty:
        return pd.Series(dtype=int)
    return keys.groupby(keys, sort=False).size()


def top_counts(counts: pd.Series, n: int = TOP_N) -> pd.Series:
    """Largest counts first; ties keep first-occurrence order."""
    return counts.sort_values(ascending=False, kind="stable").head(n)


def positive_mean(values: pd.Series) -> Optional[float]:
    positive = values[values > 0]
    if positive.empty:
        return None
    return float(positive.mean())


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def round_int(value: object) -> int:
    rounded = round_half_up(value, 0)
    return int(rounded) if rounded is not None else 0


def format_currency_0(value: object) -> str:
    if value is None or pd.isna(value):
        return "N/A"
    return f"${float(value):,.0f}"


def distinct_ordered(values: pd.Series) -> List[str]:
    """Distinct values by count descending, first occurrence on ties."""
    counts = top_counts(count_by_key(values), n=len(values) or 1)
    return [str(k) for k in counts.index.tolist()]


def is_blank_text(text: Optional[str]) -> bool:
    return not text or not re.search(r"\S", text)
