from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import pandas as pd
import requests

from ev_core.data import is_blank_text, parse_csv


logger = logging.getLogger(__name__)

DATA_DIR = Path(os.getenv("EV_DATA_DIR", Path(__file__).resolve().parents[1]))
CSV_NAME = "Electric_Vehicle_Population_Data.csv"
REMOTE_CSV_URL = (
    "https://raw.githubusercontent.com/vedant-patil-mapup/analytics-dashboard-assessment/"
    "main/data-to-visualize/Electric_Vehicle_Population_Data.csv"
)
REQUEST_TIMEOUT = 15
REQUEST_HEADERS = {"Accept": "text/csv,text/plain,*/*"}

Fetcher = Callable[[str], Optional[str]]


def default_sources() -> List[str]:
    """Candidate locations, tried in order. ``EV_DATA_SOURCES`` overrides them."""
    override = os.getenv("EV_DATA_SOURCES", "")
    if override.strip():
        return [s.strip() for s in override.split(",") if s.strip()]
    return [
        str(DATA_DIR / "data-to-visualize" / CSV_NAME),
        str(DATA_DIR / CSV_NAME),
        REMOTE_CSV_URL,
    ]


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_text(source: str, timeout: int = REQUEST_TIMEOUT) -> Optional[str]:
    """Raw text of a local file or URL; ``None`` when a local file is absent."""
    if is_remote(source):
        resp = requests.get(source, headers=REQUEST_HEADERS, timeout=timeout)
        resp.raise_for_status()
        return resp.text
    path = Path(source)
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8-sig")


@dataclass(frozen=True)
class LoadedSource:
    records: pd.DataFrame
    source: Optional[str]

    @property
    def used_fallback(self) -> bool:
        return self.source is None


def load_first_available(sources: Optional[Sequence[str]] = None, fetch: Fetcher = fetch_text) -> LoadedSource:
    """Parse the first source that yields non-empty text and at least one record.

    Sources are tried strictly in order and failures only move on to the next
    candidate. When none succeeds the result has no source and an empty frame;
    callers substitute the built-in sample.
    """
    candidates = list(default_sources() if sources is None else sources)
    for source in candidates:
        logger.info("Trying CSV source %s", source)
        try:
            text = fetch(source)
        except Exception as exc:
            logger.info("Failed to load %s: %s", source, exc)
            continue
        if is_blank_text(text):
            logger.info("Source %s is empty", source)
            continue
        df = parse_csv(text)
        if df.empty:
            logger.info("Source %s produced no records", source)
            continue
        logger.info("Loaded %d records from %s", len(df), source)
        return LoadedSource(records=df, source=source)

    logger.warning("No CSV source available (%d tried); using fallback data", len(candidates))
    return LoadedSource(records=pd.DataFrame(), source=None)
