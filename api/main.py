from __future__ import annotations

import logging
import math
from functools import lru_cache

import numpy as np
import pandas as pd
from fastapi import Depends, FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import DashboardFiltersModel, OptionsResponse
from ev_core.charts import build_chart_specs
from ev_core.dashboard import EXPORT_FILENAME, EVDashboard, ExportError
from ev_core.filters import DashboardFilters, normalize_filters


app = FastAPI(title="EV Analytics Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_dashboard() -> EVDashboard:
    return EVDashboard.load()


def _filters_from_model(model: DashboardFiltersModel) -> DashboardFilters:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/options")
def meta_options(dashboard: EVDashboard = Depends(get_dashboard)):
    try:
        payload = OptionsResponse(
            options=dashboard.options(),
            source=dashboard.source,
            record_count=int(len(dashboard.original_records)),
            used_fallback=dashboard.used_fallback,
        )
        return _json(payload.model_dump())
    except Exception as exc:
        logger.exception("meta_options failed")
        return _error(exc)


@app.post("/summary")
def summary(filters: DashboardFiltersModel, dashboard: EVDashboard = Depends(get_dashboard)):
    try:
        f = _filters_from_model(filters)
        return _json({"filters": f.as_dict(), **dashboard.summary_for(f)})
    except Exception as exc:
        logger.exception("summary failed")
        return _error(exc)


@app.post("/charts")
def charts(filters: DashboardFiltersModel, dashboard: EVDashboard = Depends(get_dashboard)):
    try:
        f = _filters_from_model(filters)
        return _json({"filters": f.as_dict(), "charts": build_chart_specs(dashboard.summary_for(f))})
    except Exception as exc:
        logger.exception("charts failed")
        return _error(exc)


@app.post("/export")
def export(filters: DashboardFiltersModel, dashboard: EVDashboard = Depends(get_dashboard)):
    session = dashboard.fork()
    try:
        session.apply(_filters_from_model(filters))
        body = session.export_json()
    except ExportError as exc:
        return _error(exc)
    except Exception as exc:
        logger.exception("export failed")
        return _error(exc)
    return Response(
        content=body.encode("utf-8"),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )
