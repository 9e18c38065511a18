# -*- coding: utf-8 -*-
import math
from typing import List, Optional, Tuple

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

import structlog

from . import scoring as core
from .gazetteer import Gazetteer, ScoredPlace

logger = structlog.get_logger(__name__)

# -----------------------------------------------------------------------------
# Schemas
# -----------------------------------------------------------------------------
class Suggestion(BaseModel):
    name: str
    latitude: float
    longitude: float
    score: float

class SuggestionsResponse(BaseModel):
    suggestions: List[Suggestion]

# -----------------------------------------------------------------------------
# Query params
# -----------------------------------------------------------------------------
class LatLngError(ValueError):
    pass

def _parse_angle(raw: str, label: str) -> float:
    try:
        val = float(raw)
    except ValueError:
        raise LatLngError(f"{label} was not a number")
    if not math.isfinite(val):
        raise LatLngError(f"{label} was not a number")
    return val

def parse_lat_lng(lat_raw: Optional[str], lng_raw: Optional[str]) -> Optional[Tuple[float, float]]:
    """None when neither is set; both or nothing otherwise."""
    if not lat_raw and not lng_raw:
        return None
    if not lat_raw or not lng_raw:
        raise LatLngError("only one angle was provided")
    return _parse_angle(lat_raw, "latitude"), _parse_angle(lng_raw, "longitude")

def to_response(results: List[ScoredPlace]) -> SuggestionsResponse:
    items = [
        Suggestion(name=r.name, latitude=r.lat, longitude=r.lng, score=r.score)
        for r in results
    ]
    # highest score first, whatever the searcher handed back
    items.sort(key=lambda s: s.score, reverse=True)
    return SuggestionsResponse(suggestions=items)

# -----------------------------------------------------------------------------
# App
# -----------------------------------------------------------------------------
def create_app(gazetteer: Gazetteer) -> FastAPI:
    app = FastAPI(title="citysearch")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/suggestions", response_model=SuggestionsResponse)
    def suggestions(
        q: Optional[str] = Query(None),
        latitude: Optional[str] = Query(None),
        longitude: Optional[str] = Query(None),
    ):
        if not q:
            raise HTTPException(status_code=400, detail="q (query string) must be set in URL")
        try:
            loc = parse_lat_lng(latitude, longitude)
        except LatLngError as e:
            raise HTTPException(status_code=400, detail=f"latitude/longitude error: {e}")

        with structlog.contextvars.bound_contextvars(q=q, located=loc is not None):
            if loc is None:
                results = core.search(gazetteer, q)
            else:
                results = core.search_near(gazetteer, q, loc[0], loc[1])
            logger.info("suggestions", results=len(results))
        return to_response(results)

    @app.get("/health")
    def health():
        return {"status": "ok", "places": len(gazetteer)}

    return app
