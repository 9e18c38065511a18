# -*- coding: utf-8 -*-
from .gazetteer import (
    ONLY_GB, EmptyGazetteerError, Gazetteer, GazetteerError, PlaceRecord, ScoredPlace,
    filter_places, load_gazetteer, only_region,
)
from .scoring import search, search_near

__all__ = [
    "ONLY_GB", "EmptyGazetteerError", "Gazetteer", "GazetteerError", "PlaceRecord",
    "ScoredPlace", "filter_places", "load_gazetteer", "only_region", "search", "search_near",
]
