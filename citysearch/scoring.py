# -*- coding: utf-8 -*-
"""
Suggestion scoring.

text only:      score = 1 / (levenshtein(query, name) + 1)
text+location:  score = w * text_score + (1 - w) * reference_km / (distance_km + 1)

Only names that contain the query as a (not necessarily contiguous) subsequence are scored.
Everything here is a pure function of its arguments; the Gazetteer is never mutated,
so concurrent callers can share one instance.
"""
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

from haversine import Unit, haversine
from rapidfuzz.distance import Levenshtein

from .gazetteer import Gazetteer, ScoredPlace
from .utils import env_float

# +1 offsets keep a perfect match (distance 0) away from /0
EDIT_DISTANCE_OFFSET = 1
DISTANCE_OFFSET_KM = 1.0
MIN_REFERENCE_KM = 1.0

# Larger than any in-region span for a national gazetteer (GB). Tunable, not a law.
DEFAULT_DISTANCE_CAP_KM = 1000.0
# share of the text score in the blended score
DEFAULT_TEXT_WEIGHT = 0.5

Match = Tuple[int, float]


@lru_cache(maxsize=None)
def tuning() -> Tuple[float, float]:
    """(distance cap km, text weight) from CITYSEARCH_DISTANCE_CAP_KM / CITYSEARCH_TEXT_WEIGHT, read once."""
    cap = env_float("CITYSEARCH_DISTANCE_CAP_KM", DEFAULT_DISTANCE_CAP_KM, lo=MIN_REFERENCE_KM)
    weight = env_float("CITYSEARCH_TEXT_WEIGHT", DEFAULT_TEXT_WEIGHT, lo=0.0, hi=1.0)
    return cap, weight


# ---------- string matching ----------
def is_subsequence(needle: str, haystack: str) -> bool:
    if len(needle) > len(haystack):
        return False
    it = iter(haystack)
    return all(ch in it for ch in needle)


def string_score(edit_distance: int) -> float:
    return 1.0 / (edit_distance + EDIT_DISTANCE_OFFSET)


def match_names(query: str, gazetteer: Gazetteer) -> List[Match]:
    """(index into gazetteer, text score) for every name the query is a subsequence of."""
    q = (query or "").lower()
    if not q:
        return []
    out: List[Match] = []
    for idx, name in enumerate(gazetteer.normalized_names):
        if not is_subsequence(q, name):
            continue
        out.append((idx, string_score(Levenshtein.distance(q, name))))
    return out


# ---------- distance ----------
def distance_scores(lat: float, lng: float, coords: Sequence[Tuple[float, float]]) -> List[float]:
    """
    Proximity score per coordinate, same order as `coords`.

    Distances are great-circle (haversine) km; raw degrees are not comparable since a
    degree of longitude shrinks towards the poles. The nearest point sets the reference
    distance, capped (1000 km by default) so one close outlier can't flatten everything else
    when all candidates are far away.
    """
    if not coords:
        return []
    origin = (lat, lng)
    dists = [haversine(origin, c, unit=Unit.KILOMETERS, check=False) for c in coords]
    cap, _ = tuning()
    reference = max(MIN_REFERENCE_KM, min(cap, min(dists)))
    return [reference / (d + DISTANCE_OFFSET_KM) for d in dists]


def blend(text_score: float, dist_score: float, text_weight: Optional[float] = None) -> float:
    if text_weight is None:
        _, text_weight = tuning()
    # arbitrary linear mix; coefficients (or a non-linear mix) are open for tuning
    return text_weight * text_score + (1.0 - text_weight) * dist_score


# ---------- ranking ----------
def rank(results: List[ScoredPlace]) -> List[ScoredPlace]:
    # ties keep whatever order they had; callers must not rely on it
    return sorted(results, key=lambda r: r.score, reverse=True)


def search(gazetteer: Gazetteer, query: str) -> List[ScoredPlace]:
    matches = match_names(query, gazetteer)
    return rank([ScoredPlace(gazetteer[idx], score) for idx, score in matches])


def search_near(gazetteer: Gazetteer, query: str, lat: float, lng: float) -> List[ScoredPlace]:
    matches = match_names(query, gazetteer)
    places = [gazetteer[idx] for idx, _ in matches]
    dist = distance_scores(lat, lng, [(p.lat, p.lng) for p in places])
    return rank([
        ScoredPlace(place, blend(text, d))
        for place, (_, text), d in zip(places, matches, dist)
    ])
