# -*- coding: utf-8 -*-
"""
In-memory gazetteer: place records, region filters and the CSV loader.

The CSV is GeoNames-shaped (geonameid,name,...,latitude,longitude,...,country code,...);
only the columns listed in REQUIRED_COLUMNS / REGION_COLUMN are used.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Tuple, Union

import pandas as pd
from pandas.errors import EmptyDataError, ParserError

from .utils import read_csv_smart

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["geonameid", "name", "latitude", "longitude"]
REGION_COLUMN = "country code"


class GazetteerError(Exception):
    """Configuration problem with the place data; fatal at startup."""


class EmptyGazetteerError(GazetteerError):
    pass


# ---------- records ----------
@dataclass(frozen=True)
class PlaceRecord:
    id: Union[str, int]
    name: str
    lat: float
    lng: float
    region_code: str = ""
    normalized_name: str = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "normalized_name", self.name.lower())


@dataclass(frozen=True)
class ScoredPlace:
    place: PlaceRecord
    score: float

    @property
    def name(self) -> str:
        return self.place.name

    @property
    def lat(self) -> float:
        return self.place.lat

    @property
    def lng(self) -> float:
        return self.place.lng


# ---------- filters ----------
# False means the record is discarded
FilterFunc = Callable[[PlaceRecord], bool]


def only_region(code: str) -> FilterFunc:
    def _keep(rec: PlaceRecord) -> bool:
        return rec.region_code == code
    return _keep


ONLY_GB: FilterFunc = only_region("GB")


def filter_places(records: Iterable[PlaceRecord], *filters: FilterFunc) -> List[PlaceRecord]:
    """New list, original order, with records that passed every filter."""
    return [rec for rec in records if all(f(rec) for f in filters)]


# ---------- gazetteer ----------
class Gazetteer:
    """Read-only, ordered collection of places. Never empty."""

    __slots__ = ("_records", "_names")

    def __init__(self, records: Iterable[PlaceRecord]):
        recs = tuple(records)
        if not recs:
            raise EmptyGazetteerError("no places remained after filtering")
        self._records: Tuple[PlaceRecord, ...] = recs
        # same order as _records, so match results index straight back into it
        self._names: Tuple[str, ...] = tuple(r.normalized_name for r in recs)

    @classmethod
    def from_records(cls, records: Iterable[PlaceRecord], *filters: FilterFunc) -> "Gazetteer":
        return cls(filter_places(records, *filters))

    @property
    def records(self) -> Tuple[PlaceRecord, ...]:
        return self._records

    @property
    def normalized_names(self) -> Tuple[str, ...]:
        return self._names

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PlaceRecord]:
        return iter(self._records)

    def __getitem__(self, idx: int) -> PlaceRecord:
        return self._records[idx]

    def __repr__(self) -> str:
        return f"Gazetteer(places={len(self._records)})"


# ---------- CSV loading ----------
def _read_frame(source) -> pd.DataFrame:
    try:
        # strings everywhere, no NA guessing: "NA" is Namibia, not a missing value
        df = read_csv_smart(source, dtype=str, keep_default_na=False)
    except (EmptyDataError, ParserError) as e:
        raise GazetteerError(f"failed to read csv: {e}") from e

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise GazetteerError(f"missing required columns: {', '.join(missing)}")
    # short rows come back as NaN even with dtype=str
    return df.fillna("")


def _to_coords(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    for col in ("latitude", "longitude"):
        try:
            out[col] = pd.to_numeric(out[col].str.strip(), errors="raise")
        except (ValueError, TypeError) as e:
            raise GazetteerError(f"malformed coordinates in column '{col}': {e}") from e
    return out


def records_from_frame(df: pd.DataFrame) -> List[PlaceRecord]:
    df = _to_coords(df)
    has_region = REGION_COLUMN in df.columns
    out: List[PlaceRecord] = []
    skipped = 0
    for rec in df.to_dict(orient="records"):
        name = (rec.get("name") or "").strip()
        if not name:
            skipped += 1
            continue
        out.append(PlaceRecord(
            id=rec.get("geonameid", ""),
            name=name,
            lat=float(rec["latitude"]),
            lng=float(rec["longitude"]),
            region_code=(rec.get(REGION_COLUMN) or "").strip() if has_region else "",
        ))
    if skipped:
        logger.warning("gazetteer: skipped %d rows without a name", skipped)
    return out


def load_gazetteer(source, *filters: FilterFunc) -> Gazetteer:
    """
    Build a Gazetteer from a CSV path or file-like object.
    Raises GazetteerError (or EmptyGazetteerError) when the data can't be used.
    """
    df = _read_frame(source)
    records = records_from_frame(df)
    kept = filter_places(records, *filters)
    logger.info("gazetteer: loaded %d places, %d kept after filtering", len(records), len(kept))
    return Gazetteer(kept)
