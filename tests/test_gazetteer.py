import dataclasses
import io

import pytest

from citysearch.gazetteer import (
    ONLY_GB, EmptyGazetteerError, Gazetteer, GazetteerError, PlaceRecord,
    filter_places, load_gazetteer, only_region,
)

HEADER = "geonameid,name,latitude,longitude,country code\n"


def _rec(name, region=""):
    return PlaceRecord(id=name, name=name, lat=0.0, lng=0.0, region_code=region)


def test_filter_without_filters_keeps_everything():
    recs = [_rec("foo")]
    assert filter_places(recs) == recs


def test_only_gb_drops_other_regions():
    recs = [_rec("foo", "GB"), _rec("bar", "DK")]
    assert filter_places(recs, ONLY_GB) == [_rec("foo", "GB")]


def test_multiple_filters_all_apply():
    recs = [_rec("foo", "GB"), _rec("bar", "DK"), _rec("baz", "GB")]
    kept = filter_places(recs, ONLY_GB, lambda r: r.name == "baz")
    assert kept == [_rec("baz", "GB")]


def test_only_region_keeps_order():
    recs = [_rec("a", "DK"), _rec("b", "GB"), _rec("c", "DK")]
    assert [r.name for r in filter_places(recs, only_region("DK"))] == ["a", "c"]


def test_normalized_name_is_lowercased_once():
    rec = _rec("Woodford Green")
    assert rec.normalized_name == "woodford green"
    with pytest.raises(dataclasses.FrozenInstanceError):
        rec.normalized_name = "other"


def test_empty_gazetteer_fails_at_construction():
    with pytest.raises(EmptyGazetteerError):
        Gazetteer([])
    with pytest.raises(EmptyGazetteerError):
        Gazetteer.from_records([_rec("foo", "DK")], ONLY_GB)


def test_gazetteer_is_ordered_and_indexable():
    g = Gazetteer([_rec("B"), _rec("a")])
    assert len(g) == 2
    assert [r.name for r in g] == ["B", "a"]
    assert g[1].name == "a"
    assert g.normalized_names == ("b", "a")


def test_load_sample_with_gb_filter(sample_csv_path):
    g = load_gazetteer(sample_csv_path, ONLY_GB)
    names = [r.name for r in g]
    assert names[0] == "Wrexham"
    assert "Copenhagen" not in names and "Windhoek" not in names
    assert all(r.region_code == "GB" for r in g)


def test_load_keeps_na_country_code(sample_csv_path):
    g = load_gazetteer(sample_csv_path, only_region("NA"))
    assert [r.name for r in g] == ["Windhoek"]
    assert g[0].lat == pytest.approx(-22.55941)


def test_load_parses_ids_and_coords():
    g = load_gazetteer(io.StringIO(HEADER + "2633485,Wrexham,53.04664,-2.99132,GB\n"))
    rec = g[0]
    assert (rec.id, rec.name, rec.lat, rec.lng, rec.region_code) == (
        "2633485", "Wrexham", 53.04664, -2.99132, "GB",
    )


def test_load_without_region_column():
    g = load_gazetteer(io.StringIO("geonameid,name,latitude,longitude\n1,foo,1.5,2.5\n"))
    assert g[0].region_code == ""


def test_load_empty_input():
    with pytest.raises(GazetteerError, match="failed to read csv"):
        load_gazetteer(io.StringIO(""))


def test_load_missing_columns():
    with pytest.raises(GazetteerError, match="missing required columns: latitude, longitude"):
        load_gazetteer(io.StringIO("geonameid,name\n1,foo\n2,bar\n"))


def test_load_malformed_coordinates():
    with pytest.raises(GazetteerError, match="malformed coordinates"):
        load_gazetteer(io.StringIO(HEADER + "1,foo,north,0.0,GB\n"))


def test_load_nothing_left_after_filtering():
    with pytest.raises(EmptyGazetteerError, match="no places remained after filtering"):
        load_gazetteer(io.StringIO(HEADER + "1,foo,0,0,GB\n2,bar,0,0,GB\n"), lambda r: False)


def test_load_skips_rows_without_name():
    g = load_gazetteer(io.StringIO(HEADER + "1,,0,0,GB\n2,bar,0,0,GB\n"))
    assert [r.name for r in g] == ["bar"]
