import numpy as np
import pandas as pd
import pytest

from siftools.points import Point, PointDataset
from siftools.timeseries import TimeSeries, ValueColumn

from .fixtures.points_fixture import make_timeseries


def test_point_converts_values():
    point = Point("1.0", 2, (1.0, 2, "a"))
    assert point.x == 1.0
    assert point.y == 2.0
    assert point.values == ("1.0", "2", "a")


def test_find_column(observations):
    assert observations.find_column("head") == 3
    assert observations.find_column("HEAD") == 3
    assert observations.find_column(4) == 3
    assert observations.find_column("4") == 3
    with pytest.raises(KeyError):
        observations.find_column("level")
    with pytest.raises(KeyError):
        observations.find_column(5)
    with pytest.raises(KeyError):
        observations.find_column(0)


def test_duplicate_columns():
    with pytest.raises(ValueError, match="not unique"):
        PointDataset(("x", "y", "ID", "id"))


def test_value_count_mismatch():
    with pytest.raises(ValueError, match="expected 3"):
        PointDataset(("x", "y", "id"), (Point(0.0, 0.0, ("0", "0")),))


def test_invalid_index_column():
    with pytest.raises(ValueError, match="Invalid index column"):
        PointDataset(("x", "y"), index_column=3)


def test_with_points(observations):
    subset = observations.with_points(observations.points[:2])
    assert len(subset) == 2
    assert subset.columns == observations.columns
    assert len(observations) == 4


def test_has_timeseries(observations, timeseries_dataset):
    assert not observations.has_timeseries()
    assert timeseries_dataset.has_timeseries()


def test_dataframe_roundtrip(observations):
    df = observations.to_dataframe()
    assert list(df.columns) == ["x", "y", "id", "head"]
    assert df["id"].tolist() == ["a", "b", "c", "d"]
    assert PointDataset.from_dataframe(df) == observations


def test_from_dataframe_coordinates():
    df = pd.DataFrame({"name": ["a"], "east": [1.5], "north": ["2,5"]})
    dataset = PointDataset.from_dataframe(df, x="east", y="north")
    point = dataset.points[0]
    assert (point.x, point.y) == (1.5, 2.5)
    assert point.values == ("a", "1.5", "2,5")


def test_timeseries_shape_mismatch():
    with pytest.raises(ValueError, match="timestamps"):
        TimeSeries(
            np.array(["2020-01-01"], dtype="datetime64[ns]"),
            (ValueColumn("head", -9999.0, [1.0, 2.0]),),
        )


def test_timeseries_sorted():
    ts = make_timeseries(["2020-01-01", "2020-01-01", "2020-01-02"], [1, 2, 3])
    assert ts.is_sorted()
    assert not make_timeseries(["2020-01-02", "2020-01-01"], [1, 2]).is_sorted()


def test_timeseries_select():
    ts = make_timeseries(["2020-01-01", "2020-01-02", "2020-01-03"], [1.0, 2.0, 3.0])
    selected = ts.select("20200102", None)
    assert list(selected.columns[0].values) == [2.0, 3.0]
    selected = ts.select(None, np.datetime64("2020-01-02"))
    assert list(selected.columns[0].values) == [1.0, 2.0]
    # Inclusive at both sides
    assert len(ts.select("20200102", "20200102")) == 1


def test_timeseries_dataframe_roundtrip():
    ts = make_timeseries(["2020-01-01", "2020-01-02"], [1.0, -9999.0])
    df = ts.to_dataframe(nodata_as_nan=True)
    assert list(df.columns) == ["time", "head"]
    assert np.isnan(df["head"].iloc[1])

    back = TimeSeries.from_dataframe(df)
    assert np.array_equal(back.times, ts.times)
    assert list(back.columns[0].values) == [1.0, -9999.0]


def test_timeseries_dataframe_nodata_tolerance():
    ts = make_timeseries(
        ["2020-01-01", "2020-01-02", "2020-01-03"], [-9999.05, -9999.00005, 1.0]
    )
    df = ts.to_dataframe(nodata_as_nan=True)
    assert df["head"].iloc[0] == -9999.05
    assert np.isnan(df["head"].iloc[1])
    assert df["head"].iloc[2] == 1.0
