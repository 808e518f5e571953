"""
Tests for the incident and unemployment tidy steps.
"""

import numpy as np
import pandas as pd
import pytest

from nyc_shootings.errors import ParseFailure
from nyc_shootings.ingest.processor import IncidentProcessor, UnemploymentProcessor
from conftest import BOROUGHS, bls_line


def test_tidy_parses_dates_and_times(make_incidents):
    raw = make_incidents([
        {"date": "01/15/2006", "time": "23:05:09"},
        {"date": "12/31/2019", "time": "00:00:00", "boro": "STATEN ISLAND"},
    ])

    df = IncidentProcessor().tidy(raw)

    assert list(df["occur_date"]) == [pd.Timestamp(2006, 1, 15), pd.Timestamp(2019, 12, 31)]
    assert df["occur_time"].iloc[0] == pd.Timedelta(hours=23, minutes=5, seconds=9)
    assert df["occur_time"].iloc[1] == pd.Timedelta(0)


def test_tidy_keeps_rows_and_drops_combined_coordinates(raw_incidents):
    df = IncidentProcessor().tidy(raw_incidents)

    assert len(df) == len(raw_incidents)
    assert "Lon_Lat" not in df.columns
    # Untouched columns pass through
    assert "INCIDENT_KEY" in df.columns
    assert set(df["boro"]) <= set(BOROUGHS)
    assert (df["occur_date"].dt.year == raw_incidents["OCCUR_DATE"].str[-4:].astype(int)).all()


def test_tidy_normalizes_borough_labels(make_incidents):
    raw = make_incidents([{"date": "01/01/2010", "boro": " staten island "}])
    assert IncidentProcessor().tidy(raw)["boro"].iloc[0] == "STATEN ISLAND"


def test_blank_coordinates_become_nan(make_incidents):
    raw = make_incidents([
        {"date": "01/01/2010", "lat": "", "lon": ""},
        {"date": "01/02/2010", "lat": "40.5", "lon": "-74.1"},
    ])
    df = IncidentProcessor().tidy(raw)

    assert np.isnan(df["latitude"].iloc[0])
    assert df["longitude"].iloc[1] == pytest.approx(-74.1)


@pytest.mark.parametrize("field,row", [
    ("occur_date", {"date": "2006-01-15"}),
    ("occur_date", {"date": "13/45/2006"}),
    ("occur_time", {"date": "01/15/2006", "time": "7pm"}),
    ("boro", {"date": "01/15/2006", "boro": "NEWARK"}),
    ("latitude", {"date": "01/15/2006", "lat": "north"}),
    ("longitude", {"date": "01/15/2006", "lon": "-73.9x"}),
])
def test_unparseable_field_fails_the_run(make_incidents, field, row):
    raw = make_incidents(["02/01/2006", row])

    with pytest.raises(ParseFailure) as exc:
        IncidentProcessor().tidy(raw)

    assert exc.value.column == field
    assert len(exc.value.samples) == 1


def test_missing_column_is_reported(make_incidents):
    raw = make_incidents(["02/01/2006"]).drop(columns=["OCCUR_TIME"])
    with pytest.raises(ParseFailure, match="OCCUR_TIME"):
        IncidentProcessor().tidy(raw)


def test_split_fields_uses_fixed_offsets(make_unemployment):
    raw = make_unemployment([bls_line(2009, "9.1", month="Mar")])
    fields = UnemploymentProcessor().split_fields(raw)

    row = fields.iloc[0]
    assert "New York-Newark-Jersey City" in row["area"]
    assert row["year"] == "2009"
    assert row["month"] == "Mar"
    assert row["rate"] == "9.1"


def test_max_rate_per_year(make_unemployment):
    raw = make_unemployment([bls_line(2009, r) for r in ("9.1", "9.8", "9.3")])
    yearly = UnemploymentProcessor().tidy(raw)

    assert yearly.to_dict("records") == [{"year": 2009, "max_rate": 9.8}]


def test_rates_compare_as_numbers(make_unemployment):
    raw = make_unemployment([bls_line(2010, "9.8"), bls_line(2010, "10.2")])
    assert UnemploymentProcessor().tidy(raw)["max_rate"].iloc[0] == 10.2


def test_year_window_and_metro_filter(raw_unemployment):
    yearly = UnemploymentProcessor().tidy(raw_unemployment)

    assert list(yearly["year"]) == list(range(2006, 2021))
    # The Buffalo 12.5 line must not leak into 2009
    assert yearly.set_index("year").loc[2009, "max_rate"] == pytest.approx(4.0 + 4 + 0.7)

    split = UnemploymentProcessor().split_fields(raw_unemployment)
    for year, max_rate in yearly.itertuples(index=False):
        rates = pd.to_numeric(split.loc[split["year"] == str(year), "rate"])
        assert (max_rate >= rates).all()
        assert max_rate in set(rates)


def test_years_without_rows_are_absent(make_unemployment):
    raw = make_unemployment([bls_line(2007, "4.6"), bls_line(2009, "9.1")])
    assert list(UnemploymentProcessor().tidy(raw)["year"]) == [2007, 2009]


def test_short_line_fails_loudly(make_unemployment):
    truncated = bls_line(2009, "9.1")[:150]
    with pytest.raises(ParseFailure, match="column widths"):
        UnemploymentProcessor().tidy(make_unemployment([truncated]))


def test_bad_rate_fails(make_unemployment):
    with pytest.raises(ParseFailure) as exc:
        UnemploymentProcessor().tidy(make_unemployment([bls_line(2012, "n/a")]))
    assert exc.value.column == "rate"


def test_bad_rate_outside_window_is_ignored(make_unemployment):
    raw = make_unemployment([bls_line(1999, "n/a"), bls_line(2012, "9.4")])
    assert UnemploymentProcessor().tidy(raw)["year"].tolist() == [2012]


def test_bad_year_fails(make_unemployment):
    with pytest.raises(ParseFailure) as exc:
        UnemploymentProcessor().tidy(make_unemployment([bls_line("20x9", "9.1")]))
    assert exc.value.column == "year"
    assert exc.value.samples == ["20x9"]
