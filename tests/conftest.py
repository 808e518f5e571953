"""Shared fixtures: small synthetic versions of the two raw sources."""

import matplotlib
matplotlib.use("Agg")

import pandas as pd
import pytest

BOROUGHS = ["BRONX", "BROOKLYN", "MANHATTAN", "QUEENS", "STATEN ISLAND"]

# Incidents per month for a synthetic year: low winter, summer peak
SEASON = [3, 3, 4, 5, 6, 8, 9, 9, 7, 5, 4, 3]


def incident_row(date, boro="BRONX", time="12:30:00", lat="40.7001", lon="-73.9001"):
    return {
        "INCIDENT_KEY": "1",
        "OCCUR_DATE": date,
        "OCCUR_TIME": time,
        "BORO": boro,
        "PRECINCT": "40",
        "Latitude": lat,
        "Longitude": lon,
        "Lon_Lat": f"POINT ({lon} {lat})",
    }


def bls_line(year, rate, month="Jan", area="New York-Newark-Jersey City, NY-NJ-PA Metropolitan Statistical Area"):
    """One ssamatab1.txt data line laid out at the published column offsets."""
    label = f"MT3635620000000  36  35620  {area}"
    counts = "9,000,000   8,500,000     500,000"
    return (
        label.ljust(105)[:105]
        + str(year).rjust(8)
        + month.rjust(7)
        + counts.rjust(52)
        + str(rate).rjust(8)
    )


@pytest.fixture
def make_incidents():
    def _make(rows):
        return pd.DataFrame([incident_row(**r) if isinstance(r, dict) else incident_row(r) for r in rows])
    return _make


@pytest.fixture
def make_unemployment():
    def _make(lines):
        return pd.DataFrame({"raw_line": lines})
    return _make


@pytest.fixture
def raw_incidents():
    """2006-2007 seasonal months, a few 2008 rows and geocoded 2020/2021 rows."""
    rows = []
    i = 0
    for year in (2006, 2007):
        for month, n in enumerate(SEASON, start=1):
            for day in range(1, n + 1):
                rows.append(incident_row(f"{month:02d}/{day:02d}/{year}", boro=BOROUGHS[i % 5]))
                i += 1
    rows.append(incident_row("03/01/2008", boro="QUEENS"))
    rows.append(incident_row("07/04/2008", boro="BROOKLYN"))
    rows.append(incident_row("06/01/2020", boro="BRONX", lat="40.8155", lon="-73.9105"))
    rows.append(incident_row("06/02/2020", boro="BRONX", lat="40.8199", lon="-73.9101"))
    rows.append(incident_row("01/09/2021", boro="MANHATTAN", lat="40.7501", lon="-73.9901"))
    rows.append(incident_row("02/09/2021", boro="MANHATTAN", lat="", lon=""))
    return pd.DataFrame(rows)


@pytest.fixture
def raw_unemployment():
    lines = []
    for year in range(2004, 2023):
        for month, bump in (("Jan", 0.0), ("Jun", 0.7), ("Dec", 0.3)):
            lines.append(bls_line(year, f"{4.0 + (year % 5) + bump:.1f}", month=month))
    lines.append(bls_line(2009, "12.5", area="Buffalo-Cheektowaga, NY Metropolitan Statistical Area"))
    return pd.DataFrame({"raw_line": lines})
