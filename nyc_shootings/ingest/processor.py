import pandas as pd
from nyc_shootings.config import Config
from nyc_shootings.errors import ParseFailure
from nyc_shootings.utils.logging import log_step


class IncidentProcessor:
    """Types the raw NYPD shooting export: dates, times, boroughs and coordinates."""

    COLUMN_MAP = {
        "OCCUR_DATE": "occur_date",
        "OCCUR_TIME": "occur_time",
        "BORO": "boro",
        "Latitude": "latitude",
        "Longitude": "longitude",
    }
    # Duplicates latitude/longitude as a "POINT (lon lat)" string
    REDUNDANT_COLUMNS = ["Lon_Lat"]

    DATE_FORMAT = "%m/%d/%Y"
    TIME_FORMAT = "%H:%M:%S"

    def __init__(self, boroughs=None):
        self.boroughs = tuple(boroughs or Config.BOROUGHS)

    def tidy(self, raw):
        missing = [c for c in self.COLUMN_MAP if c not in raw.columns]
        if missing:
            raise ParseFailure(missing[0], [], "column missing from incident export")

        df = raw.rename(columns=self.COLUMN_MAP)
        df = df.drop(columns=self.REDUNDANT_COLUMNS, errors="ignore")

        df["occur_date"] = self._parse_dates(df["occur_date"])
        df["occur_time"] = self._parse_times(df["occur_time"])
        df["boro"] = self._parse_boroughs(df["boro"])
        df["latitude"] = self._parse_coordinate(df["latitude"], "latitude")
        df["longitude"] = self._parse_coordinate(df["longitude"], "longitude")

        log_step("Tidy incidents", df)
        return df

    def _parse_dates(self, series):
        parsed = pd.to_datetime(series, format=self.DATE_FORMAT, errors="coerce")
        bad = parsed.isna()
        if bad.any():
            raise ParseFailure("occur_date", series[bad].tolist(), f"expected {self.DATE_FORMAT}")
        return parsed

    def _parse_times(self, series):
        # Parse as a clock reading, keep only the offset from midnight
        parsed = pd.to_datetime(series, format=self.TIME_FORMAT, errors="coerce")
        bad = parsed.isna()
        if bad.any():
            raise ParseFailure("occur_time", series[bad].tolist(), f"expected {self.TIME_FORMAT}")
        return parsed - parsed.dt.normalize()

    def _parse_boroughs(self, series):
        boro = series.fillna("").astype(str).str.strip().str.upper()
        bad = ~boro.isin(self.boroughs)
        if bad.any():
            raise ParseFailure("boro", series[bad].tolist(), "unknown borough")
        return boro

    def _parse_coordinate(self, series, name):
        # Blank coordinates are legitimate nulls; anything else must be numeric
        blank = series.isna() | (series.astype(str).str.strip() == "")
        values = pd.to_numeric(series.where(~blank), errors="coerce")
        bad = values.isna() & ~blank
        if bad.any():
            raise ParseFailure(name, series[bad].tolist(), "not a number")
        return values.astype(float)


class UnemploymentProcessor:
    """
    Decodes the BLS LAUS metro table (ssamatab1.txt) into a yearly series.

    Each data line is one metro-area/month observation laid out in fixed
    columns. The offsets below match the table as published through 2021;
    if BLS widens a column every field after it shifts, so lines too short
    to hold a rate are rejected instead of being silently misread.
    """

    LABEL_FIELD = (0, 105)
    YEAR_FIELD = (105, 113)
    MONTH_FIELD = (113, 120)
    # Civilian labor force, employment and unemployment counts
    COUNTS_FIELD = (120, 172)
    RATE_START = 172

    def __init__(self, metro_area=None, year_range=None):
        self.metro_area = metro_area or Config.METRO_AREA
        self.year_range = year_range or Config.UNEMPLOYMENT_YEAR_RANGE

    def split_fields(self, raw):
        """Keeps the metro area's lines and slices each one at the fixed offsets."""
        lines = raw["raw_line"]
        lines = lines[lines.str.contains(self.metro_area, regex=False)]

        short = lines.str.len() <= self.RATE_START
        if short.any():
            raise ParseFailure(
                "raw_line", lines[short].tolist(),
                f"line shorter than {self.RATE_START + 1} characters; column widths may have changed",
            )

        fields = pd.DataFrame({
            "area": lines.str.slice(*self.LABEL_FIELD).str.strip(),
            "year": lines.str.slice(*self.YEAR_FIELD).str.strip(),
            "month": lines.str.slice(*self.MONTH_FIELD).str.strip(),
            "counts": lines.str.slice(*self.COUNTS_FIELD).str.strip(),
            "rate": lines.str.slice(self.RATE_START).str.strip(),
        })
        return fields.reset_index(drop=True)

    def tidy(self, raw):
        """Returns one row per year in range holding the year's highest monthly rate."""
        df = self.split_fields(raw)[["year", "rate"]]

        year = pd.to_numeric(df["year"], errors="coerce")
        if year.isna().any():
            raise ParseFailure("year", df.loc[year.isna(), "year"].tolist())
        df = df.assign(year=year.astype("int64"))

        low, high = self.year_range
        df = df[(df["year"] > low) & (df["year"] < high)]

        # Compare rates as numbers: as text "10.2" would sort below "9.8"
        rate = pd.to_numeric(df["rate"], errors="coerce")
        if rate.isna().any():
            raise ParseFailure("rate", df.loc[rate.isna(), "rate"].tolist())
        df = df.assign(rate=rate)

        yearly = (
            df.groupby("year", as_index=False)["rate"].max()
            .rename(columns={"rate": "max_rate"})
            .sort_values("year")
            .reset_index(drop=True)
        )
        log_step("Tidy unemployment (max rate per year)", yearly)
        return yearly
