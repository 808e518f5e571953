"""
MISSION: The Feature Layer.
Aggregates tidied shooting incidents into the report's tables:
borough/year matrices, the unemployment overlay, geographic density bins
and the monthly incident series. Grouping runs as DuckDB SQL over the
registered pandas frame; reshaping and joins happen in pandas.
"""
import numpy as np
import pandas as pd
from scipy import stats
from nyc_shootings.config import Config
from nyc_shootings.errors import EmptyAggregate
from nyc_shootings.utils.db import DatabaseManager
from nyc_shootings.utils.logging import log_step

PER_MILLION = 1_000_000


class FeatureBuilder:
    def __init__(self, db=None, boroughs=None):
        """Initialize the Feature Builder on an in-memory DuckDB connection."""
        self.db = db or DatabaseManager()
        self.boroughs = list(boroughs or Config.BOROUGHS)

    def _register_incidents(self, incidents):
        cols = incidents[["occur_date", "boro", "latitude", "longitude"]]
        self.db.register("incidents", cols)

    def borough_year_counts(self, incidents):
        """
        Year x borough incident matrix.
        Counts are grouped in SQL, then materialized wide with one column per
        borough in fixed order. A borough with no incidents in a year stays
        missing (NaN) rather than zero.
        """
        self._register_incidents(incidents)
        counts = self.db.q_to_df("""
            SELECT
                year(CAST(occur_date AS DATE)) AS year,
                boro,
                COUNT(*) AS incidents
            FROM incidents
            GROUP BY 1, 2
            ORDER BY 1, 2
        """)

        wide = (
            counts.pivot(index="year", columns="boro", values="incidents")
            .reindex(columns=self.boroughs)
            .sort_index()
            .reset_index()
        )
        wide.columns.name = None
        log_step("Borough-year incident counts", wide)
        return wide

    def normalize_by_population(self, raw, population=None):
        """Scales each borough column to incidents per million residents."""
        population = population or Config.BOROUGH_POPULATION
        normalized = raw.copy()
        for boro in [c for c in raw.columns if c != "year"]:
            normalized[boro] = raw[boro] / population[boro] * PER_MILLION
        log_step("Borough-year incidents per million", normalized)
        return normalized

    def join_unemployment(self, normalized, max_unemployment):
        """
        Left join of the per-million matrix with the yearly max unemployment rate.
        Years without an unemployment figure keep NaN. `unemployment_display`
        is the rate x 100, a chart-only rescale so the rate can share an axis
        with per-million counts; it carries no statistical meaning.
        """
        joined = normalized.merge(
            max_unemployment[["year", "max_rate"]],
            on="year",
            how="left",
            validate="one_to_one",
        )
        joined["unemployment_display"] = joined["max_rate"] * 100
        log_step("Join unemployment on year", joined)
        return joined

    def unemployment_correlation(self, joined, min_years=3):
        """Pearson r between each borough's per-million rate and the max unemployment rate."""
        rows = []
        for boro in [c for c in self.boroughs if c in joined.columns]:
            paired = joined[[boro, "max_rate"]].dropna()
            r, p_value = np.nan, np.nan
            if len(paired) >= min_years:
                r, p_value = stats.pearsonr(paired[boro], paired["max_rate"])
            rows.append({"boro": boro, "years": len(paired), "pearson_r": r, "p_value": p_value})
        return pd.DataFrame(rows)

    def geo_density_bins(self, incidents, min_year=None, bin_width=None):
        """
        Counts incidents per (longitude, latitude) grid cell.
        Cells are labelled by their lower-left corner; rows without
        coordinates are left out.
        """
        min_year = Config.GEO_MIN_YEAR if min_year is None else min_year
        bin_width = bin_width or Config.GEO_BIN_WIDTH

        self._register_incidents(incidents)
        points = self.db.q_to_df("""
            SELECT longitude, latitude
            FROM incidents
            WHERE year(CAST(occur_date AS DATE)) >= ?
        """, [min_year]).dropna()

        if points.empty:
            raise EmptyAggregate(f"No geocoded incidents from {min_year} onwards")

        # Round before flooring so 40.70 / 0.01 does not land on 4069.9999
        cells = pd.DataFrame({
            "lon_bin": np.floor(np.round(points["longitude"] / bin_width, 6)) * bin_width,
            "lat_bin": np.floor(np.round(points["latitude"] / bin_width, 6)) * bin_width,
        }).round(6)

        bins = (
            cells.groupby(["lon_bin", "lat_bin"]).size()
            .reset_index(name="incidents")
            .sort_values(["lon_bin", "lat_bin"])
            .reset_index(drop=True)
        )
        log_step(f"Geo density bins ({min_year}+)", bins)
        return bins

    def monthly_counts(self, incidents, before_year=None):
        """
        Incidents per calendar month, labelled "YYYY - MM".
        The zero-padded label sorts chronologically as text. `month_key` is
        the same label as an integer (200603) for use as a regressor.
        With `before_year`, only months of earlier years are counted.
        """
        self._register_incidents(incidents)
        where, params = "", []
        if before_year is not None:
            where, params = "WHERE year(CAST(occur_date AS DATE)) < ?", [before_year]

        monthly = self.db.q_to_df(f"""
            SELECT
                strftime(CAST(occur_date AS DATE), '%Y - %m') AS month_label,
                COUNT(*) AS incidents
            FROM incidents
            {where}
            GROUP BY 1
            ORDER BY 1
        """, params)

        if monthly.empty:
            window = f"before {before_year}" if before_year is not None else "in the data"
            raise EmptyAggregate(f"No incidents {window} to count by month")

        monthly["month_key"] = monthly["month_label"].str.replace(" - ", "", regex=False).astype("int64")
        label = "Monthly incident counts" + (f" (< {before_year})" if before_year is not None else "")
        log_step(label, monthly)
        return monthly
