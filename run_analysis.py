from dataclasses import dataclass
import pandas as pd
from nyc_shootings.config import Config
from nyc_shootings.errors import AnalysisError
from nyc_shootings.ingest.fetcher import ShootingFetcher, UnemploymentFetcher, load_incidents, load_unemployment
from nyc_shootings.ingest.processor import IncidentProcessor, UnemploymentProcessor
from nyc_shootings.features.build_features import FeatureBuilder
from nyc_shootings.models.seasonal_spline import SeasonalSplineModel
from nyc_shootings.utils.db import DatabaseManager
from nyc_shootings.utils.logging import clear_pipeline_log, console, show_frame, show_pipeline_table


@dataclass
class AnalysisResults:
    borough_year: pd.DataFrame
    borough_year_per_million: pd.DataFrame
    joined: pd.DataFrame
    correlation: pd.DataFrame
    geo_bins: pd.DataFrame
    monthly: pd.DataFrame
    monthly_training: pd.DataFrame
    fitted: pd.DataFrame
    r_squared: float
    model_summary: str


def run_pipeline(raw_incidents, raw_unemployment, population=None):
    """Runs every stage after loading and returns the report's tables."""
    clear_pipeline_log()
    incidents = IncidentProcessor().tidy(raw_incidents)
    unemployment = UnemploymentProcessor().tidy(raw_unemployment)

    with DatabaseManager() as db:
        fb = FeatureBuilder(db)
        raw = fb.borough_year_counts(incidents)
        per_million = fb.normalize_by_population(raw, population)
        joined = fb.join_unemployment(per_million, unemployment)
        correlation = fb.unemployment_correlation(joined)
        geo_bins = fb.geo_density_bins(incidents)
        monthly = fb.monthly_counts(incidents)
        training = fb.monthly_counts(incidents, before_year=Config.TRAINING_CUTOFF_YEAR)

    model = SeasonalSplineModel().fit(training)

    return AnalysisResults(
        borough_year=raw,
        borough_year_per_million=per_million,
        joined=joined,
        correlation=correlation,
        geo_bins=geo_bins,
        monthly=monthly,
        monthly_training=training,
        fitted=model.predict(),
        r_squared=model.r_squared,
        model_summary=model.summary(),
    )


def render_report(results, analyzer):
    show_frame("Incidents by Borough and Year", results.borough_year, float_format="{:,.0f}")
    show_frame("Incidents per Million Residents (2010 census)", results.borough_year_per_million)
    show_frame("Per-Million Incidents with Peak Unemployment", results.joined)
    show_frame("Borough Rate vs. Unemployment (Pearson)", results.correlation, float_format="{:.3f}")
    console.rule("Seasonal Spline (OLS)")
    console.print(results.model_summary, markup=False, highlight=False)

    analyzer.plot_borough_year(results.borough_year, "NYC Shooting Incidents by Borough",
                               "Incidents", filename="plot_borough_year_raw")
    analyzer.plot_borough_year(results.borough_year_per_million, "Shooting Incidents per Million Residents",
                               "Incidents per million", filename="plot_borough_year_per_million")
    analyzer.plot_unemployment_overlay(results.joined)
    analyzer.plot_geo_density(results.geo_bins)
    analyzer.plot_monthly_counts(results.monthly)
    analyzer.plot_seasonal_fit(results.fitted, results.r_squared)


def main():
    from nyc_shootings.exploration.shooting_analysis import ShootingAnalyzer

    Config.initialize_folders()

    console.rule("NYC SHOOTING INCIDENTS & UNEMPLOYMENT")

    try:
        # --- STAGE 1: LOAD ---
        console.rule("STAGE 1: LOAD")
        shootings_path = ShootingFetcher(Config.DATA_DIR).download()
        unemployment_path = UnemploymentFetcher(Config.DATA_DIR).download()
        raw_incidents = load_incidents(shootings_path)
        raw_unemployment = load_unemployment(unemployment_path)

        # --- STAGE 2: TIDY, AGGREGATE, MODEL ---
        console.rule("STAGE 2: TIDY, AGGREGATE & MODEL")
        results = run_pipeline(raw_incidents, raw_unemployment)
    except AnalysisError as e:
        console.print(f"[bold red]Analysis aborted:[/bold red] {e}")
        raise SystemExit(1)

    # --- STAGE 3: REPORT ---
    console.rule("STAGE 3: REPORT")
    render_report(results, ShootingAnalyzer(Config.OUTPUT_DIR))
    show_pipeline_table()

    console.rule(f"ANALYSIS COMPLETE - outputs saved to: {Config.OUTPUT_DIR}")


if __name__ == "__main__":
    main()
