"""
NYC Shooting Incidents & Unemployment
-------------------------------------
Batch exploratory analysis of the NYPD Shooting Incident dataset against the
BLS metropolitan unemployment series for New York-Newark-Jersey City.

Module Hierarchy:
- `ingest`: Downloads the two public sources and tidies them into typed
  pandas frames.
- `features`: Borough/year matrices (raw and per-million), the unemployment
  join, geographic density bins and the monthly incident series.
- `models`: Natural spline regression over the monthly series (seasonality).
- `exploration`: Chart rendering for the report.
- `utils`: DuckDB connection handling and pipeline step logging.

Pipeline (strictly forward):
1. Load & Tidy (incidents, unemployment)
2. Aggregate (borough-year, month, geo bins)
3. Join & Model (unemployment overlay, seasonal spline fit)
"""
