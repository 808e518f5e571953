import os
import numpy as np
import seaborn as sns
import matplotlib.pyplot as plt
import matplotlib as mpl
import matplotlib.ticker as ticker
import contextily as ctx
from nyc_shootings.config import Config
from nyc_shootings.utils.logging import console

# Set global formatting: No scientific notation
mpl.rcParams['axes.formatter.useoffset'] = False
mpl.rcParams['axes.formatter.limits'] = [-20, 20]


class ShootingAnalyzer:
    """Renders the report charts. Every plot consumes a table built by FeatureBuilder or the model."""

    def __init__(self, output_dir=None, show=False, basemap=True):
        self.output_dir = output_dir or Config.OUTPUT_DIR
        os.makedirs(self.output_dir, exist_ok=True)
        self.show = show
        self.basemap = basemap

    def _save_plot(self, filename: str):
        """Internal helper to standardize how plots are saved."""
        save_path = None
        if filename:
            if not filename.endswith(('.png', '.jpg', '.pdf')):
                filename += '.png'

            save_path = os.path.join(self.output_dir, filename)
            plt.tight_layout()
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            console.print(f"Plot saved to {save_path}")

        if self.show:
            plt.show()
        plt.close()
        return save_path

    def plot_borough_year(self, matrix, title, ylabel, filename="plot_borough_year"):
        """One line per borough across years."""
        long_df = matrix.melt(id_vars="year", var_name="boro", value_name="value").dropna()

        plt.figure(figsize=(12, 6))
        sns.set_style("whitegrid")
        sns.lineplot(data=long_df, x='year', y='value', hue='boro', marker='o', linewidth=2)

        plt.title(title, fontsize=15, fontweight='bold', loc='left')
        plt.xlabel("Year")
        plt.ylabel(ylabel)
        plt.gca().xaxis.set_major_locator(ticker.MaxNLocator(integer=True))
        plt.legend(title="Borough", loc='upper right')
        sns.despine()
        return self._save_plot(filename)

    def plot_unemployment_overlay(self, joined, filename="plot_unemployment_overlay"):
        long_df = joined.drop(columns=["max_rate", "unemployment_display"]).melt(
            id_vars="year", var_name="boro", value_name="per_million"
        ).dropna()

        plt.figure(figsize=(12, 6))
        sns.set_style("whitegrid")
        sns.lineplot(data=long_df, x='year', y='per_million', hue='boro', marker='o', linewidth=2)
        plt.plot(joined['year'], joined['unemployment_display'], color='black', linestyle='--',
                 linewidth=2.5, label='Max unemployment rate x100')

        plt.title("Shootings per Million Residents vs. Peak Unemployment", fontsize=15, fontweight='bold', loc='left')
        plt.xlabel("Year")
        plt.ylabel("Incidents per million / unemployment % x100")
        plt.gca().xaxis.set_major_locator(ticker.MaxNLocator(integer=True))
        plt.legend(loc='upper right')
        plt.text(0.5, -0.15, "The unemployment line is rescaled (x100) only to share the axis; "
                 "it is not a rate per million.",
                 ha='center', transform=plt.gca().transAxes, color='gray', fontsize=9)
        sns.despine()
        return self._save_plot(filename)

    def plot_geo_density(self, bins, bin_width=None, filename="plot_geo_density"):
        """2-D density from pre-binned cells; each cell is redrawn at its own center."""
        bin_width = bin_width or Config.GEO_BIN_WIDTH
        lon_edges = np.arange(bins['lon_bin'].min(), bins['lon_bin'].max() + 2 * bin_width, bin_width)
        lat_edges = np.arange(bins['lat_bin'].min(), bins['lat_bin'].max() + 2 * bin_width, bin_width)

        fig, ax = plt.subplots(figsize=(10, 10))
        _, _, _, mesh = ax.hist2d(
            bins['lon_bin'] + bin_width / 2, bins['lat_bin'] + bin_width / 2,
            bins=[lon_edges, lat_edges], weights=bins['incidents'],
            cmap='YlOrRd', cmin=1, alpha=0.85,
        )
        cbar = fig.colorbar(mesh, ax=ax, fraction=0.03, pad=0.02)
        cbar.set_label('Incidents per cell')

        ax.set_aspect('equal')
        ax.set_xlabel("Longitude")
        ax.set_ylabel("Latitude")
        ax.set_title(f"Shooting Density ({bin_width}° grid)", fontsize=15, fontweight='bold')

        if self.basemap:
            try:
                console.print("Adding basemap...")
                ctx.add_basemap(ax, crs='EPSG:4326', source=ctx.providers.CartoDB.Positron, alpha=0.6)
            except Exception as e:
                console.print(f"[yellow]Could not add basemap: {e}[/yellow]")

        return self._save_plot(filename)

    def plot_monthly_counts(self, monthly, filename="plot_monthly_counts"):
        plt.figure(figsize=(14, 6))
        sns.set_style("whitegrid")
        plt.plot(monthly['month_label'], monthly['incidents'], color='crimson', linewidth=1.5)

        # Only label Januaries so the axis stays readable
        ticks = [i for i, label in enumerate(monthly['month_label']) if label.endswith("- 01")]
        plt.xticks(ticks, [monthly['month_label'].iloc[i][:4] for i in ticks], rotation=45)

        plt.title("NYC Shooting Incidents per Month", fontsize=15, fontweight='bold', loc='left')
        plt.xlabel("Month")
        plt.ylabel("Incidents")
        sns.despine()
        return self._save_plot(filename)

    def plot_seasonal_fit(self, fitted, r_squared=None, filename="plot_seasonal_fit"):
        plt.figure(figsize=(12, 6))
        sns.set_style("whitegrid")
        x = range(len(fitted))
        plt.scatter(x, fitted['incidents'], color='slateblue', label='Observed', zorder=3)
        plt.plot(x, fitted['fitted'], color='crimson', linewidth=3, label='Natural spline fit')
        plt.xticks(list(x), fitted['month_label'], rotation=90, fontsize=8)

        title = "Seasonality: Monthly Incidents with Spline Fit"
        if r_squared is not None:
            title += f" (R² = {r_squared:.2f})"
        plt.title(title, fontsize=15, fontweight='bold', loc='left')
        plt.xlabel("Month")
        plt.ylabel("Incidents")
        plt.legend(loc='upper left')
        sns.despine()
        return self._save_plot(filename)
