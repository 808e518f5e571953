"""
MISSION: The Seasonal Layer.
Fits a smooth curve through the monthly incident counts to expose the
yearly cycle: OLS on a natural cubic regression spline basis of the
numeric month key. Fitted values are in-sample only.
"""
import statsmodels.api as sm
from patsy import dmatrix
from nyc_shootings.config import Config
from nyc_shootings.errors import EmptyAggregate
from nyc_shootings.utils.logging import console, log_step


class SeasonalSplineModel:
    """
    Natural spline regression of monthly incidents on `month_key` (e.g. 200603).

    The key is used as-is, so the jump from 200612 to 200701 is a wider step
    on the x axis than a month inside a year.
    """

    def __init__(self, df=None):
        self.df = df or Config.SPLINE_DF
        self.training = None
        self.result = None

    @property
    def basis_formula(self):
        # Centered basis + explicit intercept keeps the design full rank
        return f"cr(month_key, df={self.df}, constraints='center')"

    def fit(self, monthly):
        if monthly is None or monthly.empty:
            raise EmptyAggregate("No monthly counts to fit the seasonal spline on")
        if monthly["month_key"].nunique() <= self.df + 1:
            raise EmptyAggregate(
                f"Only {monthly['month_key'].nunique()} distinct months; the df={self.df} spline needs at least {self.df + 2}"
            )

        training = monthly[["month_label", "month_key", "incidents"]].reset_index(drop=True)
        training = training.astype({"month_key": "float64", "incidents": "float64"})

        basis = dmatrix(self.basis_formula, training, return_type="dataframe")
        self.result = sm.OLS(training["incidents"], basis).fit()
        self.training = training

        console.print(
            f"Seasonal spline fitted on {len(training)} months "
            f"(df={self.df}, R²={self.r_squared:.3f})"
        )
        return self

    def _require_fit(self):
        if self.result is None:
            raise RuntimeError("SeasonalSplineModel.fit() must be called first")

    @property
    def r_squared(self):
        self._require_fit()
        return float(self.result.rsquared)

    def predict(self):
        """One fitted count per observed month key."""
        self._require_fit()
        fitted = self.training.copy()
        fitted["incidents"] = fitted["incidents"].astype("int64")
        fitted["fitted"] = self.result.fittedvalues.to_numpy()
        log_step("Seasonal spline fitted values", fitted)
        return fitted

    def summary(self):
        """OLS summary table as text."""
        self._require_fit()
        return self.result.summary().as_text()
