"""Failure types raised by the analysis pipeline."""


class AnalysisError(Exception):
    """Base class for every pipeline failure."""


class SourceUnavailable(AnalysisError):
    """A raw source could not be fetched or read. Aborts the run."""


class ParseFailure(AnalysisError):
    """A field could not be converted to its typed form.

    Parsing is fail-fast: one bad value aborts the whole run, and the
    offending column plus a few sample values are carried for the report.
    """

    def __init__(self, column, samples, detail=None):
        self.column = column
        self.samples = list(samples)[:5]
        message = f"Could not parse column '{column}': {self.samples!r}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class EmptyAggregate(AnalysisError):
    """A filtered window produced no rows to aggregate or model."""
