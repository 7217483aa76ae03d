from __future__ import annotations


class PlotError(Exception):
    """Base class for every error raised by the plot engine."""


class PlotDataError(PlotError):
    pass


class EmptyDataError(PlotDataError):
    """No series in the plot set carries a finite point."""


class ExportError(PlotError):
    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message if cause is None else f"{message}: {cause}")
        self.cause = cause


class RunInProgressError(PlotError):
    pass


class DegenerateRangeWarning(UserWarning):
    """Recorded when an axis collapses to a single value and gets widened."""

    def __init__(self, axis: str, value: float, epsilon: float) -> None:
        super().__init__(f"{axis} axis has a single value {value!r}; expanded by +/-{epsilon!r}")
        self.axis = axis
        self.value = value
        self.epsilon = epsilon
