from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Mapping, Protocol

from rusplot.adapters import plot_set_from_payload
from rusplot.engine import PlotEngine
from rusplot.errors import PlotDataError, RunInProgressError
from rusplot.series import PlotSet


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    success: bool
    output: str = ""
    diagnostics: tuple[str, ...] = ()
    plots: PlotSet | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ExecutionResult":
        """Parse the execution backend's result object.

        Accepts `output`/`stdout` and `errors`/`diagnostics`. Raises
        PlotDataError when the plot list is malformed.
        """
        if not isinstance(payload, Mapping):
            raise PlotDataError("execution result must be an object")
        output = payload.get("output", payload.get("stdout", "")) or ""
        diagnostics = payload.get("errors", payload.get("diagnostics", ())) or ()
        if isinstance(diagnostics, str) or not isinstance(diagnostics, (list, tuple)):
            diagnostics = (diagnostics,)
        plots_raw = payload.get("plots")
        plots = plot_set_from_payload(plots_raw) if plots_raw is not None else None
        return cls(
            success=bool(payload.get("success", False)),
            output=str(output),
            diagnostics=tuple(str(d) for d in diagnostics),
            plots=plots,
        )


class ExecutionService(Protocol):
    async def execute(self, source_text: str) -> ExecutionResult | Mapping[str, Any]:
        ...


class RunCoordinator:
    """Runs programs one at a time and hands their plots to the engine.

    The plot set is replaced only once the run has completed. A run with no
    plot calls, or one that fails, leaves the panel empty.
    """

    def __init__(self, engine: PlotEngine, service: ExecutionService) -> None:
        self._engine = engine
        self._service = service
        self._running = False
        self._last_result: ExecutionResult | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def last_result(self) -> ExecutionResult | None:
        return self._last_result

    async def run(self, source_text: str) -> ExecutionResult:
        if self._running:
            raise RunInProgressError("a program is already running")
        self._running = True
        try:
            result = await self._execute(source_text)
            plots = result.plots if result.plots is not None and len(result.plots) > 0 else None
            self._engine.set_plot_set(plots)
            self._last_result = result
            LOGGER.info(
                "run finished: success=%s plots=%d diagnostics=%d",
                result.success,
                0 if plots is None else len(plots),
                len(result.diagnostics),
            )
            return result
        finally:
            self._running = False

    def new_file(self) -> None:
        self._last_result = None
        self._engine.clear()

    async def _execute(self, source_text: str) -> ExecutionResult:
        try:
            raw = await self._service.execute(source_text)
        except Exception as exc:
            LOGGER.warning("execution service failed: %s", exc)
            return ExecutionResult(success=False, diagnostics=(f"Error: {exc}",))
        if isinstance(raw, ExecutionResult):
            return raw
        try:
            return ExecutionResult.from_payload(raw)
        except PlotDataError as exc:
            LOGGER.warning("execution result carried invalid plot data: %s", exc)
            if not isinstance(raw, Mapping):
                return ExecutionResult(success=False, diagnostics=(f"Invalid plot data: {exc}",))
            partial = ExecutionResult.from_payload({k: v for k, v in raw.items() if k != "plots"})
            return ExecutionResult(
                success=False,
                output=partial.output,
                diagnostics=partial.diagnostics + (f"Invalid plot data: {exc}",),
            )
