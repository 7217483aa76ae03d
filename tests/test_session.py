from __future__ import annotations

import asyncio
import unittest

from rusplot import ExecutionResult, PlotEngine, RunCoordinator, RunInProgressError


class _ScriptedService:
    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.sources: list[str] = []
        self.gate: asyncio.Event | None = None

    async def execute(self, source_text: str):
        self.sources.append(source_text)
        if self.gate is not None:
            await self.gate.wait()
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


def _payload(*labels: str) -> dict:
    return {
        "success": True,
        "output": "done\n",
        "errors": [],
        "plots": [
            {"points": [[0, 0], [1, i + 1]], "color": None, "label": label, "timestamp": 1_700_000_000_000}
            for i, label in enumerate(labels)
        ],
    }


class RunCoordinatorTests(unittest.IsolatedAsyncioTestCase):
    async def test_run_replaces_plot_set(self) -> None:
        engine = PlotEngine()
        coordinator = RunCoordinator(engine, _ScriptedService(_payload("a", "b"), _payload("c")))
        result = await coordinator.run("plot(a); plot(b)")
        self.assertTrue(result.success)
        self.assertEqual([s.label for s in engine.plot_set], ["a", "b"])
        self.assertEqual(engine.plot_set.series[0].timestamp_ms, 1_700_000_000_000)
        await coordinator.run("plot(c)")
        self.assertEqual([s.label for s in engine.plot_set], ["c"])
        self.assertIs(coordinator.last_result.plots, engine.plot_set)

    async def test_run_without_plots_clears_panel(self) -> None:
        engine = PlotEngine()
        coordinator = RunCoordinator(engine, _ScriptedService(_payload("a"), {"success": True, "stdout": "hi"}))
        await coordinator.run("first")
        result = await coordinator.run("second")
        self.assertEqual(result.output, "hi")
        self.assertEqual(engine.status, "empty")
        self.assertIsNone(engine.plot_set)

    async def test_second_run_while_running_is_rejected(self) -> None:
        engine = PlotEngine()
        service = _ScriptedService(_payload("a"))
        service.gate = asyncio.Event()
        coordinator = RunCoordinator(engine, service)
        first = asyncio.create_task(coordinator.run("slow"))
        await asyncio.sleep(0)
        self.assertTrue(coordinator.is_running)
        with self.assertRaises(RunInProgressError):
            await coordinator.run("impatient")
        self.assertEqual(engine.status, "empty")
        service.gate.set()
        await first
        self.assertFalse(coordinator.is_running)
        self.assertEqual(service.sources, ["slow"])
        self.assertEqual(engine.status, "rendered")

    async def test_service_exception_becomes_diagnostic(self) -> None:
        engine = PlotEngine()
        coordinator = RunCoordinator(engine, _ScriptedService(_payload("a"), ConnectionError("backend down")))
        await coordinator.run("ok")
        with self.assertLogs("rusplot.session", level="WARNING"):
            result = await coordinator.run("fails")
        self.assertFalse(result.success)
        self.assertEqual(result.diagnostics, ("Error: backend down",))
        self.assertEqual(engine.status, "empty")
        self.assertFalse(coordinator.is_running)

    async def test_invalid_plot_data_keeps_output(self) -> None:
        engine = PlotEngine()
        bad = {"success": True, "output": "partial", "errors": ["warn"], "plots": [{"points": [["a", 1]]}]}
        coordinator = RunCoordinator(engine, _ScriptedService(bad))
        with self.assertLogs("rusplot.session", level="WARNING"):
            result = await coordinator.run("bad")
        self.assertFalse(result.success)
        self.assertEqual(result.output, "partial")
        self.assertEqual(result.diagnostics[0], "warn")
        self.assertTrue(result.diagnostics[1].startswith("Invalid plot data:"))
        self.assertEqual(engine.status, "empty")

    async def test_service_may_return_execution_result(self) -> None:
        engine = PlotEngine()
        prepared = ExecutionResult.from_payload(_payload("x"))
        coordinator = RunCoordinator(engine, _ScriptedService(prepared))
        result = await coordinator.run("src")
        self.assertIs(result, prepared)
        self.assertEqual(engine.status, "rendered")

    async def test_new_file_clears_engine(self) -> None:
        engine = PlotEngine()
        coordinator = RunCoordinator(engine, _ScriptedService(_payload("a")))
        await coordinator.run("src")
        coordinator.new_file()
        self.assertEqual(engine.status, "empty")
        self.assertIsNone(coordinator.last_result)


    async def test_malformed_color_or_timestamp_becomes_diagnostic(self) -> None:
        for plot in (
            {"points": [[0, 0], [1, 1]], "color": 5},
            {"points": [[0, 0], [1, 1]], "color": ["red", 0, 0]},
            {"points": [[0, 0], [1, 1]], "timestamp": "soon"},
        ):
            with self.subTest(plot=plot):
                engine = PlotEngine()
                coordinator = RunCoordinator(engine, _ScriptedService({"success": True, "output": "ran", "plots": [plot]}))
                with self.assertLogs("rusplot.session", level="WARNING"):
                    result = await coordinator.run("src")
                self.assertFalse(result.success)
                self.assertEqual(result.output, "ran")
                self.assertTrue(result.diagnostics[-1].startswith("Invalid plot data: plot #0 has invalid"))
                self.assertEqual(engine.status, "empty")
                self.assertFalse(coordinator.is_running)


class ExecutionResultTests(unittest.TestCase):
    def test_payload_aliases_and_default_labels(self) -> None:
        result = ExecutionResult.from_payload(
            {"success": False, "stdout": "out", "diagnostics": "single", "plots": [{"points": [[1, 2]]}]}
        )
        self.assertEqual(result.output, "out")
        self.assertEqual(result.diagnostics, ("single",))
        self.assertEqual([s.label for s in result.plots], ["series 1"])

    def test_scalar_diagnostics_are_wrapped(self) -> None:
        self.assertEqual(ExecutionResult.from_payload({"success": False, "errors": 3}).diagnostics, ("3",))

    def test_missing_plots_means_none(self) -> None:
        self.assertIsNone(ExecutionResult.from_payload({"success": True}).plots)


if __name__ == "__main__":
    unittest.main()
