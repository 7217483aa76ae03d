from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from rusplot import DEFAULT_CONFIG, load_config, validate_config
from rusplot.theme import PALETTES, ThemeManager, parse_color, validate_palette
from rusplot.zoom import ZoomController, clamp_zoom


class ConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        self.assertEqual((DEFAULT_CONFIG.width, DEFAULT_CONFIG.height), (800, 500))
        self.assertEqual(DEFAULT_CONFIG.inset, 60)
        self.assertEqual(DEFAULT_CONFIG.padding_ratio, 0.1)
        self.assertEqual(DEFAULT_CONFIG.bounds_profile, "padded")
        self.assertEqual(validate_config(), DEFAULT_CONFIG)

    def test_overrides_are_validated(self) -> None:
        cfg = validate_config({"width": 640, "theme": "light", "line_width_px": 3})
        self.assertEqual(cfg.width, 640)
        self.assertEqual(cfg.theme, "light")
        self.assertEqual(cfg.line_width_px, 3.0)
        with self.assertRaisesRegex(ValueError, "Unknown config key"):
            validate_config({"colour": "red"})
        with self.assertRaisesRegex(ValueError, "positive integer"):
            validate_config({"width": 0})
        with self.assertRaisesRegex(ValueError, "positive integer"):
            validate_config({"tick_intervals": True})
        with self.assertRaises(ValueError):
            validate_config({"bounds_profile": "log"})
        with self.assertRaises(ValueError):
            validate_config({"width": 150})
        with self.assertRaises(ValueError):
            validate_config({"inset": 100})

    def test_load_config_reads_plot_table(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "rusplot.toml"
            path.write_text('[plot]\nwidth = 1024\ntheme = "light"\nbounds_profile = "symmetric"\n', encoding="utf-8")
            cfg = load_config(path, {"width": 900})
        self.assertEqual(cfg.width, 900)
        self.assertEqual(cfg.theme, "light")
        self.assertEqual(cfg.bounds_profile, "symmetric")


class ThemeTests(unittest.TestCase):
    def test_parse_color_forms(self) -> None:
        self.assertEqual(parse_color("#abc"), (170, 187, 204, 255))
        self.assertEqual(parse_color("#0066cc"), (0, 102, 204, 255))
        self.assertEqual(parse_color("#11223344"), (17, 34, 51, 68))
        self.assertEqual(parse_color((1, 2, 3)), (1, 2, 3, 255))
        for bad in ("red", "#12345", (300, 0, 0), (1, 2)):
            with self.assertRaises(ValueError):
                parse_color(bad)

    def test_palette_overrides(self) -> None:
        theme = validate_palette("dark", {"axis": "#ff0000"})
        self.assertEqual(theme.axis, (255, 0, 0, 255))
        self.assertEqual(theme.background, PALETTES["dark"].background)
        with self.assertRaisesRegex(ValueError, "Unknown theme role"):
            validate_palette("dark", {"border": "#000"})
        with self.assertRaises(ValueError):
            validate_palette("dark", {"axis": "blue"})

    def test_theme_manager(self) -> None:
        manager = ThemeManager({"light": {"text": "#000000"}})
        self.assertEqual(manager.resolve("light").text, (0, 0, 0, 255))
        self.assertEqual(ThemeManager.toggled("dark"), "light")
        self.assertEqual(ThemeManager.toggled("light"), "dark")
        with self.assertRaises(ValueError):
            manager.resolve("sepia")
        with self.assertRaises(ValueError):
            ThemeManager({"sepia": {}})


class ZoomTests(unittest.TestCase):
    def test_clamp(self) -> None:
        self.assertEqual(clamp_zoom(5.0), 3.0)
        self.assertEqual(clamp_zoom(0.1), 0.5)
        self.assertEqual(clamp_zoom(float("nan")), 1.0)

    def test_steps_stay_in_range(self) -> None:
        zoom = ZoomController()
        for _ in range(20):
            zoom.zoom_in()
        self.assertEqual(zoom.factor, 3.0)
        for _ in range(20):
            zoom.zoom_out()
        self.assertEqual(zoom.factor, 0.5)
        self.assertEqual(zoom.reset(), 1.0)
        self.assertEqual(zoom.zoom_in(), 1.2)
        self.assertEqual(zoom.raster_size(800, 500), (960, 600))
        self.assertAlmostEqual(zoom.scaled(10.0), 12.0)


if __name__ == "__main__":
    unittest.main()
