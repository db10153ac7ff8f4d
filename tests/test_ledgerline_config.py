from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from ledgerline_chart import ChartConfigError, DataPoint, chart_config_from_mapping, load_chart_config
from ledgerline_chart.theme import DARK_THEME, LIGHT_THEME, validate_theme_tokens

SAMPLE_TOML = """
mode = "line"
target_value = 150
show_zero_line = true
fit_data_range = false
title = "Ahorro mensual"

[canvas]
width = 320
height = 200
left_padding = 56

[segment_colors]
below_zero = "#FF0000"

[theme]
base = "dark"
primary_color = "#22C55E"

[highlighted_point]
label = "Feb"
value = -50

[[data]]
label = "Ene"
value = 100

[[data]]
label = "Feb"
value = -50
"""


class ChartConfigMappingTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = chart_config_from_mapping({})
        self.assertEqual(config.mode, "line")
        self.assertEqual(config.data, ())
        self.assertTrue(config.show_grid)
        self.assertTrue(config.show_labels)
        self.assertTrue(config.show_tooltips)
        self.assertFalse(config.show_zero_line)
        self.assertFalse(config.fit_data_range)
        self.assertEqual(config.nice_step, 1000.0)
        self.assertEqual(config.theme, LIGHT_THEME)
        self.assertEqual(config.goal_reference, 0.0)

    def test_full_mapping(self) -> None:
        config = chart_config_from_mapping(
            {
                "mode": "progress",
                "current_value": 3200,
                "target_value": 5000,
                "progress_percentage": 10,
                "theme": "dark",
                "canvas": {"width": 400, "bottom_padding": 10},
            }
        )
        self.assertEqual(config.mode, "progress")
        self.assertEqual(config.current_value, 3200.0)
        self.assertEqual(config.target_value, 5000.0)
        self.assertEqual(config.progress_percentage, 10.0)
        self.assertEqual(config.theme, DARK_THEME)
        self.assertEqual(config.canvas.width, 400.0)
        self.assertEqual(config.canvas.chart_area_height, 240.0 - 40.0 - 10.0)

    def test_rejects_unknown_option(self) -> None:
        with self.assertRaisesRegex(ChartConfigError, "Unknown chart option"):
            chart_config_from_mapping({"colour": "#000000"})

    def test_rejects_bad_mode(self) -> None:
        with self.assertRaisesRegex(ChartConfigError, "mode"):
            chart_config_from_mapping({"mode": "bars"})

    def test_rejects_non_boolean_flag(self) -> None:
        with self.assertRaisesRegex(ChartConfigError, "show_grid"):
            chart_config_from_mapping({"show_grid": "yes"})

    def test_rejects_bad_segment_color(self) -> None:
        with self.assertRaisesRegex(ChartConfigError, "hex color"):
            chart_config_from_mapping({"segment_colors": {"above_goal": "green"}})

    def test_rejects_non_positive_nice_step(self) -> None:
        with self.assertRaisesRegex(ChartConfigError, "nice_step"):
            chart_config_from_mapping({"nice_step": 0})

    def test_bad_data_is_reported_as_config_error(self) -> None:
        with self.assertRaisesRegex(ChartConfigError, "invalid data"):
            chart_config_from_mapping({"data": [{"label": "Jan"}]})

    def test_rejects_non_finite_numbers(self) -> None:
        for key in ("target_value", "current_value", "progress_percentage"):
            for bad in (float("nan"), float("inf"), float("-inf")):
                with self.subTest(key=key, value=bad):
                    with self.assertRaisesRegex(ChartConfigError, f"`{key}` must be a finite number"):
                        chart_config_from_mapping({key: bad, "data": [["Ene", 1], ["Feb", 2]]})
        with self.assertRaisesRegex(ChartConfigError, "canvas.width"):
            chart_config_from_mapping({"canvas": {"width": float("inf")}})

    def test_non_finite_numbers_in_toml_are_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.toml"
            path.write_text("target_value = nan\ndata = [[\"Ene\", 1], [\"Feb\", 2]]\n", encoding="utf-8")
            with self.assertRaisesRegex(ChartConfigError, "target_value"):
                load_chart_config(path)

    def test_error_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            chart_config_from_mapping({"canvas": {"depth": 3}})


class ThemeTokenTests(unittest.TestCase):
    def test_partial_override_keeps_base(self) -> None:
        tokens = validate_theme_tokens({"primary_color": "#112233"}, base="dark")
        self.assertEqual(tokens.primary_color, "#112233")
        self.assertEqual(tokens.card_background_color, DARK_THEME.card_background_color)

    def test_rejects_unknown_token(self) -> None:
        with self.assertRaisesRegex(ChartConfigError, "Unknown theme token"):
            validate_theme_tokens({"accent": "#112233"})

    def test_rejects_unknown_palette(self) -> None:
        with self.assertRaisesRegex(ChartConfigError, "Unknown theme"):
            validate_theme_tokens(base="sepia")


class ChartConfigFileTests(unittest.TestCase):
    def test_load_toml(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "chart.toml"
            path.write_text(SAMPLE_TOML, encoding="utf-8")
            config = load_chart_config(path)
        self.assertEqual(config.data, (DataPoint("Ene", 100.0), DataPoint("Feb", -50.0)))
        self.assertEqual(config.target_value, 150.0)
        self.assertTrue(config.show_zero_line)
        self.assertEqual(config.title, "Ahorro mensual")
        self.assertEqual(config.canvas.width, 320.0)
        self.assertEqual(config.canvas.chart_area_width, 320.0 - 56.0 * 2)
        self.assertEqual(config.segment_colors.below_zero, "#FF0000")
        self.assertEqual(config.theme.primary_color, "#22C55E")
        self.assertEqual(config.theme.card_background_color, DARK_THEME.card_background_color)
        self.assertEqual(config.highlighted_point, DataPoint("Feb", -50.0))

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_chart_config(Path("/nonexistent/chart.toml"))

    def test_invalid_toml(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "chart.toml"
            path.write_text("mode = ", encoding="utf-8")
            with self.assertRaisesRegex(ChartConfigError, "invalid TOML"):
                load_chart_config(path)


if __name__ == "__main__":
    unittest.main()
