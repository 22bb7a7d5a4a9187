"""Tests for series colors and the enable/disable filter."""

import unittest
from datetime import datetime, timezone

from imgdash.analytics.bucketer import bucket_events
from imgdash.analytics.styles import (
    FALLBACK_COLOR,
    SeriesFilter,
    legend_entries,
    parse_hex_color,
    resolve_color,
    resolve_styles,
)
from imgdash.config.loader import DEFAULT_CONFIG, get_palette_config
from imgdash.models.entities import EventRecord

PALETTE_CONFIG = get_palette_config(DEFAULT_CONFIG)


class TestHexColors(unittest.TestCase):

    def test_parse_long_and_short(self):
        self.assertEqual(parse_hex_color("#3b82f6"), (59, 130, 246))
        self.assertEqual(parse_hex_color("#fff"), (255, 255, 255))

    def test_invalid(self):
        for value in ("#12345", "blue", "#gggggg", None):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_hex_color(value)


class TestResolveColor(unittest.TestCase):
    """Test the color assignment policy."""

    def test_named_series_use_allowlist(self):
        color = resolve_color("flux-dev", ["upscale", "flux-dev"], PALETTE_CONFIG)
        self.assertEqual(color, parse_hex_color(DEFAULT_CONFIG["series_colors"]["flux-dev"]))

    def test_palette_cycles_by_position(self):
        """With 15 series and 8 colors, index 8 repeats index 0."""
        series = [f"custom-{i}" for i in range(15)]
        colors = [resolve_color(s, series, PALETTE_CONFIG) for s in series]

        self.assertEqual(colors[8], colors[0])
        self.assertEqual(colors[14], colors[6])
        self.assertEqual(len(set(colors[:8])), 8)

    def test_deterministic(self):
        series = ["custom-a", "custom-b", "flux-dev"]
        first = [resolve_color(s, series, PALETTE_CONFIG) for s in series]
        second = [resolve_color(s, series, PALETTE_CONFIG) for s in series]
        self.assertEqual(first, second)

    def test_unlisted_series_gets_next_position(self):
        series = ["custom-a"]
        color = resolve_color("custom-b", series, PALETTE_CONFIG)
        self.assertEqual(color, parse_hex_color(PALETTE_CONFIG["palette"][1]))

    def test_injected_tables(self):
        palette_config = {"series_colors": {"a": "#000000"}, "palette": ["#ff0000"]}
        self.assertEqual(resolve_color("a", ["a", "b"], palette_config), (0, 0, 0))
        self.assertEqual(resolve_color("b", ["a", "b"], palette_config), (255, 0, 0))

    def test_empty_palette_falls_back(self):
        self.assertEqual(resolve_color("x", ["x"], {"palette": []}), FALLBACK_COLOR)


class TestSeriesFilter(unittest.TestCase):
    """Test session enable/disable state."""

    def test_all_enabled_by_default(self):
        series_filter = SeriesFilter(["a", "b"])
        self.assertEqual(series_filter.enabled_series(), ["a", "b"])

    def test_toggle(self):
        series_filter = SeriesFilter(["a", "b"])
        self.assertFalse(series_filter.toggle("a"))
        self.assertEqual(series_filter.enabled_series(), ["b"])
        self.assertTrue(series_filter.toggle("a"))
        self.assertEqual(series_filter.enabled_series(), ["a", "b"])

    def test_universe_change_resets(self):
        series_filter = SeriesFilter(["a", "b"])
        series_filter.set_enabled("a", False)

        self.assertFalse(series_filter.reset(["a", "b"]))
        self.assertEqual(series_filter.disabled, frozenset({"a"}))

        self.assertTrue(series_filter.reset(["a", "b", "c"]))
        self.assertEqual(series_filter.disabled, frozenset())

    def test_toggle_does_not_touch_counts(self):
        events = [
            EventRecord(datetime(2024, 3, 1, 10, tzinfo=timezone.utc), "a", "u", "app"),
            EventRecord(datetime(2024, 3, 1, 11, tzinfo=timezone.utc), "b", "u", "app"),
        ]
        buckets = bucket_events(events, "day", "all", tz=timezone.utc)
        before = [dict(b.series_counts) for b in buckets]

        series_filter = SeriesFilter(["a", "b"])
        series_filter.toggle("a")
        series_filter.toggle("a")

        self.assertEqual([dict(b.series_counts) for b in buckets], before)


class TestResolveStyles(unittest.TestCase):

    def test_styles_carry_enabled_flag(self):
        styles = resolve_styles(["flux-dev", "custom"], PALETTE_CONFIG, disabled={"custom"})

        self.assertEqual([s.series_id for s in styles], ["flux-dev", "custom"])
        self.assertTrue(styles[0].enabled)
        self.assertFalse(styles[1].enabled)
        self.assertEqual(styles[0].hex, "#3b82f6")

    def test_legend_entries(self):
        styles = resolve_styles(["flux-dev"], PALETTE_CONFIG)
        entries = legend_entries(styles, {"flux-dev": 7})
        self.assertEqual(entries[0]["total"], 7)
        self.assertEqual(entries[0]["color"], "#3b82f6")


if __name__ == '__main__':
    unittest.main()
