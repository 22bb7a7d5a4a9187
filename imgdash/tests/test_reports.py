"""Tests for the terminal heatmap and usage reports."""

import copy
import unittest
from datetime import datetime, timedelta, timezone

from imgdash.analytics.pipeline import DashboardControls, compute_dashboard
from imgdash.config.loader import DEFAULT_CONFIG
from imgdash.models.entities import EventRecord
from imgdash.reports.heatmap import generate_heatmap, weekday_names
from imgdash.reports.usage import generate_usage

NOW = datetime(2024, 3, 13, 12, 0, tzinfo=timezone.utc)


class ReportTestBase(unittest.TestCase):
    """Builds dashboard views over a small fixed snapshot."""

    def setUp(self):
        self.config = copy.deepcopy(DEFAULT_CONFIG)
        self.config["timezone"] = "UTC"
        self.events = (
            EventRecord(NOW - timedelta(hours=3), "flux-dev", "u1", "celine"),
            EventRecord(NOW - timedelta(hours=2), "flux-dev", "u1", "celine"),
            EventRecord(NOW - timedelta(days=2), "upscale", "u2", "limn"),
        )

    def view(self, events=None, **controls):
        return compute_dashboard(
            self.events if events is None else events,
            DashboardControls(**controls),
            self.config,
            now=NOW,
        )


class TestHeatmapReport(ReportTestBase):

    def test_weekday_names(self):
        self.assertEqual(weekday_names(6)[:2], ["Sun", "Mon"])
        self.assertEqual(weekday_names(0)[-1], "Sun")

    def test_grid_rows(self):
        output = generate_heatmap(self.view(lookback="3_months"), self.config, color_enabled=False)
        lines = output.splitlines()

        self.assertEqual(lines[0], "GENERATION ACTIVITY (3 months)")
        self.assertIn("3 generations on 2 of", lines[1])
        self.assertIn("Busiest day: 2024-03-13 (2)", output)

        rows = [line for line in lines if line[:4] in {f"{d} " for d in weekday_names(6)}]
        self.assertEqual(len(rows), 7)
        self.assertTrue(rows[0].startswith("Sun "))
        # Every row spans the same number of week columns
        self.assertEqual(len({len(r) for r in rows}), 1)

    def test_empty(self):
        output = generate_heatmap(self.view(events=()), self.config, color_enabled=False)
        self.assertIn("No generations in the selected range.", output)


class TestUsageReport(ReportTestBase):

    def test_table_and_legend(self):
        output = generate_usage(self.view(), color_enabled=False)

        self.assertTrue(output.startswith("USAGE BY DAY (1 month)"))
        self.assertIn("flux-dev", output)
        self.assertIn("Mar 13, 2024", output)
        self.assertIn("Mar 11, 2024", output)
        self.assertIn("SERIES", output)
        self.assertIn("#3b82f6", output)
        self.assertNotIn("(hidden)", output)

    def test_hidden_series(self):
        output = generate_usage(self.view(disabled={"upscale"}), color_enabled=False)
        header = next(line for line in output.splitlines() if line.startswith("Bucket"))

        self.assertNotIn("upscale", header)
        self.assertIn("(hidden)", output)

    def test_empty(self):
        output = generate_usage(self.view(events=(), granularity="hour"), color_enabled=False)
        self.assertIn("No usage data for the selected range.", output)


if __name__ == '__main__':
    unittest.main()
