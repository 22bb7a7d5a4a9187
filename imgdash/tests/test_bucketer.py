"""Tests for the multi-series time bucketer."""

import random
import unittest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from imgdash.analytics.bucketer import (
    bucket_events,
    bucket_key,
    bucket_label,
    series_totals,
    series_universe,
)
from imgdash.analytics.ranges import GRANULARITIES, RANGES, range_cutoff
from imgdash.models.entities import EventRecord

UTC = timezone.utc
NOW = datetime(2024, 3, 10, 0, 0, tzinfo=UTC)


def make_event(ts: datetime, series_id: str = "flux-dev") -> EventRecord:
    return EventRecord(timestamp=ts, series_id=series_id, user_id="u1", app_id="celine")


def random_events(count: int = 300, seed: int = 42):
    rng = random.Random(seed)
    series = ["flux-dev", "upscale", "sdxl", "custom-lora"]
    return [
        make_event(NOW - timedelta(minutes=rng.randint(0, 60 * 24 * 500)), rng.choice(series))
        for _ in range(count)
    ]


class TestBucketKeys(unittest.TestCase):
    """Test key derivation per granularity."""

    def setUp(self):
        # Friday
        self.ts = datetime(2024, 3, 1, 9, 45, tzinfo=UTC)

    def test_hour_key(self):
        self.assertEqual(bucket_key(self.ts, "hour"), "2024-03-01T09:00")

    def test_day_key(self):
        self.assertEqual(bucket_key(self.ts, "day"), "2024-03-01")

    def test_week_key_sunday_start(self):
        self.assertEqual(bucket_key(self.ts, "week", week_start=6), "2024-02-25")

    def test_week_key_monday_start(self):
        self.assertEqual(bucket_key(self.ts, "week", week_start=0), "2024-02-26")

    def test_week_key_on_week_start_day(self):
        sunday = datetime(2024, 2, 25, 23, 59, tzinfo=UTC)
        self.assertEqual(bucket_key(sunday, "week"), "2024-02-25")

    def test_month_key(self):
        self.assertEqual(bucket_key(self.ts, "month"), "2024-03")

    def test_unknown_granularity(self):
        with self.assertRaises(ValueError):
            bucket_key(self.ts, "minute")


class TestBucketLabels(unittest.TestCase):
    """Test stable labels."""

    def test_labels(self):
        self.assertEqual(bucket_label("2024-03-01T10:00", "hour"), "Mar 1, 10:00")
        self.assertEqual(bucket_label("2024-03-01", "day"), "Mar 1, 2024")
        self.assertEqual(bucket_label("2024-02-25", "week"), "Week of Feb 25, 2024")
        self.assertEqual(bucket_label("2024-03", "month"), "Mar 2024")

    def test_same_key_same_label(self):
        self.assertEqual(bucket_label("2024-12-31", "day"), bucket_label("2024-12-31", "day"))


class TestBucketEvents(unittest.TestCase):
    """Test bucket construction."""

    def test_two_events_same_day(self):
        """Two events on one day at day granularity make one bucket."""
        events = [
            make_event(datetime(2024, 3, 1, 10, tzinfo=UTC)),
            make_event(datetime(2024, 3, 1, 14, tzinfo=UTC)),
        ]
        buckets = bucket_events(events, "day", "1_month", now=NOW, tz=UTC)

        self.assertEqual(len(buckets), 1)
        self.assertEqual(buckets[0].key, "2024-03-01")
        self.assertEqual(buckets[0].series_counts["flux-dev"], 2)

    def test_sparse_buckets(self):
        """Intervals without events are not materialized."""
        events = [
            make_event(datetime(2024, 3, 1, 10, tzinfo=UTC)),
            make_event(datetime(2024, 3, 5, 10, tzinfo=UTC)),
        ]
        buckets = bucket_events(events, "day", "all", tz=UTC)
        self.assertEqual([b.key for b in buckets], ["2024-03-01", "2024-03-05"])

    def test_absent_series_reads_zero(self):
        events = [
            make_event(datetime(2024, 3, 1, 10, tzinfo=UTC)),
            make_event(datetime(2024, 3, 2, 10, tzinfo=UTC), "upscale"),
        ]
        buckets = bucket_events(events, "day", "all", tz=UTC)

        self.assertNotIn("upscale", buckets[0].series_counts)
        self.assertEqual(buckets[0].count("upscale"), 0)
        self.assertEqual(buckets[1].count("upscale"), 1)

    def test_cutoff_is_inclusive(self):
        """Events at the cutoff stay, strictly older events go."""
        cutoff = range_cutoff("1_week", NOW)
        events = [
            make_event(cutoff),
            make_event(cutoff - timedelta(seconds=1), "upscale"),
        ]
        buckets = bucket_events(events, "day", "1_week", now=NOW, tz=UTC)

        totals = series_totals(buckets)
        self.assertEqual(totals, {"flux-dev": 1})

    def test_all_range_has_no_cutoff(self):
        events = [make_event(datetime(2001, 1, 1, tzinfo=UTC))]
        buckets = bucket_events(events, "month", "all", now=NOW, tz=UTC)
        self.assertEqual(buckets[0].key, "2001-01")

    def test_ordering_across_year_boundary(self):
        events = [
            make_event(datetime(2024, 1, 1, 0, 30, tzinfo=UTC)),
            make_event(datetime(2023, 12, 31, 23, 30, tzinfo=UTC)),
            make_event(datetime(2023, 12, 31, 9, 0, tzinfo=UTC)),
        ]
        buckets = bucket_events(events, "hour", "all", tz=UTC)
        self.assertEqual(
            [b.key for b in buckets],
            ["2023-12-31T09:00", "2023-12-31T23:00", "2024-01-01T00:00"],
        )

    def test_local_hour_used(self):
        minus_five = timezone(timedelta(hours=-5))
        events = [make_event(datetime(2024, 3, 1, 2, tzinfo=UTC))]
        buckets = bucket_events(events, "hour", "all", tz=minus_five)
        self.assertEqual(buckets[0].key, "2024-02-29T21:00")

    def test_unreadable_timestamps_dropped(self):
        events = [
            SimpleNamespace(timestamp="garbage", series_id="flux-dev"),
            SimpleNamespace(timestamp=None, series_id="flux-dev"),
            SimpleNamespace(timestamp="2024-03-01T10:00:00Z", series_id="flux-dev"),
        ]
        buckets = bucket_events(events, "day", "all", tz=UTC)
        self.assertEqual(len(buckets), 1)
        self.assertEqual(buckets[0].count("flux-dev"), 1)

    def test_empty_events(self):
        for granularity in GRANULARITIES:
            self.assertEqual(bucket_events([], granularity, "1_day", now=NOW, tz=UTC), ())

    def test_unknown_range_rejected(self):
        with self.assertRaises(ValueError):
            bucket_events([], "day", "2_days", now=NOW, tz=UTC)


class TestBucketProperties(unittest.TestCase):
    """Properties that hold for any event set."""

    def setUp(self):
        self.events = random_events()

    def test_conservation(self):
        """Per-series totals equal the events at or after the cutoff."""
        for granularity in GRANULARITIES:
            for range_name in RANGES:
                with self.subTest(granularity=granularity, range=range_name):
                    cutoff = range_cutoff(range_name, NOW)
                    expected = {}
                    for e in self.events:
                        if cutoff is None or e.timestamp >= cutoff:
                            expected[e.series_id] = expected.get(e.series_id, 0) + 1

                    buckets = bucket_events(self.events, granularity, range_name, now=NOW, tz=UTC)
                    self.assertEqual(series_totals(buckets), expected)

    def test_strictly_ascending_unique_keys(self):
        for granularity in GRANULARITIES:
            with self.subTest(granularity=granularity):
                keys = [b.key for b in bucket_events(self.events, granularity, "all", tz=UTC)]
                self.assertEqual(keys, sorted(set(keys)))

    def test_idempotent(self):
        first = bucket_events(self.events, "week", "1_year", now=NOW, tz=UTC)
        second = bucket_events(list(reversed(self.events)), "week", "1_year", now=NOW, tz=UTC)

        self.assertEqual(first, second)
        self.assertEqual(repr(first), repr(bucket_events(self.events, "week", "1_year", now=NOW, tz=UTC)))


class TestSeriesHelpers(unittest.TestCase):

    def test_series_universe_first_appearance(self):
        events = [
            make_event(NOW, "upscale"),
            make_event(NOW, "flux-dev"),
            make_event(NOW, "upscale"),
        ]
        self.assertEqual(series_universe(events), ["upscale", "flux-dev"])


if __name__ == '__main__':
    unittest.main()
