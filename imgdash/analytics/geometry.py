"""Chart geometry engine.

Projects (bucket index, value) pairs into a padded pixel viewport and maps
pointer positions back to the nearest bucket for tooltips.

    x = padding + index * (width - 2*padding) / max(bucket_count - 1, 1)
    y = padding + (height - 2*padding) * (1 - value / max_value)
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

from imgdash.models.entities import Bucket, ChartLayout, ChartPoint, Tooltip, Viewport


class InvalidViewportError(ValueError):
    """The viewport leaves no drawing area once padding is removed."""

    def __init__(self, viewport: Viewport):
        super().__init__(
            f"Invalid viewport {viewport.width}x{viewport.height} "
            f"with padding {viewport.padding}"
        )
        self.viewport = viewport


def _check_viewport(viewport: Viewport) -> None:
    if viewport.is_degenerate:
        raise InvalidViewportError(viewport)


def _x_step(viewport: Viewport, bucket_count: int) -> float:
    return (viewport.width - 2 * viewport.padding) / max(bucket_count - 1, 1)


def compute_max_value(buckets: Sequence[Bucket], enabled_series: Sequence[str]) -> int:
    """Largest enabled-series count over all buckets, never below 1."""
    max_value = 0
    for b in buckets:
        for series_id in enabled_series:
            count = b.count(series_id)
            if count > max_value:
                max_value = count
    return max(max_value, 1)


def to_pixel(
    bucket_index: int,
    value: float,
    max_value: float,
    viewport: Viewport,
    bucket_count: int,
) -> Tuple[float, float]:
    """
    Forward mapping from data space to pixels.

    Raises:
        InvalidViewportError: if the viewport has no drawing area
    """
    _check_viewport(viewport)
    if max_value <= 0:
        max_value = 1

    x = viewport.padding + bucket_index * _x_step(viewport, bucket_count)
    y = viewport.padding + (viewport.height - 2 * viewport.padding) * (1 - value / max_value)
    return x, y


def nearest_bucket(pointer_x: float, viewport: Viewport, bucket_count: int) -> Optional[int]:
    """
    Inverse mapping from a pointer x position to a bucket index.

    Returns None when there are no buckets, otherwise an index clamped
    to [0, bucket_count - 1].

    Raises:
        InvalidViewportError: if the viewport has no drawing area
    """
    _check_viewport(viewport)
    if bucket_count <= 0:
        return None

    if math.isnan(pointer_x):
        pointer_x = viewport.padding
    # Clamping the pointer first keeps infinities out of the arithmetic
    pointer_x = min(max(pointer_x, viewport.padding), viewport.width - viewport.padding)

    raw = (pointer_x - viewport.padding) / _x_step(viewport, bucket_count)
    index = math.floor(raw + 0.5)
    return min(max(index, 0), bucket_count - 1)


def highlighted_series(bucket: Bucket, enabled_series: Sequence[str]) -> Optional[str]:
    """
    Enabled series with the greatest count in a bucket.

    Ties go to the series listed first.
    """
    best = None
    best_value = -1
    for series_id in enabled_series:
        value = bucket.count(series_id)
        if value > best_value:
            best, best_value = series_id, value
    return best


def build_chart(
    buckets: Sequence[Bucket],
    enabled_series: Sequence[str],
    viewport: Viewport,
    max_labels: int = 12,
) -> ChartLayout:
    """
    Lay out every enabled series as a polyline of points.

    An empty bucket sequence gives status 'no_data' and a degenerate
    viewport gives 'invalid_viewport'; neither raises.
    """
    if not buckets:
        return ChartLayout(status="no_data")
    if viewport.is_degenerate:
        return ChartLayout(status="invalid_viewport", bucket_count=len(buckets))

    count = len(buckets)
    max_value = compute_max_value(buckets, enabled_series)

    series: Dict[str, List[ChartPoint]] = {}
    for series_id in enabled_series:
        points = []
        for index, b in enumerate(buckets):
            value = b.count(series_id)
            x, y = to_pixel(index, value, max_value, viewport, count)
            points.append(ChartPoint(bucket_index=index, value=value, x=x, y=y))
        series[series_id] = points

    label_every = max(1, math.ceil(count / max(max_labels, 1)))
    x_labels = [
        (to_pixel(index, 0, max_value, viewport, count)[0], b.label)
        for index, b in enumerate(buckets)
        if index % label_every == 0
    ]

    return ChartLayout(
        status="ok",
        bucket_count=count,
        max_value=max_value,
        series=series,
        x_labels=x_labels,
    )


def hit_test(
    pointer_x: float,
    buckets: Sequence[Bucket],
    enabled_series: Sequence[str],
    viewport: Viewport,
) -> Optional[Tooltip]:
    """
    Tooltip for the bucket nearest to the pointer.

    Read-only over the buckets. Returns None when there is nothing to
    show: no buckets or a degenerate viewport.
    """
    if not buckets or viewport.is_degenerate:
        return None

    count = len(buckets)
    index = nearest_bucket(pointer_x, viewport, count)
    bucket = buckets[index]
    max_value = compute_max_value(buckets, enabled_series)

    series_id = highlighted_series(bucket, enabled_series)
    value = bucket.count(series_id) if series_id else 0
    x, y = to_pixel(index, value, max_value, viewport, count)

    return Tooltip(
        bucket_index=index,
        key=bucket.key,
        label=bucket.label,
        highlighted_series=series_id,
        value=value,
        x=x,
        y=y,
        entries=tuple((s, bucket.count(s)) for s in enabled_series),
    )
