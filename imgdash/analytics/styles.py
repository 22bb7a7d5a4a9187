"""Series style resolver.

Colors come from two injected tables: a closed allowlist of well-known
series with fixed colors, and a palette that every other series cycles
through by its position in the ordered series list. Running out of palette
colors wraps around and repeats colors.
"""

from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from imgdash.models.entities import RGB, SeriesStyle

FALLBACK_COLOR: RGB = (128, 128, 128)


def parse_hex_color(value: str) -> RGB:
    """Parse '#rrggbb' (or '#rgb') into an RGB tuple."""
    text = value.strip().lstrip('#') if isinstance(value, str) else ''
    if len(text) == 3:
        text = ''.join(ch * 2 for ch in text)
    if len(text) != 6:
        raise ValueError(f"Invalid color: {value!r}")
    try:
        return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
    except ValueError:
        raise ValueError(f"Invalid color: {value!r}") from None


def resolve_color(
    series_id: str,
    known_series: Sequence[str],
    palette_config: Mapping[str, Any],
) -> RGB:
    """
    Assign a color to a series.

    Args:
        series_id: Series to color
        known_series: Ordered list of all known series
        palette_config: {"series_colors": {id: hex}, "palette": [hex, ...]}

    Returns:
        RGB tuple. Same inputs always give the same color.
    """
    named = palette_config.get("series_colors") or {}
    if series_id in named:
        return parse_hex_color(named[series_id])

    palette = palette_config.get("palette") or []
    if not palette:
        return FALLBACK_COLOR

    try:
        index = list(known_series).index(series_id)
    except ValueError:
        index = len(known_series)
    return parse_hex_color(palette[index % len(palette)])


class SeriesFilter:
    """
    Enable/disable state of chart series for one dashboard session.

    Only decides which series take part in geometry and rendering; bucket
    counts are never touched.
    """

    def __init__(self, universe: Iterable[str] = ()):
        self._universe: tuple = tuple(universe)
        self._disabled: set = set()

    @property
    def universe(self) -> tuple:
        return self._universe

    @property
    def disabled(self) -> FrozenSet[str]:
        return frozenset(self._disabled)

    def reset(self, universe: Iterable[str]) -> bool:
        """
        Adopt a new series universe.

        When the set of series differs from the current one every series
        is re-enabled. Returns True if the set changed.
        """
        universe = tuple(universe)
        changed = set(universe) != set(self._universe)
        self._universe = universe
        if not changed:
            return False
        self._disabled.clear()
        return True

    def is_enabled(self, series_id: str) -> bool:
        return series_id not in self._disabled

    def set_enabled(self, series_id: str, enabled: bool) -> None:
        if enabled:
            self._disabled.discard(series_id)
        else:
            self._disabled.add(series_id)

    def toggle(self, series_id: str) -> bool:
        """Flip a series and return its new enabled state."""
        enabled = not self.is_enabled(series_id)
        self.set_enabled(series_id, enabled)
        return enabled

    def set_disabled(self, disabled: Iterable[str]) -> None:
        self._disabled = set(disabled)

    def enabled_series(self) -> List[str]:
        """Enabled series in universe order."""
        return [s for s in self._universe if s not in self._disabled]


def resolve_styles(
    known_series: Sequence[str],
    palette_config: Mapping[str, Any],
    disabled: Optional[Iterable[str]] = None,
) -> List[SeriesStyle]:
    """Styles for every known series, in list order."""
    disabled_set = set(disabled or ())
    return [
        SeriesStyle(
            series_id=series_id,
            color=resolve_color(series_id, known_series, palette_config),
            enabled=series_id not in disabled_set,
        )
        for series_id in known_series
    ]


def legend_entries(
    styles: Sequence[SeriesStyle],
    totals: Mapping[str, int],
) -> List[Dict[str, Any]]:
    """Legend rows: style plus the series total in the current result."""
    return [
        {
            "series_id": s.series_id,
            "color": s.hex,
            "enabled": s.enabled,
            "total": totals.get(s.series_id, 0),
        }
        for s in styles
    ]
