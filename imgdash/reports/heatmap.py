"""
Heatmap report for imgdash.

Renders the calendar activity heatmap in the terminal: one row per
weekday, one column per week.
"""

from typing import Any, Dict, List

from imgdash.analytics.heatmap import intensity_tier, month_labels
from imgdash.analytics.pipeline import DashboardView
from imgdash.config.loader import get_heatmap_tiers, get_week_start
from imgdash.output.formatter import bold, dim, format_number, tier_glyph

DAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def weekday_names(week_start: int) -> List[str]:
    """Row labels starting at the configured week start."""
    return [DAY_ABBR[(week_start + i) % 7] for i in range(7)]


def generate_heatmap(
    view: DashboardView,
    config: Dict[str, Any],
    color_enabled: bool = True
) -> str:
    """
    Generate the activity heatmap view.

    Args:
        view: Computed dashboard view
        config: Configuration dict
        color_enabled: Whether to apply colors
    """
    cells = view.cells
    summary = view.summary
    lines = [bold(f"GENERATION ACTIVITY ({view.controls.lookback.replace('_', ' ')})", color_enabled)]

    if summary["total"] == 0:
        lines.append("")
        lines.append("No generations in the selected range.")
        return "\n".join(lines)

    lines.append(
        f"{format_number(summary['total'])} generations on "
        f"{format_number(summary['active_days'])} of {format_number(summary['days'])} days"
    )
    if summary["busiest_day"]:
        lines.append(f"Busiest day: {summary['busiest_day']} ({format_number(summary['max_count'])})")
    lines.append("")

    weeks = summary["weeks"]
    thresholds = get_heatmap_tiers(config)

    header = [' '] * weeks
    for week_index, name in month_labels(cells):
        # Skip labels that would overwrite the previous one
        if all(header[i] == ' ' for i in range(max(week_index - 1, 0), min(week_index + 3, weeks))):
            for offset, ch in enumerate(name):
                if week_index + offset < weeks:
                    header[week_index + offset] = ch
    lines.append("    " + "".join(header))

    grid = [[' '] * weeks for _ in range(7)]
    for cell in cells:
        if cell.is_placeholder:
            continue
        grid[cell.weekday][cell.week_index] = tier_glyph(
            intensity_tier(cell.count, thresholds), color_enabled
        )

    for weekday, name in enumerate(weekday_names(get_week_start(config))):
        lines.append(f"{name} " + "".join(grid[weekday]))

    legend = " ".join(tier_glyph(t, color_enabled) for t in range(len(thresholds) + 1))
    lines.append("")
    lines.append(dim("Less ", color_enabled) + legend + dim(" More", color_enabled))

    return "\n".join(lines)
