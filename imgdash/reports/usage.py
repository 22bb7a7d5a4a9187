"""
Usage report for imgdash.

Generates the multi-series usage table: one row per time bucket, one
column per enabled series.
"""

from imgdash.analytics.pipeline import DashboardView
from imgdash.output.formatter import (
    bold, colorize, create_bar, dim, format_number, format_table, print_section, rgb_color
)


def generate_usage(view: DashboardView, color_enabled: bool = True) -> str:
    """
    Generate the usage-by-time view.

    Args:
        view: Computed dashboard view
        color_enabled: Whether to apply colors
    """
    controls = view.controls
    title = (
        f"USAGE BY {controls.granularity.upper()} "
        f"({controls.range.replace('_', ' ')})"
    )
    lines = [bold(title, color_enabled)]

    if not view.buckets:
        lines.append("")
        lines.append("No usage data for the selected range.")
        return "\n".join(lines)

    enabled = view.enabled_series
    max_total = max(sum(b.count(s) for s in enabled) for b in view.buckets)

    headers = ["Bucket"] + enabled + ["Total", "Activity"]
    alignments = ['l'] + ['r'] * (len(enabled) + 1) + ['l']
    rows = []
    for b in view.buckets:
        total = sum(b.count(s) for s in enabled)
        rows.append(
            [b.label]
            + [format_number(b.count(s)) for s in enabled]
            + [format_number(total), create_bar(total, max_total, width=20)]
        )

    lines.append("")
    lines.append(format_table(headers, rows, alignments, color_enabled))

    lines.append(print_section("SERIES", color_enabled))
    for style in view.styles:
        swatch = colorize("●", rgb_color(style.color), color_enabled)
        total = format_number(view.totals.get(style.series_id, 0))
        entry = f"{swatch} {style.series_id:24} {total:>8}  {style.hex}"
        if not style.enabled:
            entry = dim(entry + "  (hidden)", color_enabled)
        lines.append(entry)

    return "\n".join(lines)
