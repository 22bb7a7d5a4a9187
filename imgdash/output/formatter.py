"""
Output formatting for imgdash.

Handles ASCII tables, colors, and CLI output formatting.
"""

import os
import re
import sys
from typing import List, Optional, Any, Tuple, Union

# Enable ANSI colors on Windows
if sys.platform == 'win32':
    os.system('')  # Triggers VT100 emulation

_ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    # Foreground colors
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    GRAY = '\033[90m'


# Heatmap tier glyphs, empty to busiest
TIER_GLYPHS = ('·', '░', '▒', '▓', '█')
TIER_COLORS = (Colors.GRAY, Colors.GREEN, Colors.GREEN, Colors.YELLOW, Colors.RED)


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """Apply color if enabled."""
    if not enabled:
        return text
    return f"{color}{text}{Colors.RESET}"


def rgb_color(rgb: Tuple[int, int, int]) -> str:
    """24-bit foreground escape for an RGB tuple."""
    r, g, b = rgb
    return f'\033[38;2;{r};{g};{b}m'


def bold(text: str, enabled: bool = True) -> str:
    """Make text bold."""
    if not enabled:
        return text
    return f"{Colors.BOLD}{text}{Colors.RESET}"


def dim(text: str, enabled: bool = True) -> str:
    """Make text dim/gray."""
    if not enabled:
        return text
    return f"{Colors.DIM}{text}{Colors.RESET}"


def format_number(value: Union[int, float], decimals: int = 0) -> str:
    """Format number with thousands separator."""
    if decimals > 0:
        return f"{value:,.{decimals}f}"
    return f"{int(value):,}"


def tier_glyph(tier: int, color_enabled: bool = True) -> str:
    """Single heatmap cell glyph for an intensity tier."""
    tier = min(max(tier, 0), len(TIER_GLYPHS) - 1)
    return colorize(TIER_GLYPHS[tier], TIER_COLORS[tier], color_enabled)


def create_bar(value: float, max_value: float, width: int = 20) -> str:
    """Create ASCII progress bar."""
    if max_value == 0:
        return ' ' * width

    ratio = min(1.0, value / max_value)
    filled = int(ratio * width)

    return '█' * filled + '░' * (width - filled)


def format_table(
    headers: List[str],
    rows: List[List[Any]],
    alignments: Optional[List[str]] = None,
    color_enabled: bool = True
) -> str:
    """
    Format data as an ASCII table.

    Args:
        headers: Column headers
        rows: List of row tuples/lists
        alignments: List of 'l' or 'r' for each column
        color_enabled: Whether to apply colors to headers
    """
    if not rows:
        return "No data to display."

    str_rows = [[str(cell) for cell in row] for row in rows]

    # Column widths ignore ANSI codes
    col_widths = [len(h) for h in headers]
    for row in str_rows:
        for i, cell in enumerate(row):
            col_widths[i] = max(col_widths[i], len(strip_ansi(cell)))

    if alignments is None:
        alignments = ['l'] * len(headers)

    def align_cell(text: str, width: int, align: str) -> str:
        padding_needed = width - len(strip_ansi(text))
        if align == 'r':
            return ' ' * padding_needed + text
        return text + ' ' * padding_needed

    lines = []

    header_line = ' │ '.join(
        align_cell(h, col_widths[i], alignments[i]) for i, h in enumerate(headers)
    )
    if color_enabled:
        header_line = bold(header_line)
    lines.append(header_line)

    lines.append('─┼─'.join('─' * w for w in col_widths))

    for row in str_rows:
        lines.append(' │ '.join(
            align_cell(cell, col_widths[i], alignments[i]) for i, cell in enumerate(row)
        ))

    return '\n'.join(lines)


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    return _ANSI_ESCAPE.sub('', text)


def print_section(title: str, color_enabled: bool = True) -> str:
    """Create a section header."""
    return f"\n{bold(title, color_enabled)}\n{'-' * len(title)}"
