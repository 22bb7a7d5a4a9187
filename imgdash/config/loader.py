"""
Configuration loading for imgdash.

Handles loading configuration from ~/.imgdash/config.json with sensible defaults.
"""

import copy
import json
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Dict, Any, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Default configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    "events_path": "~/.imgdash/events.json",

    # IANA zone for local dates/hours; None uses the process local time
    "timezone": None,

    # First day of a calendar week (heatmap columns and week buckets)
    "week_start": "sunday",

    # Well-known series get a fixed, memorable color
    "series_colors": {
        "flux-dev": "#3b82f6",
        "flux-pro": "#8b5cf6",
        "flux-schnell": "#06b6d4",
        "sdxl": "#f97316",
        "img2img": "#10b981",
        "inpaint": "#ec4899",
        "upscale": "#eab308",
        "lora-training": "#ef4444",
    },

    # Every other series cycles through this palette by list position
    "palette": [
        "#6366f1",
        "#14b8a6",
        "#f59e0b",
        "#84cc16",
        "#e11d48",
        "#0ea5e9",
        "#a855f7",
        "#64748b",
    ],

    # Count thresholds for heatmap intensity tiers (presentation only)
    "heatmap_tiers": [1, 3, 6, 10],

    # Default chart viewport in pixels
    "viewport": {
        "width": 800,
        "height": 300,
        "padding": 40,
    },

    # Initial control values for a new session
    "defaults": {
        "lookback": "1_year",
        "range": "1_month",
        "granularity": "day",
    },

    # Display options
    "display": {
        "color_enabled": True,
    },
}


def get_config_path() -> Path:
    """Get path to config file."""
    return Path.home() / ".imgdash" / "config.json"


def get_events_path(config: Dict[str, Any]) -> Path:
    """Get expanded event snapshot path from config."""
    return Path(config["events_path"]).expanduser()


def get_timezone(config: Dict[str, Any]) -> Optional[tzinfo]:
    """
    Resolve the configured timezone.

    Returns None (process local time) when unset or unknown.
    """
    name = config.get("timezone")
    if not name or not isinstance(name, str):
        return None
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        print(f"Warning: Unknown timezone '{name}', using local time")
        return None


def get_week_start(config: Dict[str, Any]) -> int:
    """Get the configured week start as a Python weekday (0=Monday)."""
    from imgdash.analytics.ranges import parse_week_start
    try:
        return parse_week_start(config.get("week_start", "sunday"))
    except ValueError as e:
        print(f"Warning: {e}, using sunday")
        return 6


def get_palette_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Get the color tables used by the series style resolver."""
    return {
        "series_colors": dict(config.get("series_colors") or {}),
        "palette": list(config.get("palette") or DEFAULT_CONFIG["palette"]),
    }


def get_heatmap_tiers(config: Dict[str, Any]) -> List[int]:
    """Get heatmap tier thresholds, sorted ascending."""
    return sorted(int(t) for t in config.get("heatmap_tiers") or [])


def load_config() -> Dict[str, Any]:
    """
    Load configuration from file, merging with defaults.

    Returns a complete configuration with all default values filled in.
    User config overrides defaults where specified.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = get_config_path()

    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)

            # Shallow merge dict sections
            for key in ['series_colors', 'viewport', 'defaults', 'display']:
                if key in user_config and isinstance(user_config[key], dict):
                    config[key].update(user_config[key])

            # Direct override for simple values and lists
            for key in ['events_path', 'timezone', 'week_start', 'palette', 'heatmap_tiers']:
                if key in user_config:
                    config[key] = user_config[key]

        except json.JSONDecodeError as e:
            print(f"Warning: Could not parse config file: {e}")
        except OSError as e:
            print(f"Warning: Error loading config: {e}")

    return config


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to file."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)
