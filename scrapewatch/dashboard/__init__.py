"""Monitoring Dashboard - HTTP application, pages and record models.

This package serves the login-gated dashboard: the FastAPI app in `api`,
HTML builders in `pages`, and the static assets (design tokens and the
background/clock script) under `static/`.
"""

from pathlib import Path
from typing import Any

STATIC_DIR = Path(__file__).parent / "static"

__all__ = ["STATIC_DIR", "get_dashboard_config"]


def get_dashboard_config() -> dict[str, Any]:
    """Get client-side dashboard configuration."""
    return {
        "theme": "dark",
        "palette": {
            "primary": "#22d3ee",     # cyan-400
            "accent": "#3b82f6",      # blue-500
            "surface": "#0f172a",     # slate-900
            "background": "#000000",
            "text": "#f1f5f9",        # slate-100
            "textMuted": "#94a3b8",   # slate-400
            "success": "#4ade80",     # green-400
            "danger": "#f87171",      # red-400
            "warning": "#fbbf24",     # amber-400
        },
        "clockInterval": 1000,  # ms
        "particles": {
            "count": 100,
            "opacity": 0.3,
            "minSize": 1,
            "maxSize": 4,
            "maxSpeed": 0.25,
        },
        "pageSizeOptions": [5, 10, 20, 50],
    }
