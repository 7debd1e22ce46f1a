"""Progress percentage rules shared by the API and the editor."""
from __future__ import annotations

import math
from typing import Any, Dict, Literal

from planmap.domain.errors import ValidationError

ProgressLevel = Literal["low", "medium", "high"]

PROGRESS_COLORS: Dict[str, Dict[str, str]] = {
    "low": {
        "color": "#ef4444",
        "bg_color": "#fee2e2",
        "border_color": "#fecaca",
        "text_color": "#dc2626",
    },
    "medium": {
        "color": "#f59e0b",
        "bg_color": "#fef3c7",
        "border_color": "#fed7aa",
        "text_color": "#d97706",
    },
    "high": {
        "color": "#10b981",
        "bg_color": "#dcfce7",
        "border_color": "#bbf7d0",
        "text_color": "#059669",
    },
}


def clamp_progress(value: Any) -> int:
    """Round to the nearest integer (halves up) and clamp into [0, 100]."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Progress must be a number, got {value!r}")
    if isinstance(value, float) and math.isnan(value):
        raise ValidationError("Progress must be a number, got NaN")
    if value == math.inf:
        return 100
    if value == -math.inf:
        return 0
    return max(0, min(100, math.floor(value + 0.5)))


def progress_level(progress: int) -> ProgressLevel:
    if progress <= 33:
        return "low"
    if progress <= 66:
        return "medium"
    return "high"


def progress_color(progress: int) -> Dict[str, str]:
    """Palette used to render a node at the given progress."""
    return PROGRESS_COLORS[progress_level(progress)]
