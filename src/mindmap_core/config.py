"""Centralized configuration for mindmap-core."""

from __future__ import annotations

from dataclasses import dataclass

# ─── Geometry constants ──────────────────────────────────────────────────────

NODE_WIDTH: float = 150
NODE_HEIGHT: float = 48
HORIZONTAL_SPACING: float = 250
VERTICAL_SPACING: float = 70

CONTROL_RATIO: float = 0.4
MIN_CONTROL_OFFSET: float = 40

# ─── View constants ──────────────────────────────────────────────────────────

MIN_SCALE: float = 0.3
MAX_SCALE: float = 3.0
ZOOM_STEP: float = 1.2

# ─── Persistence ─────────────────────────────────────────────────────────────

AUTOSAVE_DEBOUNCE: float = 2.0


@dataclass(frozen=True)
class LayoutConfig:
    """Node box size and spacing used by layout and connection geometry."""

    node_width: float = NODE_WIDTH
    node_height: float = NODE_HEIGHT
    horizontal_spacing: float = HORIZONTAL_SPACING
    vertical_spacing: float = VERTICAL_SPACING
    control_ratio: float = CONTROL_RATIO
    min_control_offset: float = MIN_CONTROL_OFFSET


@dataclass(frozen=True)
class ViewConfig:
    """Zoom limits for the view transform."""

    min_scale: float = MIN_SCALE
    max_scale: float = MAX_SCALE
    zoom_step: float = ZOOM_STEP

    def clamp(self, scale: float) -> float:
        return max(self.min_scale, min(scale, self.max_scale))
