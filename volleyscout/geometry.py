"""
Coordinate transforms for the court surface.

Three spaces are involved:

- screen pixels delivered by the pointer source,
- logical court units: the 18 x 9 court with origin at my end line,
  drawn inside a larger viewBox that leaves room for the serve zones,
- stored percentages: each axis scaled to 0-100 of the court.

Stored trajectories only ever use the percentage form, so a change in
render size or aspect ratio never invalidates saved data.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from volleyscout.config import (
    COURT_LENGTH,
    COURT_WIDTH,
    HIT_RADIUS,
    SERVE_X_ME,
    SERVE_X_OP,
    VIEWBOX,
)
from volleyscout.models import ActionKind, Coordinate, LogicalPoint, Slot, TeamSide


# 3 x 2 grid per side, mirrored across the net
_ZONE_CENTERS: Dict[TeamSide, Dict[Slot, Tuple[float, float]]] = {
    TeamSide.ME: {
        Slot.P4: (7.5, 1.5),
        Slot.P3: (7.5, 4.5),
        Slot.P2: (7.5, 7.5),
        Slot.P5: (3.0, 1.5),
        Slot.P6: (3.0, 4.5),
        Slot.P1: (3.0, 7.5),
    },
    TeamSide.OP: {
        Slot.P2: (10.5, 1.5),
        Slot.P3: (10.5, 4.5),
        Slot.P4: (10.5, 7.5),
        Slot.P1: (15.0, 1.5),
        Slot.P6: (15.0, 4.5),
        Slot.P5: (15.0, 7.5),
    },
}

_SERVE_X = {TeamSide.ME: SERVE_X_ME, TeamSide.OP: SERVE_X_OP}


@dataclass(frozen=True)
class CourtViewport:
    """
    Where the viewBox sits on screen.

    The viewBox is scaled uniformly to fit the surface and centered on
    both axes (letterboxed), the same placement an SVG gets with
    preserveAspectRatio="xMidYMid meet".
    """
    left: float
    top: float
    width: float
    height: float
    viewbox: Tuple[float, float, float, float] = VIEWBOX

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("viewport width and height must be positive")

    @property
    def scale(self) -> float:
        _, _, vw, vh = self.viewbox
        return min(self.width / vw, self.height / vh)

    def logical_to_screen_matrix(self) -> np.ndarray:
        vx, vy, vw, vh = self.viewbox
        s = self.scale
        tx = self.left + (self.width - vw * s) / 2 - vx * s
        ty = self.top + (self.height - vh * s) / 2 - vy * s
        return np.array(
            [[s, 0.0, tx],
             [0.0, s, ty],
             [0.0, 0.0, 1.0]],
            dtype=np.float64,
        )

    def screen_to_logical_matrix(self) -> np.ndarray:
        return np.linalg.inv(self.logical_to_screen_matrix())

    def screen_to_logical(self, pointer_x: float, pointer_y: float) -> LogicalPoint:
        x, y, _ = self.screen_to_logical_matrix() @ np.array([pointer_x, pointer_y, 1.0])
        return LogicalPoint(x=float(x), y=float(y))

    def logical_to_screen(self, point: LogicalPoint) -> Tuple[float, float]:
        x, y, _ = self.logical_to_screen_matrix() @ np.array([point.x, point.y, 1.0])
        return float(x), float(y)


# =========================================================
# NORMALIZATION
# =========================================================

def normalize(point: LogicalPoint) -> Coordinate:
    return Coordinate(
        x=point.x * 100.0 / COURT_LENGTH,
        y=point.y * 100.0 / COURT_WIDTH,
    )


def denormalize(coord: Coordinate) -> LogicalPoint:
    return LogicalPoint(
        x=coord.x * COURT_LENGTH / 100.0,
        y=coord.y * COURT_WIDTH / 100.0,
    )


# =========================================================
# ZONE ANCHORS
# =========================================================

def zone_center(
    side: TeamSide,
    slot: Slot,
    action: Optional[ActionKind] = None,
    ignore_serve_offset: bool = False,
) -> LogicalPoint:
    """
    Anchor point for a rotation slot.

    The Libero anchors on slot 6 (middle back). For a serve the anchor
    moves behind that side's end line; background zone labels pass
    ignore_serve_offset=True so they never move.
    """
    anchor_slot = Slot.P6 if slot.is_libero else slot
    x, y = _ZONE_CENTERS[side][anchor_slot]

    if action is ActionKind.SERVE and not ignore_serve_offset:
        x = _SERVE_X[side]

    return LogicalPoint(x=x, y=y)


# =========================================================
# HIT TESTING
# =========================================================

def distance(a: LogicalPoint, b: LogicalPoint) -> float:
    return float(np.hypot(a.x - b.x, a.y - b.y))


def hit_test(
    point: LogicalPoint,
    candidate: Optional[LogicalPoint],
    radius: float = HIT_RADIUS,
) -> bool:
    if candidate is None:
        return False
    return distance(point, candidate) < radius
