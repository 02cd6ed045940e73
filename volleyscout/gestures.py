"""
Pointer gesture helpers used by the capture state machine.

LongPressTracker splits one press on a player button into either a
short "select" or a long "substitute", never both. TrajectoryDraft
holds the in-progress start/end points and decides which handle a
pointer-down grabs.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from volleyscout.config import HIT_RADIUS, LONG_PRESS_SECONDS
from volleyscout.geometry import hit_test, normalize
from volleyscout.models import LogicalPoint, Slot, TeamSide, Trajectory


# =========================================================
# LONG PRESS
# =========================================================

class PressPhase(Enum):
    IDLE = "idle"
    ARMED = "armed"
    FIRED = "fired"
    CANCELED = "canceled"


class PressKind(Enum):
    SELECT = "select"
    SUBSTITUTE = "substitute"


@dataclass(frozen=True)
class PressResult:
    kind: PressKind
    side: TeamSide
    slot: Slot


class LongPressTracker:
    """
    Press-duration timer for player buttons.

    Time only advances through explicit calls (press / poll / release),
    so the host event loop decides when the timer is checked.
    """

    def __init__(
        self,
        threshold: float = LONG_PRESS_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.threshold = threshold
        self._clock = clock
        self._phase = PressPhase.IDLE
        self._side: Optional[TeamSide] = None
        self._slot: Optional[Slot] = None
        self._pressed_at = 0.0

    @property
    def phase(self) -> PressPhase:
        return self._phase

    def press(self, side: TeamSide, slot: Slot, at: Optional[float] = None) -> None:
        self._side = side
        self._slot = slot
        self._pressed_at = self._now(at)
        self._phase = PressPhase.ARMED

    def poll(self, now: Optional[float] = None) -> Optional[PressResult]:
        """Fire the substitution once the threshold has elapsed."""
        if self._phase is not PressPhase.ARMED:
            return None
        if self._now(now) - self._pressed_at < self.threshold:
            return None
        return self._fire()

    def release(self, at: Optional[float] = None) -> Optional[PressResult]:
        if self._phase is PressPhase.FIRED:
            # substitution already delivered, swallow the click
            self._phase = PressPhase.IDLE
            return None

        if self._phase is not PressPhase.ARMED:
            return None

        if self._now(at) - self._pressed_at >= self.threshold:
            result = self._fire()
            self._phase = PressPhase.IDLE
            return result

        self._phase = PressPhase.CANCELED
        return PressResult(PressKind.SELECT, self._side, self._slot)

    def abort(self) -> None:
        """Pointer left the button: neither select nor substitute."""
        if self._phase is PressPhase.ARMED:
            self._phase = PressPhase.CANCELED

    def _fire(self) -> PressResult:
        self._phase = PressPhase.FIRED
        return PressResult(PressKind.SUBSTITUTE, self._side, self._slot)

    def _now(self, at: Optional[float]) -> float:
        return self._clock() if at is None else at


# =========================================================
# TRAJECTORY DRAG
# =========================================================

class DragHandle(Enum):
    START = "start"
    END = "end"


class TrajectoryDraft:
    """In-progress trajectory in logical court units."""

    def __init__(self, radius: float = HIT_RADIUS):
        self.radius = radius
        self.start: Optional[LogicalPoint] = None
        self.end: Optional[LogicalPoint] = None
        self.handle: Optional[DragHandle] = None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def is_dragging(self) -> bool:
        return self.handle is not None

    def seed(self, start: LogicalPoint) -> None:
        self.start = start
        self.end = None
        self.handle = None

    def clear(self) -> None:
        self.start = None
        self.end = None
        self.handle = None

    def grab(self, point: LogicalPoint) -> DragHandle:
        """
        Pick the handle for a pointer-down. The end point wins when both
        are in reach; empty space places a new end point.
        """
        if hit_test(point, self.end, self.radius):
            self.handle = DragHandle.END
        elif hit_test(point, self.start, self.radius):
            self.handle = DragHandle.START
        else:
            self.end = point
            self.handle = DragHandle.END
        return self.handle

    def move(self, point: LogicalPoint) -> bool:
        if self.handle is DragHandle.START:
            self.start = point
        elif self.handle is DragHandle.END:
            self.end = point
        else:
            return False
        return True

    def release(self) -> bool:
        """End the drag; True when both points are now placed."""
        was_dragging = self.is_dragging
        self.handle = None
        return was_dragging and self.is_complete

    def to_trajectory(self) -> Optional[Trajectory]:
        if not self.is_complete:
            return None
        return Trajectory(start=normalize(self.start), end=normalize(self.end))
