import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from volleyscout.config import HIT_RADIUS
from volleyscout.exceptions import IncompleteCaptureError
from volleyscout.geometry import CourtViewport, normalize, zone_center
from volleyscout.gestures import TrajectoryDraft
from volleyscout.ledger import ScoreLedger
from volleyscout.models import (
    ActionKind,
    Coordinate,
    GameAction,
    Outcome,
    Slot,
    SnapshotView,
    TeamSide,
)

logger = logging.getLogger(__name__)


class InteractionState(Enum):
    IDLE = "idle"
    PLAYER_SELECTED = "player_selected"
    DRAWING = "drawing"
    RESULT_PENDING = "result_pending"


@dataclass(frozen=True)
class CaptureView:
    """What the court renderer needs to draw the current capture."""
    state: InteractionState
    side: Optional[TeamSide]
    slot: Optional[Slot]
    action: Optional[ActionKind]
    start: Optional[Coordinate]
    end: Optional[Coordinate]


@dataclass(frozen=True)
class PointerResult:
    start: Optional[Coordinate]
    end: Optional[Coordinate]
    capture_complete: bool = False


class CaptureStateMachine:
    """
    Capture sequence for one logged action:

        IDLE -> PLAYER_SELECTED -> DRAWING -> RESULT_PENDING -> IDLE

    Responsibilities:
    - Accept only the trigger the current state expects; ignore the rest
    - Seed the trajectory start at the acting player's zone
    - Convert pointer input to logical court points and track the drag
    - Emit exactly one GameAction when an outcome is confirmed

    The machine never touches the match snapshot. The owner passes a
    read-only view into select_outcome and applies the returned action.
    """

    def __init__(
        self,
        ledger: ScoreLedger,
        viewport: Optional[CourtViewport] = None,
        radius: float = HIT_RADIUS,
    ):
        self.ledger = ledger
        self.viewport = viewport
        self._draft = TrajectoryDraft(radius=radius)
        self._state = InteractionState.IDLE
        self._side: Optional[TeamSide] = None
        self._slot: Optional[Slot] = None
        self._action: Optional[ActionKind] = None

    @property
    def state(self) -> InteractionState:
        return self._state

    def view(self) -> CaptureView:
        return CaptureView(
            state=self._state,
            side=self._side,
            slot=self._slot,
            action=self._action,
            start=normalize(self._draft.start) if self._draft.start else None,
            end=normalize(self._draft.end) if self._draft.end else None,
        )

    # =========================================================
    # TRANSITIONS
    # =========================================================

    def select_player(self, side: TeamSide, slot: Slot, view: Optional[SnapshotView] = None) -> bool:
        if not self._expect(InteractionState.IDLE, "select_player"):
            return False

        if slot.is_libero and view is not None and not view.libero(side):
            logger.debug("Ignored select_player: %s has no Libero", side.value)
            return False

        self._side = side
        self._slot = slot
        self._state = InteractionState.PLAYER_SELECTED
        return True

    def select_action(self, action: ActionKind) -> bool:
        if not self._expect(InteractionState.PLAYER_SELECTED, "select_action"):
            return False

        self._action = action
        self._draft.seed(zone_center(self._side, self._slot, action))
        self._state = InteractionState.DRAWING
        return True

    def cancel(self) -> None:
        if self._state is not InteractionState.IDLE:
            logger.debug("Capture canceled in state %s", self._state.value)
        self._reset()

    def select_outcome(self, outcome: Outcome, view: SnapshotView) -> Optional[GameAction]:
        if not self._expect(InteractionState.RESULT_PENDING, "select_outcome"):
            return None

        if self._side is None or self._slot is None or self._action is None:
            raise IncompleteCaptureError("outcome selected without player and action")

        action = self.ledger.record(
            view,
            acting_side=self._side,
            slot=self._slot,
            action=self._action,
            outcome=outcome,
            trajectory=self._draft.to_trajectory(),
        )

        logger.info(
            "Captured %s %s by %s #%s",
            self._action.value,
            outcome.value,
            self._side.value,
            action.event.player,
        )

        self._reset()
        return action

    # =========================================================
    # POINTER INPUT
    # =========================================================

    def pointer_down(self, pointer_x: float, pointer_y: float) -> Optional[PointerResult]:
        if self._state not in (InteractionState.DRAWING, InteractionState.RESULT_PENDING):
            logger.debug("Ignored pointer_down in state %s", self._state.value)
            return None

        self._draft.grab(self._to_logical(pointer_x, pointer_y))
        return self._pointer_result()

    def pointer_move(self, pointer_x: float, pointer_y: float) -> Optional[PointerResult]:
        if not self._draft.is_dragging:
            return None

        # Candidate only; nothing is committed until release
        self._draft.move(self._to_logical(pointer_x, pointer_y))
        return self._pointer_result()

    def pointer_up(self) -> Optional[PointerResult]:
        if not self._draft.is_dragging:
            return None

        complete = self._draft.release()
        if complete:
            self._state = InteractionState.RESULT_PENDING
        return self._pointer_result(capture_complete=complete)

    # =========================================================
    # INTERNALS
    # =========================================================

    def _expect(self, expected: InteractionState, trigger: str) -> bool:
        if self._state is expected:
            return True
        logger.debug("Ignored %s in state %s", trigger, self._state.value)
        return False

    def _to_logical(self, pointer_x: float, pointer_y: float):
        if self.viewport is None:
            raise RuntimeError("No viewport set for pointer input")
        return self.viewport.screen_to_logical(pointer_x, pointer_y)

    def _pointer_result(self, capture_complete: bool = False) -> PointerResult:
        view = self.view()
        return PointerResult(start=view.start, end=view.end, capture_complete=capture_complete)

    def _reset(self) -> None:
        self._state = InteractionState.IDLE
        self._side = None
        self._slot = None
        self._action = None
        self._draft.clear()
