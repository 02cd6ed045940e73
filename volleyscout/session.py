import logging
import time
from typing import Callable, Dict, List, Optional

from volleyscout.exceptions import RosterValidationError
from volleyscout.geometry import CourtViewport
from volleyscout.gestures import LongPressTracker, PressKind, PressResult
from volleyscout.ledger import ScoreLedger
from volleyscout.models import (
    GameAction,
    LineupUpdate,
    MatchEvent,
    MatchSnapshot,
    Outcome,
    Slot,
    SnapshotView,
    TeamConfig,
    TeamSide,
)
from volleyscout.roster import find_duplicates
from volleyscout.rotation import rotate
from volleyscout.state_machine import CaptureStateMachine
from volleyscout.timeline import apply_action, replay

logger = logging.getLogger(__name__)


class MatchSession:
    """
    Single local match session, sole owner of the MatchSnapshot.

    Responsibilities:
    - Apply GameActions atomically (all deltas or none)
    - Feed the capture state machine a read-only view per call
    - Undo / redo by replaying the action history from the base snapshot
    - Manual rotation, score adjustment, substitution and new set
    - Replace everything on restore from a saved game
    """

    def __init__(
        self,
        config: TeamConfig,
        snapshot: MatchSnapshot,
        viewport: Optional[CourtViewport] = None,
        clock: Callable[[], float] = time.time,
        press_tracker: Optional[LongPressTracker] = None,
    ):
        self.config = config
        self._base = snapshot.copy()
        self._snapshot = snapshot.copy()
        self._history: List[GameAction] = []
        self._redo: List[GameAction] = []

        self.ledger = ScoreLedger(config, clock=clock)
        self.capture = CaptureStateMachine(self.ledger, viewport)
        self.presses = press_tracker or LongPressTracker()

    # ---------------------------------------------------------
    # State access
    # ---------------------------------------------------------

    @property
    def snapshot(self) -> MatchSnapshot:
        return self._snapshot.copy()

    @property
    def events(self) -> List[MatchEvent]:
        return list(self._snapshot.events)

    def view(self) -> SnapshotView:
        return self._snapshot.view()

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    # ---------------------------------------------------------
    # Core API
    # ---------------------------------------------------------

    def apply(self, action: GameAction) -> MatchSnapshot:
        """
        Atomic: if applying fails, the snapshot and history are unchanged.
        """
        updated = apply_action(self._snapshot, action)

        self._snapshot = updated
        self._history.append(action)
        self._redo.clear()

        if action.event is not None:
            logger.info(
                "Event %s: %d-%d, serve %s",
                action.event.outcome.value,
                updated.my_score,
                updated.op_score,
                updated.serving_team.value,
            )
        return self.snapshot

    def confirm_outcome(self, outcome: Outcome) -> Optional[MatchEvent]:
        action = self.capture.select_outcome(outcome, self.view())
        if action is None:
            return None
        self.apply(action)
        return action.event

    # ---------------------------------------------------------
    # Player buttons (short press = select, long press = substitute)
    # ---------------------------------------------------------

    def press_player(self, side: TeamSide, slot: Slot, at: Optional[float] = None) -> None:
        self.presses.press(side, slot, at)

    def poll_press(self, now: Optional[float] = None) -> Optional[PressResult]:
        return self.presses.poll(now)

    def release_player(self, at: Optional[float] = None) -> Optional[PressResult]:
        result = self.presses.release(at)
        if result is not None and result.kind is PressKind.SELECT:
            self.capture.select_player(result.side, result.slot, self.view())
        return result

    # ---------------------------------------------------------
    # Manual operations
    # ---------------------------------------------------------

    def rotate(self, side: TeamSide) -> MatchSnapshot:
        self.capture.cancel()
        lineup = rotate(self._snapshot.lineup(side))
        return self.apply(GameAction(lineup=LineupUpdate(side=side, lineup=lineup)))

    def adjust_score(self, side: TeamSide, delta: int) -> Optional[MatchEvent]:
        self.capture.cancel()
        action = self.ledger.manual_adjust(side, delta, self.view())
        if action is None:
            logger.warning("Refused score adjustment %+d for %s", delta, side.value)
            return None
        self.apply(action)
        return action.event

    def substitute(self, side: TeamSide, slot: Slot, player: str) -> Optional[MatchSnapshot]:
        self.capture.cancel()
        player = player.strip()
        if not player:
            return None

        lineup = dict(self._snapshot.lineup(side))
        libero = self._snapshot.libero(side)
        if slot.is_libero:
            libero = player
        else:
            lineup[slot] = player

        duplicates = find_duplicates(lineup, libero)
        if duplicates:
            raise RosterValidationError([f"duplicate number(s): {', '.join(duplicates)}"])

        update = LineupUpdate(side=side, lineup=lineup, libero=libero if slot.is_libero else None)
        return self.apply(GameAction(lineup=update))

    def new_set(self) -> MatchSnapshot:
        self.capture.cancel()
        return self.apply(GameAction(advance_set=True))

    # ---------------------------------------------------------
    # Undo / redo
    # ---------------------------------------------------------

    def undo(self) -> bool:
        if not self._history:
            return False

        self.capture.cancel()
        self._redo.append(self._history.pop())
        self._snapshot = replay(self._base, self._history)
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False

        self.capture.cancel()
        action = self._redo.pop()
        self._snapshot = apply_action(self._snapshot, action)
        self._history.append(action)
        return True

    # ---------------------------------------------------------
    # Save / load boundary
    # ---------------------------------------------------------

    def restore(self, config: TeamConfig, snapshot: MatchSnapshot) -> None:
        self.config = config
        self.ledger.config = config
        self.capture.cancel()
        self._base = snapshot.copy()
        self._snapshot = snapshot.copy()
        self._history = []
        self._redo = []
        logger.info("Restored match at set %d, %d-%d", snapshot.set_number, snapshot.my_score, snapshot.op_score)

    def export_events(self) -> List[Dict]:
        return [e.to_dict() for e in self._snapshot.events]
