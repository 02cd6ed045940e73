import time
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from volleyscout.models import (
    ActionKind,
    GameAction,
    LineupUpdate,
    MatchEvent,
    Outcome,
    ScoreDelta,
    Slot,
    SnapshotView,
    TeamConfig,
    TeamSide,
    Trajectory,
)
from volleyscout.rotation import rotate


def point_winner(outcome: Outcome, acting_side: TeamSide) -> Optional[TeamSide]:
    if outcome is Outcome.POINT:
        return acting_side
    if outcome is Outcome.ERROR:
        return acting_side.opponent
    return None


def _new_event_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Resolution:
    score: Optional[ScoreDelta] = None
    serving_team: Optional[TeamSide] = None
    lineup: Optional[LineupUpdate] = None


class ScoreLedger:
    """
    Score / serve bookkeeping for rally scoring.

    Responsibilities:
    - Map an outcome to a score delta (Point: actor +1, Error: opponent +1)
    - Transfer serve and rotate the side that wins a rally it did not serve
    - Build the MatchEvent for a captured action
    - Synthesize minimal events for manual score corrections

    Never mutates the snapshot: every result is a GameAction for the
    snapshot owner to apply.
    """

    def __init__(
        self,
        config: TeamConfig,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = _new_event_id,
    ):
        self.config = config
        self._clock = clock
        self._id_factory = id_factory

    # =========================================================
    # PUBLIC API
    # =========================================================

    def resolve(self, outcome: Outcome, acting_side: TeamSide, view: SnapshotView) -> Resolution:
        winner = point_winner(outcome, acting_side)
        if winner is None:
            return Resolution()
        return self._award_point(winner, view)

    def record(
        self,
        view: SnapshotView,
        acting_side: TeamSide,
        slot: Slot,
        action: ActionKind,
        outcome: Outcome,
        trajectory: Optional[Trajectory] = None,
    ) -> GameAction:
        resolution = self.resolve(outcome, acting_side, view)

        event = self._build_event(
            view,
            resolution,
            player=view.player_at(acting_side, slot),
            slot=slot,
            action=action,
            outcome=outcome,
            note=self.config.name_for(acting_side),
            trajectory=trajectory,
        )

        return GameAction(
            event=event,
            score=resolution.score,
            lineup=resolution.lineup,
            serving_team=resolution.serving_team,
        )

    def manual_adjust(self, side: TeamSide, delta: int, view: SnapshotView) -> Optional[GameAction]:
        """
        Off-script score correction.

        +1 is treated as a won rally, so it can transfer serve and rotate
        the winner just like a captured Point. -1 only takes the point
        back; it never touches serve or lineups, and is refused at 0.
        """
        if delta not in (1, -1):
            raise ValueError(f"manual adjustment must be +1 or -1, got {delta}")

        if delta < 0:
            if view.score(side) == 0:
                return None
            resolution = Resolution(score=ScoreDelta.for_side(side, -1))
            outcome = Outcome.NORMAL
        else:
            resolution = self._award_point(side, view)
            outcome = Outcome.POINT

        event = self._build_event(
            view,
            resolution,
            player="",
            slot=None,
            action=None,
            outcome=outcome,
            note=f"Manual Adjust {delta:+d}",
            trajectory=None,
        )

        return GameAction(
            event=event,
            score=resolution.score,
            lineup=resolution.lineup,
            serving_team=resolution.serving_team,
        )

    # =========================================================
    # RULES
    # =========================================================

    def _award_point(self, winner: TeamSide, view: SnapshotView) -> Resolution:
        score = ScoreDelta.for_side(winner)

        if winner is view.serving_team:
            return Resolution(score=score)

        # Side-out: winner gains serve and rotates
        return Resolution(
            score=score,
            serving_team=winner,
            lineup=LineupUpdate(side=winner, lineup=rotate(view.lineup(winner))),
        )

    # =========================================================
    # EVENTS
    # =========================================================

    def _build_event(
        self,
        view: SnapshotView,
        resolution: Resolution,
        player: str,
        slot: Optional[Slot],
        action: Optional[ActionKind],
        outcome: Outcome,
        note: str,
        trajectory: Optional[Trajectory],
    ) -> MatchEvent:
        score = resolution.score or ScoreDelta()

        return MatchEvent(
            id=self._id_factory(),
            timestamp=self._clock(),
            set_number=view.set_number,
            my_score=view.my_score + score.my,
            op_score=view.op_score + score.op,
            player=player,
            slot=slot,
            action=action,
            outcome=outcome,
            serving_team=resolution.serving_team or view.serving_team,
            note=note,
            trajectory=trajectory,
        )
