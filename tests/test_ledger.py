import pytest

from volleyscout.ledger import ScoreLedger, point_winner
from volleyscout.models import (
    ROTATION_SLOTS,
    ActionKind,
    Coordinate,
    MatchSnapshot,
    Outcome,
    ScoreDelta,
    Slot,
    TeamConfig,
    TeamSide,
    Trajectory,
)
from volleyscout.rotation import rotate


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------

CONFIG = TeamConfig(match_name="G1", my_name="Falcons", op_name="Hawks")


def make_snapshot(serving=TeamSide.ME, my_score=0, op_score=0):
    return MatchSnapshot(
        my_lineup=dict(zip(ROTATION_SLOTS, ["5", "4", "3", "2", "7", "6"])),
        op_lineup=dict(zip(ROTATION_SLOTS, ["11", "12", "13", "14", "15", "16"])),
        serving_team=serving,
        my_libero="9",
        op_libero="8",
        my_score=my_score,
        op_score=op_score,
    )


def create_ledger():
    ids = iter(range(1000))
    return ScoreLedger(CONFIG, clock=lambda: 1700000000.0, id_factory=lambda: f"e{next(ids)}")


# ---------- POINT WINNER ----------

@pytest.mark.parametrize("outcome, acting, expected", [
    (Outcome.POINT, TeamSide.ME, TeamSide.ME),
    (Outcome.POINT, TeamSide.OP, TeamSide.OP),
    (Outcome.ERROR, TeamSide.ME, TeamSide.OP),
    (Outcome.ERROR, TeamSide.OP, TeamSide.ME),
    (Outcome.NORMAL, TeamSide.ME, None),
])
def test_point_winner(outcome, acting, expected):
    assert point_winner(outcome, acting) is expected


# ---------- SCORE DELTAS ----------

@pytest.mark.parametrize("outcome, acting, expected", [
    (Outcome.POINT, TeamSide.ME, ScoreDelta(my=1)),
    (Outcome.ERROR, TeamSide.ME, ScoreDelta(op=1)),
    (Outcome.POINT, TeamSide.OP, ScoreDelta(op=1)),
    (Outcome.ERROR, TeamSide.OP, ScoreDelta(my=1)),
])
def test_score_delta(outcome, acting, expected):
    resolution = create_ledger().resolve(outcome, acting, make_snapshot().view())

    assert resolution.score == expected


def test_normal_changes_nothing():
    resolution = create_ledger().resolve(Outcome.NORMAL, TeamSide.ME, make_snapshot().view())

    assert resolution.score is None
    assert resolution.serving_team is None
    assert resolution.lineup is None


# ---------- SERVE / ROTATION ----------

def test_holding_serve_does_not_rotate():
    resolution = create_ledger().resolve(Outcome.POINT, TeamSide.ME, make_snapshot(TeamSide.ME).view())

    assert resolution.serving_team is None
    assert resolution.lineup is None


def test_side_out_transfers_serve_and_rotates_winner():
    snapshot = make_snapshot(TeamSide.OP)

    resolution = create_ledger().resolve(Outcome.POINT, TeamSide.ME, snapshot.view())

    assert resolution.serving_team is TeamSide.ME
    assert resolution.lineup.side is TeamSide.ME
    assert resolution.lineup.lineup == rotate(snapshot.my_lineup)
    assert resolution.lineup.libero is None


def test_error_gives_side_out_to_opponent():
    snapshot = make_snapshot(TeamSide.ME)

    resolution = create_ledger().resolve(Outcome.ERROR, TeamSide.ME, snapshot.view())

    assert resolution.serving_team is TeamSide.OP
    assert resolution.lineup.side is TeamSide.OP
    assert resolution.lineup.lineup == rotate(snapshot.op_lineup)


# ---------- EVENTS ----------

def test_record_builds_event_with_post_scores():
    trajectory = Trajectory(Coordinate(10, 10), Coordinate(90, 90))

    action = create_ledger().record(
        make_snapshot(TeamSide.OP, my_score=3, op_score=5).view(),
        acting_side=TeamSide.ME,
        slot=Slot.P3,
        action=ActionKind.ATTACK,
        outcome=Outcome.POINT,
        trajectory=trajectory,
    )

    event = action.event
    assert event.id == "e0"
    assert event.timestamp == 1700000000.0
    assert (event.my_score, event.op_score) == (4, 5)
    assert event.player == "3"
    assert event.slot is Slot.P3
    assert event.serving_team is TeamSide.ME
    assert event.note == "Falcons"
    assert event.trajectory == trajectory


def test_record_libero_uses_libero_number():
    action = create_ledger().record(
        make_snapshot().view(),
        acting_side=TeamSide.OP,
        slot=Slot.LIBERO,
        action=ActionKind.DIG,
        outcome=Outcome.NORMAL,
    )

    assert action.event.player == "8"
    assert action.event.note == "Hawks"
    assert action.score is None


# ---------- MANUAL ADJUST ----------

def test_manual_plus_one_applies_side_out():
    snapshot = make_snapshot(TeamSide.ME)

    action = create_ledger().manual_adjust(TeamSide.OP, 1, snapshot.view())

    assert action.score == ScoreDelta(op=1)
    assert action.serving_team is TeamSide.OP
    assert action.lineup.lineup == rotate(snapshot.op_lineup)
    assert action.event.outcome is Outcome.POINT
    assert action.event.action is None
    assert action.event.slot is None
    assert action.event.player == ""
    assert action.event.note == "Manual Adjust +1"


def test_manual_minus_one_never_rotates():
    action = create_ledger().manual_adjust(TeamSide.OP, -1, make_snapshot(TeamSide.ME, op_score=2).view())

    assert action.score == ScoreDelta(op=-1)
    assert action.serving_team is None
    assert action.lineup is None
    assert action.event.outcome is Outcome.NORMAL
    assert action.event.op_score == 1
    assert action.event.note == "Manual Adjust -1"


def test_manual_minus_one_refused_at_zero():
    assert create_ledger().manual_adjust(TeamSide.ME, -1, make_snapshot().view()) is None


def test_manual_adjust_rejects_other_deltas():
    with pytest.raises(ValueError):
        create_ledger().manual_adjust(TeamSide.ME, 2, make_snapshot().view())
