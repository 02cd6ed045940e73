import pytest

from volleyscout.models import (
    ROTATION_SLOTS,
    GameAction,
    LineupUpdate,
    MatchEvent,
    MatchSnapshot,
    Outcome,
    ScoreDelta,
    Slot,
    TeamSide,
)
from volleyscout.timeline import apply_action, build_match_timeline, replay


# -------------------------------------------------
# Helpers
# -------------------------------------------------

def make_snapshot():
    return MatchSnapshot(
        my_lineup=dict(zip(ROTATION_SLOTS, ["1", "2", "3", "4", "5", "6"])),
        op_lineup=dict(zip(ROTATION_SLOTS, ["11", "12", "13", "14", "15", "16"])),
        serving_team=TeamSide.ME,
        my_libero="9",
    )


def point_for(side, index):
    event = MatchEvent(
        id=f"e{index}",
        timestamp=float(index),
        set_number=1,
        my_score=0,
        op_score=0,
        player="",
        slot=None,
        action=None,
        outcome=Outcome.POINT,
        serving_team=side,
    )
    return GameAction(event=event, score=ScoreDelta.for_side(side), serving_team=side)


# -------------------------------------------------
# apply_action
# -------------------------------------------------

def test_apply_does_not_mutate_input():
    base = make_snapshot()

    result = apply_action(base, point_for(TeamSide.OP, 0))

    assert base.op_score == 0
    assert base.events == []
    assert result.op_score == 1
    assert result.serving_team is TeamSide.OP
    assert len(result.events) == 1


def test_lineup_update_keeps_libero_unless_given():
    lineup = dict(zip(ROTATION_SLOTS, ["6", "5", "4", "3", "2", "1"]))

    result = apply_action(make_snapshot(), GameAction(lineup=LineupUpdate(TeamSide.ME, lineup)))

    assert result.my_lineup == lineup
    assert result.my_libero == "9"

    result = apply_action(result, GameAction(lineup=LineupUpdate(TeamSide.ME, lineup, libero="10")))
    assert result.my_libero == "10"


def test_incomplete_lineup_rejected():
    partial = {Slot.P1: "1", Slot.P2: "2"}

    with pytest.raises(ValueError):
        apply_action(make_snapshot(), GameAction(lineup=LineupUpdate(TeamSide.OP, partial)))


def test_negative_score_rejected():
    with pytest.raises(ValueError):
        apply_action(make_snapshot(), GameAction(score=ScoreDelta(op=-1)))


@pytest.mark.parametrize("my, op, expected_wins", [
    (25, 20, (1, 0)),
    (18, 25, (0, 1)),
    (10, 10, (0, 0)),
])
def test_advance_set(my, op, expected_wins):
    snapshot = make_snapshot()
    snapshot.my_score = my
    snapshot.op_score = op

    result = apply_action(snapshot, GameAction(advance_set=True))

    assert (result.my_set_wins, result.op_set_wins) == expected_wins
    assert (result.my_score, result.op_score) == (0, 0)
    assert result.set_number == 2
    assert result.serving_team is TeamSide.ME


# -------------------------------------------------
# Timeline
# -------------------------------------------------

def test_timeline_basic_build():
    actions = [point_for(TeamSide.ME, i) for i in range(5)]

    timeline = build_match_timeline(make_snapshot(), actions)

    assert len(timeline) == 5
    assert timeline[-1].my_score == 5


def test_empty_timeline():
    assert build_match_timeline(make_snapshot(), []) == []


def test_mixed_winner_progression():
    actions = [
        point_for(TeamSide.ME, 0),
        point_for(TeamSide.OP, 1),
        point_for(TeamSide.ME, 2),
    ]

    timeline = build_match_timeline(make_snapshot(), actions)

    assert timeline[0].my_score == 1
    assert timeline[1].op_score == 1
    assert timeline[2].my_score == 2
    assert timeline[1].serving_team is TeamSide.OP


def test_replay_is_deterministic():
    actions = [point_for(TeamSide.ME if i % 3 else TeamSide.OP, i) for i in range(20)]

    assert replay(make_snapshot(), actions) == replay(make_snapshot(), actions)


def test_replay_of_nothing_is_copy_of_base():
    base = make_snapshot()

    result = replay(base, [])

    assert result == base
    assert result is not base
