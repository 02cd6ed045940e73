from typing import Iterable, List

from volleyscout.models import ROTATION_SLOTS, GameAction, MatchSnapshot, TeamSide


def apply_action(snapshot: MatchSnapshot, action: GameAction) -> MatchSnapshot:
    """
    Apply one GameAction and return the resulting snapshot.
    Does NOT mutate the input snapshot.
    """
    result = snapshot.copy()

    if action.score is not None:
        result.my_score += action.score.my
        result.op_score += action.score.op
        if result.my_score < 0 or result.op_score < 0:
            raise ValueError("score cannot go below zero")

    if action.lineup is not None:
        update = action.lineup
        if set(update.lineup) != set(ROTATION_SLOTS):
            raise ValueError("lineup update must fill all six slots")

        if update.side is TeamSide.ME:
            result.my_lineup = dict(update.lineup)
            if update.libero is not None:
                result.my_libero = update.libero
        else:
            result.op_lineup = dict(update.lineup)
            if update.libero is not None:
                result.op_libero = update.libero

    if action.serving_team is not None:
        result.serving_team = action.serving_team

    if action.event is not None:
        result.events.append(action.event)

    if action.advance_set:
        _advance_set(result)

    return result


def _advance_set(snapshot: MatchSnapshot) -> None:
    # A tied set awards nobody
    if snapshot.my_score > snapshot.op_score:
        snapshot.my_set_wins += 1
    elif snapshot.op_score > snapshot.my_score:
        snapshot.op_set_wins += 1

    snapshot.my_score = 0
    snapshot.op_score = 0
    snapshot.set_number += 1


def build_match_timeline(base: MatchSnapshot, actions: Iterable[GameAction]) -> List[MatchSnapshot]:
    """
    Replays actions from the base snapshot.
    Returns the snapshot after each action.
    """
    timeline: List[MatchSnapshot] = []
    current = base

    for action in actions:
        current = apply_action(current, action)
        timeline.append(current)

    return timeline


def replay(base: MatchSnapshot, actions: Iterable[GameAction]) -> MatchSnapshot:
    timeline = build_match_timeline(base, actions)
    return timeline[-1] if timeline else base.copy()
