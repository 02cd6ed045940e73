import pytest

from volleyscout.models import ROTATION_SLOTS, Slot
from volleyscout.rotation import rotate


def make_lineup(*players):
    return dict(zip(ROTATION_SLOTS, players))


def test_single_rotation():
    lineup = make_lineup("5", "4", "3", "2", "7", "6")

    assert rotate(lineup) == make_lineup("4", "3", "2", "7", "6", "5")


def test_server_comes_from_slot_two():
    lineup = make_lineup("a", "b", "c", "d", "e", "f")

    rotated = rotate(lineup)

    assert rotated[Slot.P1] == "b"
    assert rotated[Slot.P6] == "a"


@pytest.mark.parametrize("players", [
    ("1", "2", "3", "4", "5", "6"),
    ("10", "7", "22", "3", "9", "14"),
])
def test_six_rotations_return_original(players):
    lineup = make_lineup(*players)

    result = lineup
    for i in range(6):
        result = rotate(result)
        if i < 5:
            assert result != lineup

    assert result == lineup


def test_rotation_is_permutation():
    lineup = make_lineup("1", "2", "3", "4", "5", "6")

    assert sorted(rotate(lineup).values()) == sorted(lineup.values())


def test_rotation_does_not_mutate_input():
    lineup = make_lineup("1", "2", "3", "4", "5", "6")

    rotate(lineup)

    assert lineup == make_lineup("1", "2", "3", "4", "5", "6")
