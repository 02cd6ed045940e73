import pytest

from volleyscout.exceptions import RosterValidationError
from volleyscout.models import ROTATION_SLOTS, Slot, TeamConfig, TeamSide
from volleyscout.roster import (
    find_duplicates,
    resolve_team_config,
    sanitize_jersey,
    start_match,
    validate_roster,
)


def make_lineup(*players):
    return dict(zip(ROTATION_SLOTS, players))


# ---------- JERSEY INPUT ----------

@pytest.mark.parametrize("raw, expected", [
    ("12", "12"),
    ("7", "7"),
    ("#1a2", "12"),
    ("123", "12"),
    ("", ""),
    ("05", None),
    ("0", None),
])
def test_sanitize_jersey(raw, expected):
    assert sanitize_jersey(raw) == expected


# ---------- VALIDATION ----------

def test_valid_roster_has_no_problems():
    assert validate_roster(make_lineup("1", "2", "3", "4", "5", "6"), "9") == []


def test_empty_slot_reported():
    problems = validate_roster(make_lineup("1", "", "3", "4", " ", "6"))

    assert problems == ["empty slot(s): 2, 5"]


def test_duplicate_including_libero():
    lineup = make_lineup("1", "2", "3", "4", "5", "6")

    assert find_duplicates(lineup, "3") == ["3"]
    assert validate_roster(lineup, "3") == ["duplicate number(s): 3"]


def test_blank_libero_allowed():
    assert validate_roster(make_lineup("1", "2", "3", "4", "5", "6"), "") == []


# ---------- START ----------

def test_start_match_builds_initial_snapshot():
    config = resolve_team_config("G1", "Falcons", "Hawks")

    snapshot = start_match(
        config,
        make_lineup("1", "2", "3", "4", "5", "6"),
        make_lineup("11", "12", "13", "14", "15", "16"),
        my_libero="9",
        first_serve=TeamSide.OP,
    )

    assert snapshot.serving_team is TeamSide.OP
    assert snapshot.set_number == 1
    assert (snapshot.my_score, snapshot.op_score) == (0, 0)
    assert snapshot.my_lineup[Slot.P4] == "4"
    assert snapshot.my_libero == "9"
    assert snapshot.op_libero == ""
    assert snapshot.events == []


def test_start_match_reports_all_problems():
    config = TeamConfig(my_name="Falcons", op_name="Hawks")

    with pytest.raises(RosterValidationError) as exc:
        start_match(
            config,
            make_lineup("1", "1", "3", "4", "5", "6"),
            make_lineup("11", "", "13", "14", "15", "16"),
        )

    assert exc.value.problems == [
        "Falcons: duplicate number(s): 1",
        "Hawks: empty slot(s): 2",
    ]


def test_blank_team_names_get_defaults():
    config = resolve_team_config("  ", "", " ")

    assert config.my_name == "Home"
    assert config.op_name == "Away"
    assert config.match_name == ""
