import re
from typing import List, Mapping, Optional

from volleyscout.config import DEFAULT_MY_NAME, DEFAULT_OP_NAME
from volleyscout.exceptions import RosterValidationError
from volleyscout.models import ROTATION_SLOTS, MatchSnapshot, Slot, TeamConfig, TeamSide


def sanitize_jersey(text: str) -> Optional[str]:
    """
    Keep digits only, at most two. A leading zero is invalid (None).
    """
    digits = re.sub(r"[^0-9]", "", text)[:2]
    if digits.startswith("0"):
        return None
    return digits


def find_duplicates(lineup: Mapping[Slot, str], libero: str = "") -> List[str]:
    seen = set()
    duplicates: List[str] = []
    for player in [*lineup.values(), libero]:
        player = player.strip()
        if not player:
            continue
        if player in seen and player not in duplicates:
            duplicates.append(player)
        seen.add(player)
    return duplicates


def validate_roster(lineup: Mapping[Slot, str], libero: str = "") -> List[str]:
    """
    Return list of problems (empty == valid).
    The Libero may be blank; every rotation slot must be filled.
    """
    problems: List[str] = []

    empty = [s.label for s in ROTATION_SLOTS if not lineup.get(s, "").strip()]
    if empty:
        problems.append(f"empty slot(s): {', '.join(empty)}")

    duplicates = find_duplicates(lineup, libero)
    if duplicates:
        problems.append(f"duplicate number(s): {', '.join(duplicates)}")

    return problems


def start_match(
    config: TeamConfig,
    my_lineup: Mapping[Slot, str],
    op_lineup: Mapping[Slot, str],
    my_libero: str = "",
    op_libero: str = "",
    first_serve: TeamSide = TeamSide.ME,
) -> MatchSnapshot:
    problems = [f"{config.my_name or DEFAULT_MY_NAME}: {p}" for p in validate_roster(my_lineup, my_libero)]
    problems += [f"{config.op_name or DEFAULT_OP_NAME}: {p}" for p in validate_roster(op_lineup, op_libero)]
    if problems:
        raise RosterValidationError(problems)

    return MatchSnapshot(
        my_lineup={s: my_lineup[s].strip() for s in ROTATION_SLOTS},
        op_lineup={s: op_lineup[s].strip() for s in ROTATION_SLOTS},
        serving_team=first_serve,
        my_libero=my_libero.strip(),
        op_libero=op_libero.strip(),
    )


def resolve_team_config(match_name: str = "", my_name: str = "", op_name: str = "") -> TeamConfig:
    return TeamConfig(
        match_name=match_name.strip(),
        my_name=my_name.strip() or DEFAULT_MY_NAME,
        op_name=op_name.strip() or DEFAULT_OP_NAME,
    )
