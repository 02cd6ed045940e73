from typing import Dict, Mapping

from volleyscout.models import Lineup, Slot

# new slot <- old slot, one clockwise rotation
_ROTATION = {
    Slot.P1: Slot.P2,
    Slot.P6: Slot.P1,
    Slot.P5: Slot.P6,
    Slot.P4: Slot.P5,
    Slot.P3: Slot.P4,
    Slot.P2: Slot.P3,
}


def rotate(lineup: Mapping[Slot, str]) -> Lineup:
    """
    Lineup after one clockwise rotation: the player in slot 2 moves to
    slot 1 (the server), slot 1 moves to slot 6, and so on.
    The Libero is not part of the lineup and is never touched.
    """
    rotated: Dict[Slot, str] = {}
    for new_slot, old_slot in _ROTATION.items():
        rotated[new_slot] = lineup[old_slot]
    return rotated
