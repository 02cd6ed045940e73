from volleyscout.geometry import CourtViewport
from volleyscout.models import ActionKind, Outcome, Slot, TeamSide
from volleyscout.roster import resolve_team_config, start_match
from volleyscout.session import MatchSession

config = resolve_team_config("Scrimmage G1", "Falcons", "Hawks")

lineup = {Slot.P1: "5", Slot.P2: "4", Slot.P3: "3", Slot.P4: "2", Slot.P5: "7", Slot.P6: "6"}
op_lineup = {Slot.P1: "11", Slot.P2: "12", Slot.P3: "13", Slot.P4: "14", Slot.P5: "15", Slot.P6: "16"}

snapshot = start_match(config, lineup, op_lineup, "9", "8", first_serve=TeamSide.OP)

# 1040 x 520 px court area, exactly 40 px per court unit
session = MatchSession(config, snapshot, viewport=CourtViewport(0, 0, 1040, 520))

# Attack by #3, ball lands deep in the opponent's court
session.press_player(TeamSide.ME, Slot.P3, at=0.0)
session.release_player(at=0.2)
session.capture.select_action(ActionKind.ATTACK)
session.capture.pointer_down(800, 200)
session.capture.pointer_up()
session.confirm_outcome(Outcome.POINT)

print("After side-out:")
print(session.snapshot)

# Serve error by the new server
session.press_player(TeamSide.ME, Slot.P1, at=1.0)
session.release_player(at=1.1)
session.capture.select_action(ActionKind.SERVE)
session.capture.pointer_down(900, 400)
session.capture.pointer_up()
session.confirm_outcome(Outcome.ERROR)

print("\nAfter serve error:")
print(session.snapshot)

session.undo()
print("\nAfter undo:")
print(session.snapshot)
