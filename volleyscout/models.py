from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from volleyscout.config import DEFAULT_MY_NAME, DEFAULT_OP_NAME


class TeamSide(str, Enum):
    ME = "me"
    OP = "op"

    @property
    def opponent(self) -> "TeamSide":
        return TeamSide.OP if self is TeamSide.ME else TeamSide.ME


class Slot(Enum):
    """
    Rotation slot 1-6 (1 = right-back, clockwise) plus the Libero tag.
    """
    P1 = 1
    P2 = 2
    P3 = 3
    P4 = 4
    P5 = 5
    P6 = 6
    LIBERO = "L"

    @property
    def is_libero(self) -> bool:
        return self is Slot.LIBERO

    @property
    def label(self) -> str:
        return str(self.value)

    @classmethod
    def parse(cls, raw: Any) -> "Slot":
        if isinstance(raw, Slot):
            return raw
        text = str(raw).strip().upper()
        if text == "L":
            return cls.LIBERO
        if text.isdigit():
            return cls(int(text))
        raise ValueError(f"Invalid slot: {raw!r}")


ROTATION_SLOTS = (Slot.P1, Slot.P2, Slot.P3, Slot.P4, Slot.P5, Slot.P6)


class ActionKind(str, Enum):
    SERVE = "serve"
    ATTACK = "attack"
    BLOCK = "block"
    DIG = "dig"
    SET = "set"
    RECEIVE = "receive"


class Outcome(str, Enum):
    POINT = "point"
    ERROR = "error"
    NORMAL = "normal"


Lineup = Dict[Slot, str]


def lineup_to_dict(lineup: Mapping[Slot, str]) -> Dict[str, str]:
    return {slot.label: lineup[slot] for slot in ROTATION_SLOTS}


def lineup_from_dict(d: Mapping[Any, Any]) -> Lineup:
    lineup: Lineup = {}
    for key, player in d.items():
        slot = Slot.parse(key)
        if slot.is_libero:
            raise ValueError("Libero cannot occupy a rotation slot")
        lineup[slot] = str(player)

    missing = [s.label for s in ROTATION_SLOTS if s not in lineup]
    if missing:
        raise ValueError(f"Lineup missing slot(s): {', '.join(missing)}")
    return lineup


# =========================================================
# COORDINATES
# =========================================================

@dataclass(frozen=True)
class LogicalPoint:
    """Point in court units (18 x 9 court, origin at my end line)."""
    x: float
    y: float


@dataclass(frozen=True)
class Coordinate:
    """Point in percent of court length/width, the stored form."""
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Coordinate":
        return Coordinate(x=float(d["x"]), y=float(d["y"]))


@dataclass(frozen=True)
class Trajectory:
    start: Coordinate
    end: Coordinate

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Trajectory":
        return Trajectory(
            start=Coordinate.from_dict(d["start"]),
            end=Coordinate.from_dict(d["end"]),
        )


# =========================================================
# RECORDS
# =========================================================

@dataclass(frozen=True)
class MatchEvent:
    """
    One committed entry of the event log.

    Scores are the values *after* this event; serving_team is the side
    holding serve after it. Manual score adjustments carry no player,
    slot, action or trajectory.
    """
    id: str
    timestamp: float
    set_number: int
    my_score: int
    op_score: int
    player: str
    slot: Optional[Slot]
    action: Optional[ActionKind]
    outcome: Outcome
    serving_team: TeamSide
    note: str = ""
    trajectory: Optional[Trajectory] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "set_number": self.set_number,
            "my_score": self.my_score,
            "op_score": self.op_score,
            "player": self.player,
            "slot": self.slot.value if self.slot is not None else None,
            "action": self.action.value if self.action is not None else None,
            "outcome": self.outcome.value,
            "serving_team": self.serving_team.value,
            "note": self.note,
            "trajectory": self.trajectory.to_dict() if self.trajectory else None,
        }

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "MatchEvent":
        slot = d.get("slot")
        action = d.get("action")
        trajectory = d.get("trajectory")
        return MatchEvent(
            id=str(d["id"]),
            timestamp=float(d["timestamp"]),
            set_number=int(d["set_number"]),
            my_score=int(d["my_score"]),
            op_score=int(d["op_score"]),
            player=str(d.get("player", "")),
            slot=Slot.parse(slot) if slot is not None else None,
            action=ActionKind(action) if action is not None else None,
            outcome=Outcome(d["outcome"]),
            serving_team=TeamSide(d["serving_team"]),
            note=str(d.get("note", "")),
            trajectory=Trajectory.from_dict(trajectory) if trajectory else None,
        )


@dataclass(frozen=True)
class TeamConfig:
    match_name: str = ""
    my_name: str = DEFAULT_MY_NAME
    op_name: str = DEFAULT_OP_NAME

    def name_for(self, side: TeamSide) -> str:
        return self.my_name if side is TeamSide.ME else self.op_name

    def side_for_note(self, note: str) -> Optional[TeamSide]:
        if note == self.my_name:
            return TeamSide.ME
        if note == self.op_name:
            return TeamSide.OP
        return None

    def to_dict(self) -> Dict[str, str]:
        return {
            "match_name": self.match_name,
            "my_name": self.my_name,
            "op_name": self.op_name,
        }

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "TeamConfig":
        return TeamConfig(
            match_name=str(d.get("match_name", "")),
            my_name=str(d.get("my_name", DEFAULT_MY_NAME)),
            op_name=str(d.get("op_name", DEFAULT_OP_NAME)),
        )


class _SideAccess:
    # Shared lookups for MatchSnapshot and SnapshotView

    def lineup(self, side: TeamSide) -> Mapping[Slot, str]:
        return self.my_lineup if side is TeamSide.ME else self.op_lineup

    def libero(self, side: TeamSide) -> str:
        return self.my_libero if side is TeamSide.ME else self.op_libero

    def score(self, side: TeamSide) -> int:
        return self.my_score if side is TeamSide.ME else self.op_score

    def player_at(self, side: TeamSide, slot: Slot) -> str:
        if slot.is_libero:
            return self.libero(side)
        return self.lineup(side)[slot]


@dataclass(frozen=True)
class SnapshotView(_SideAccess):
    """Read-only view handed to components per call."""
    my_lineup: Mapping[Slot, str]
    op_lineup: Mapping[Slot, str]
    my_libero: str
    op_libero: str
    my_score: int
    op_score: int
    serving_team: TeamSide
    set_number: int


@dataclass
class MatchSnapshot(_SideAccess):
    my_lineup: Lineup
    op_lineup: Lineup
    serving_team: TeamSide
    my_libero: str = ""
    op_libero: str = ""
    my_score: int = 0
    op_score: int = 0
    set_number: int = 1
    my_set_wins: int = 0
    op_set_wins: int = 0
    events: List[MatchEvent] = field(default_factory=list)

    def copy(self) -> "MatchSnapshot":
        # Events are frozen, so a shallow list copy is enough
        return MatchSnapshot(
            my_lineup=dict(self.my_lineup),
            op_lineup=dict(self.op_lineup),
            serving_team=self.serving_team,
            my_libero=self.my_libero,
            op_libero=self.op_libero,
            my_score=self.my_score,
            op_score=self.op_score,
            set_number=self.set_number,
            my_set_wins=self.my_set_wins,
            op_set_wins=self.op_set_wins,
            events=list(self.events),
        )

    def view(self) -> SnapshotView:
        return SnapshotView(
            my_lineup=MappingProxyType(dict(self.my_lineup)),
            op_lineup=MappingProxyType(dict(self.op_lineup)),
            my_libero=self.my_libero,
            op_libero=self.op_libero,
            my_score=self.my_score,
            op_score=self.op_score,
            serving_team=self.serving_team,
            set_number=self.set_number,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_set": self.set_number,
            "my_set_wins": self.my_set_wins,
            "op_set_wins": self.op_set_wins,
            "my_lineup": lineup_to_dict(self.my_lineup),
            "op_lineup": lineup_to_dict(self.op_lineup),
            "my_libero": self.my_libero,
            "op_libero": self.op_libero,
            "my_score": self.my_score,
            "op_score": self.op_score,
            "serving_team": self.serving_team.value,
            "logs": [e.to_dict() for e in self.events],
        }

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "MatchSnapshot":
        return MatchSnapshot(
            my_lineup=lineup_from_dict(d["my_lineup"]),
            op_lineup=lineup_from_dict(d["op_lineup"]),
            serving_team=TeamSide(d["serving_team"]),
            my_libero=str(d.get("my_libero", "")),
            op_libero=str(d.get("op_libero", "")),
            my_score=int(d.get("my_score", 0)),
            op_score=int(d.get("op_score", 0)),
            set_number=int(d.get("current_set", 1)),
            my_set_wins=int(d.get("my_set_wins", 0)),
            op_set_wins=int(d.get("op_set_wins", 0)),
            events=[MatchEvent.from_dict(e) for e in d.get("logs", [])],
        )


# =========================================================
# DELTAS
# =========================================================

@dataclass(frozen=True)
class ScoreDelta:
    my: int = 0
    op: int = 0

    @staticmethod
    def for_side(side: TeamSide, amount: int = 1) -> "ScoreDelta":
        if side is TeamSide.ME:
            return ScoreDelta(my=amount)
        return ScoreDelta(op=amount)


@dataclass(frozen=True)
class LineupUpdate:
    """Replacement lineup (and optionally Libero) for one side."""
    side: TeamSide
    lineup: Mapping[Slot, str]
    libero: Optional[str] = None


@dataclass(frozen=True)
class GameAction:
    """
    Everything one operator step changes, applied atomically by the
    snapshot owner.
    """
    event: Optional[MatchEvent] = None
    score: Optional[ScoreDelta] = None
    lineup: Optional[LineupUpdate] = None
    serving_team: Optional[TeamSide] = None
    advance_set: bool = False
