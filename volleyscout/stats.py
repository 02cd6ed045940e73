"""Per-team and per-player statistics derived from the event log.

Everything here is computed fresh from the events passed in; nothing
is cached and nothing is mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Collection, Iterable

from volleyscout.models import ActionKind, MatchEvent, Outcome, TeamConfig, TeamSide

TRAJECTORY_ACTIONS = (ActionKind.ATTACK, ActionKind.SERVE)


@dataclass
class StatSummary:
    """Counts for one subset of events (a team or a single player)."""

    attack_kills: int = 0
    attack_total: int = 0
    blocks: int = 0  # blocks that scored
    serve_aces: int = 0
    serve_errors: int = 0
    digs: int = 0

    @property
    def total_points(self) -> int:
        return self.attack_kills + self.blocks + self.serve_aces

    @property
    def attack_efficiency(self) -> float:
        if self.attack_total == 0:
            return 0.0
        return self.attack_kills / self.attack_total

    def to_dict(self) -> dict[str, Any]:
        return {
            "attackKills": self.attack_kills,
            "attackTotal": self.attack_total,
            "attackEfficiency": round(self.attack_efficiency, 4),
            "blocks": self.blocks,
            "serveAces": self.serve_aces,
            "serveErrors": self.serve_errors,
            "digs": self.digs,
            "totalPoints": self.total_points,
        }


@dataclass(frozen=True)
class PlayerRanking:
    player: str
    stats: StatSummary

    @property
    def total_points(self) -> int:
        return self.stats.total_points


def team_events(events: Iterable[MatchEvent], side: TeamSide, config: TeamConfig) -> list[MatchEvent]:
    """Events tagged with the team's name in the note field."""
    return [e for e in events if config.side_for_note(e.note) is side]


def player_events(
    events: Iterable[MatchEvent],
    side: TeamSide,
    player: str,
    config: TeamConfig,
) -> list[MatchEvent]:
    return [e for e in team_events(events, side, config) if e.player == player]


def calculate_stats(events: Iterable[MatchEvent]) -> StatSummary:
    stats = StatSummary()

    for e in events:
        if e.action is ActionKind.ATTACK:
            stats.attack_total += 1
            if e.outcome is Outcome.POINT:
                stats.attack_kills += 1
        elif e.action is ActionKind.BLOCK:
            if e.outcome is Outcome.POINT:
                stats.blocks += 1
        elif e.action is ActionKind.SERVE:
            if e.outcome is Outcome.POINT:
                stats.serve_aces += 1
            elif e.outcome is Outcome.ERROR:
                stats.serve_errors += 1
        elif e.action is ActionKind.DIG:
            stats.digs += 1

    return stats


def compare_teams(events: Iterable[MatchEvent], config: TeamConfig) -> dict[TeamSide, StatSummary]:
    events = list(events)
    return {side: calculate_stats(team_events(events, side, config)) for side in TeamSide}


def rank_players(events: Iterable[MatchEvent], side: TeamSide, config: TeamConfig) -> list[PlayerRanking]:
    """
    Players of one team by total points, highest first.

    Players keep the order of their first appearance in the log when
    their totals tie.
    """
    by_player: dict[str, list[MatchEvent]] = {}
    for e in team_events(events, side, config):
        if not e.player:
            continue
        by_player.setdefault(e.player, []).append(e)

    rankings = [PlayerRanking(player, calculate_stats(evts)) for player, evts in by_player.items()]
    # sorted() is stable
    return sorted(rankings, key=lambda r: r.total_points, reverse=True)


def top_performers(
    events: Iterable[MatchEvent],
    side: TeamSide,
    config: TeamConfig,
    count: int = 2,
) -> list[str]:
    return [r.player for r in rank_players(events, side, config)[:count] if r.total_points > 0]


def trajectory_events(
    events: Iterable[MatchEvent],
    actions: Collection[ActionKind] = TRAJECTORY_ACTIONS,
) -> list[MatchEvent]:
    """Events worth charting: the given actions with a full trajectory."""
    return [e for e in events if e.action in actions and e.trajectory is not None]
