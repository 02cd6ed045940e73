"""
Flat rows for spreadsheet export.

Action kinds and outcomes become display labels here and nowhere else.
"""
from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from volleyscout.exceptions import PersistenceError
from volleyscout.models import ActionKind, MatchEvent, Outcome, TeamConfig

logger = logging.getLogger(__name__)


HEADERS = [
    "Set",
    "Timestamp",
    "Score (My)",
    "Score (Op)",
    "Serving",
    "Player",
    "Position",
    "Action",
    "Result",
    "Note",
]

ACTION_LABELS: Dict[ActionKind, str] = {
    ActionKind.SERVE: "Serve",
    ActionKind.ATTACK: "Attack",
    ActionKind.BLOCK: "Block",
    ActionKind.DIG: "Dig",
    ActionKind.SET: "Set",
    ActionKind.RECEIVE: "Receive",
}

ACTION_LABELS_ZH_TW: Dict[ActionKind, str] = {
    ActionKind.SERVE: "發球",
    ActionKind.ATTACK: "攻擊",
    ActionKind.BLOCK: "攔網",
    ActionKind.DIG: "接扣",
    ActionKind.SET: "舉球",
    ActionKind.RECEIVE: "接發",
}

OUTCOME_LABELS: Dict[Outcome, str] = {
    Outcome.POINT: "Point",
    Outcome.ERROR: "Error",
    Outcome.NORMAL: "Normal",
}


def export_row(
    event: MatchEvent,
    config: TeamConfig,
    action_labels: Mapping[ActionKind, str] = ACTION_LABELS,
) -> Dict[str, Any]:
    return {
        "Set": event.set_number,
        "Timestamp": datetime.fromtimestamp(event.timestamp).strftime("%H:%M:%S"),
        "Score (My)": event.my_score,
        "Score (Op)": event.op_score,
        "Serving": config.name_for(event.serving_team),
        "Player": event.player,
        "Position": event.slot.label if event.slot is not None else "",
        "Action": action_labels.get(event.action, "") if event.action is not None else "",
        "Result": OUTCOME_LABELS[event.outcome],
        "Note": event.note,
    }


def export_rows(
    events: Iterable[MatchEvent],
    config: TeamConfig,
    action_labels: Mapping[ActionKind, str] = ACTION_LABELS,
) -> List[Dict[str, Any]]:
    return [export_row(e, config, action_labels) for e in events]


def export_filename(config: TeamConfig) -> str:
    return f"{config.match_name or 'match'}_export.csv"


def write_csv(
    path: Path,
    events: Iterable[MatchEvent],
    config: TeamConfig,
    action_labels: Optional[Mapping[ActionKind, str]] = None,
) -> Path:
    """
    Written as UTF-8 with a BOM. Action labels default to English
    (ACTION_LABELS); pass ACTION_LABELS_ZH_TW for the zh-TW set.
    """
    rows = export_rows(events, config, action_labels or ACTION_LABELS)
    path = Path(path)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8-sig", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=HEADERS)
            writer.writeheader()
            writer.writerows(rows)
    except OSError as e:
        raise PersistenceError(f"Export failed ({e.strerror})", str(path)) from e

    logger.info("Exported %d rows to %s", len(rows), path)
    return path
