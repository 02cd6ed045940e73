# volleyscout/storage.py
from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from volleyscout.config import MATCHES_DIR, SAVE_PREFIX, SCHEMA_VERSION
from volleyscout.exceptions import InvalidSnapshotError, PersistenceError
from volleyscout.models import MatchSnapshot, TeamConfig

logger = logging.getLogger(__name__)


def slot_path(name: str, directory: Path = MATCHES_DIR) -> Path:
    name = name.strip()
    if not name or any(sep in name for sep in ("/", "\\")):
        raise PersistenceError(f"Invalid save name {name!r}")
    return Path(directory) / f"{SAVE_PREFIX}{name}.json"


def default_save_name(config: TeamConfig, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"{config.match_name or 'match'}_{now.strftime('%m%d%H%M')}"


def to_record(config: TeamConfig, snapshot: MatchSnapshot, saved_at: Optional[float] = None) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "config": config.to_dict(),
        "state": snapshot.to_dict(),
        "saved_at": time.time() if saved_at is None else saved_at,
    }


def from_record(data: Any) -> Tuple[TeamConfig, MatchSnapshot]:
    if not isinstance(data, dict):
        raise InvalidSnapshotError("save record must be an object")

    missing = {"config", "state"} - set(data)
    if missing:
        raise InvalidSnapshotError(f"Missing field(s): {sorted(missing)}")

    if data.get("schema_version", SCHEMA_VERSION) != SCHEMA_VERSION:
        raise InvalidSnapshotError(f"Unsupported schema_version: {data['schema_version']}")

    try:
        config = TeamConfig.from_dict(data["config"])
        snapshot = MatchSnapshot.from_dict(data["state"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidSnapshotError(f"Malformed save record ({e})") from e

    return config, snapshot


def save_match(
    name: str,
    config: TeamConfig,
    snapshot: MatchSnapshot,
    directory: Path = MATCHES_DIR,
) -> Path:
    """
    Written to a temp file, then swapped in. A failed save leaves the
    existing slot untouched.
    """
    path = slot_path(name, directory)
    record = to_record(config, snapshot)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    except OSError as e:
        raise PersistenceError(f"Save failed ({e.strerror})", str(path)) from e

    logger.info("Saved match to %s", path)
    return path


def load_match(name: str, directory: Path = MATCHES_DIR) -> Tuple[TeamConfig, MatchSnapshot]:
    path = slot_path(name, directory)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidSnapshotError(f"Corrupt save file ({e.msg})", str(path)) from e
    except OSError as e:
        raise PersistenceError(f"Load failed ({e.strerror})", str(path)) from e

    config, snapshot = from_record(data)
    logger.info("Loaded match from %s (%d events)", path, len(snapshot.events))
    return config, snapshot


def list_saves(directory: Path = MATCHES_DIR) -> List[str]:
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(
        p.name[len(SAVE_PREFIX):-len(".json")]
        for p in directory.glob(f"{SAVE_PREFIX}*.json")
    )
