import json
import logging
from pathlib import Path

from diestats import engine
from diestats.config import SCHEMA_VERSION
from diestats.exceptions import ValidationError
from diestats.models import (
    PENDING,
    MatchSettings,
    MatchState,
    PlayEvent,
    Player,
)

logger = logging.getLogger(__name__)


def match_to_dict(match: MatchState) -> dict:
    return {
        "schema_version": SCHEMA_VERSION,
        "match_id": match.match_id,
        "status": match.status,
        "completion_reason": match.completion_reason,
        "settings": match.settings.to_dict(),
        "roster": [p.to_dict() for p in match.roster],
        "events": [e.to_dict() for e in match.events],
    }


def match_from_dict(data: dict) -> MatchState:
    """
    Rebuild a match by replaying its stored event log.

    Aggregates are never read from disk; scores, stats and MVP come
    from the replay.
    """
    for key in ("schema_version", "match_id", "settings", "roster", "events"):
        if key not in data:
            raise ValidationError(f"Missing field: {key}")

    if data["schema_version"] != SCHEMA_VERSION:
        raise ValidationError(f"Unsupported schema_version: {data['schema_version']}")

    settings = MatchSettings.from_dict(data["settings"])
    roster = [Player.from_dict(p) for p in data["roster"]]
    events = [PlayEvent.from_dict(e) for e in data["events"]]
    match = engine.replay_events(data["match_id"], settings, roster, events)
    match = engine.restore_status(
        match, data.get("status", PENDING), data.get("completion_reason")
    )

    logger.debug("Loaded match %s with %d plays", match.match_id, len(match.events))
    return match


def load_match(path: Path) -> MatchState:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return match_from_dict(data)


def save_match(path: Path, match: MatchState):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(match_to_dict(match), f, indent=4)
