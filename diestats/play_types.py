"""
Static catalog of every play kind that can appear in a match log.

Built once at import time and never mutated. A lookup miss means the
caller and this rule table disagree, which is a configuration error.
"""
from typing import Dict, List, Tuple

from diestats.exceptions import ConfigurationError
from diestats.models import PlayTypeDefinition


# Throws
TABLE = "table"
LINE = "line"
HIT = "hit"
KNICKER = "knicker"
GOAL = "goal"
DINK = "dink"
SINK = "sink"
SHORT = "short"
LONG = "long"
SIDE = "side"
HEIGHT = "height"

# Defense
CATCH = "catch"
CATCH_PLUS_AURA = "catch_plus_aura"
DROP = "drop"
MISS = "miss"
TWO_HANDS = "2hands"
BODY = "body"

# FIFA
GOOD_KICK = "good_kick"
BAD_KICK = "bad_kick"
FIFA_SAVE = "fifa_save"

# Special
REDEMPTION = "redemption"
SELF_SINK = "self_sink"


_DEFINITIONS: Tuple[PlayTypeDefinition, ...] = (
    # --- good throws ---
    PlayTypeDefinition(TABLE, "Table", "Die lands on table, valid non-scoring throw",
                       "throw", "good", 0),
    PlayTypeDefinition(LINE, "Line", "Hits designated line precisely",
                       "throw", "good", 0, resets_streak=True),
    PlayTypeDefinition(HIT, "Hit", "Successfully hits opponent's cup",
                       "throw", "good", 1, builds_streak=True),
    PlayTypeDefinition(KNICKER, "Knicker", "Glancing shot off table/object into cup",
                       "throw", "good", 1, builds_streak=True, is_special=True),
    PlayTypeDefinition(GOAL, "Goal", "Direct, powerful hit",
                       "throw", "good", 2, builds_streak=True),
    PlayTypeDefinition(DINK, "Dink", "Soft, precise touch shot",
                       "throw", "good", 2, builds_streak=True, is_special=True),
    # sink points come from MatchSettings.sink_points at scoring time
    PlayTypeDefinition(SINK, "Sink", "Die lands inside opponent's cup",
                       "throw", "good", 3, builds_streak=True, is_special=True),
    # --- bad throws ---
    PlayTypeDefinition(SHORT, "Short", "Falls short of target",
                       "throw", "bad", 0, resets_streak=True, is_blunder=True),
    PlayTypeDefinition(LONG, "Long", "Overshoots target",
                       "throw", "bad", 0, resets_streak=True, is_blunder=True),
    PlayTypeDefinition(SIDE, "Side", "Misses horizontally",
                       "throw", "bad", 0, resets_streak=True, is_blunder=True),
    PlayTypeDefinition(HEIGHT, "Height", "Excessive vertical trajectory",
                       "throw", "bad", 0, resets_streak=True, is_blunder=True),
    # --- defense ---
    PlayTypeDefinition(CATCH_PLUS_AURA, "Catch + Aura", "Clean catch with exceptional skill/timing",
                       "defense", "good", 0, negates_points=True),
    PlayTypeDefinition(CATCH, "Catch", "Standard successful catch",
                       "defense", "good", 0, negates_points=True),
    PlayTypeDefinition(DROP, "Drop", "Attempted catch but failed to secure",
                       "defense", "bad", 0, is_blunder=True),
    PlayTypeDefinition(MISS, "Miss", "Complete miss on catch attempt",
                       "defense", "bad", 0, is_blunder=True),
    PlayTypeDefinition(TWO_HANDS, "2hands", "Used two hands (improper technique)",
                       "defense", "bad", 0, is_blunder=True),
    PlayTypeDefinition(BODY, "Body", "Used body instead of hands",
                       "defense", "bad", 0, is_blunder=True),
    # --- FIFA ---
    PlayTypeDefinition(GOOD_KICK, "Good Kick", "Successful/intended kick execution",
                       "fifa", "good", 0),
    PlayTypeDefinition(BAD_KICK, "Bad Kick", "Unsuccessful/unintended kick execution",
                       "fifa", "bad", 0),
    PlayTypeDefinition(FIFA_SAVE, "FIFA Save", "Defensive FIFA save for 1 point",
                       "fifa", "good", 1, is_special=True),
    # --- special ---
    PlayTypeDefinition(REDEMPTION, "Redemption",
                       "Negates the throw and removes 1 point from the opponent if successful",
                       "special", "variable", 0, is_special=True),
    PlayTypeDefinition(SELF_SINK, "Self Sink", "Die lands in own cup, immediate loss",
                       "special", "bad", 0, resets_streak=True, is_special=True),
)

PLAY_TYPES: Dict[str, PlayTypeDefinition] = {d.id: d for d in _DEFINITIONS}

FIFA_ACTIONS = (GOOD_KICK, BAD_KICK)


def lookup(play_type_id: str) -> PlayTypeDefinition:
    try:
        return PLAY_TYPES[play_type_id]
    except KeyError:
        raise ConfigurationError(f"Unknown play type: {play_type_id!r}") from None


def is_known(play_type_id: str) -> bool:
    return play_type_id in PLAY_TYPES


def by_category(category: str) -> List[PlayTypeDefinition]:
    return [d for d in _DEFINITIONS if d.category == category]


def throw_outcomes() -> List[str]:
    """Ids a thrower may log as the result of a throw."""
    return [d.id for d in by_category("throw")] + [SELF_SINK]


def is_bad_throw(play_type_id: str) -> bool:
    d = lookup(play_type_id)
    return d.category == "throw" and d.outcome == "bad"


def is_successful_defense(play_type_id) -> bool:
    if play_type_id is None:
        return False
    d = lookup(play_type_id)
    return d.category == "defense" and d.negates_points
