import logging
from typing import Dict, Optional, Tuple

from diestats.config import TEAMS
from diestats.exceptions import InvalidTransition
from diestats.models import (
    ABANDONED,
    ACTIVE,
    COMPLETED,
    PAUSED,
    PENDING,
    MatchSettings,
)

logger = logging.getLogger(__name__)

START = "start"
PAUSE = "pause"
RESUME = "resume"
COMPLETE = "complete"
END = "end"
ABANDON = "abandon"
# only used by undo of the play that completed the match
REOPEN = "reopen"

TRANSITIONS: Dict[Tuple[str, str], str] = {
    (PENDING, START): ACTIVE,
    (ACTIVE, PAUSE): PAUSED,
    (PAUSED, RESUME): ACTIVE,
    (ACTIVE, COMPLETE): COMPLETED,
    (ACTIVE, END): COMPLETED,
    (ACTIVE, ABANDON): ABANDONED,
    (PAUSED, ABANDON): ABANDONED,
    (COMPLETED, REOPEN): ACTIVE,
}

TERMINAL = (COMPLETED, ABANDONED)


def transition(status: str, action: str) -> str:
    try:
        new_status = TRANSITIONS[(status, action)]
    except KeyError:
        raise InvalidTransition(f"Cannot {action} a match that is {status}") from None

    logger.debug("Match status %s -> %s (%s)", status, new_status, action)
    return new_status


def can_submit(status: str) -> bool:
    return status == ACTIVE


def is_terminal(status: str) -> bool:
    return status in TERMINAL


def check_win(team_scores: Dict[str, int], settings: MatchSettings) -> Optional[str]:
    """
    Team that has won on score, or None.

    Reaching score_limit is enough unless win_by_two is on, in which
    case the lead must also be at least 2.
    """
    team_a, team_b = TEAMS
    a = team_scores.get(team_a, 0)
    b = team_scores.get(team_b, 0)

    if a == b:
        return None

    leader, lead_score, lead = (team_a, a, a - b) if a > b else (team_b, b, b - a)

    if lead_score < settings.score_limit:
        return None

    if settings.win_by_two and lead < 2:
        return None

    return leader
