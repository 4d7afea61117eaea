import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from diestats import play_types
from diestats.config import FIFA_SAVE_POINTS, REDEMPTION_PENALTY
from diestats.models import MatchSettings, Recipient, Redemption, opponent_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringOutcome:
    point_delta: int
    recipient: Recipient
    self_sink: bool = False
    fifa_save: bool = False
    redemption: bool = False

    def recipient_team(self, thrower_team: str) -> Optional[str]:
        if self.recipient == "thrower":
            return thrower_team
        if self.recipient == "opponent":
            return opponent_of(thrower_team)
        return None


def compute_outcome(
    throw_type: str,
    defense_type: Optional[str] = None,
    fifa_action: Optional[str] = None,
    redemption: Optional[Redemption] = None,
    settings: Optional[MatchSettings] = None,
    defender_ids: Sequence[str] = (),
) -> ScoringOutcome:
    """
    Net point delta for one play and which side receives it.

    Rules are checked in order, first match wins:
    redemption, FIFA save, successful catch, self sink, base points.
    Pure: identical inputs always give identical outputs.
    """
    if settings is None:
        settings = MatchSettings()

    # lookup raises ConfigurationError for ids outside the rule table
    throw_def = play_types.lookup(throw_type)
    caught = play_types.is_successful_defense(defense_type)

    if redemption is not None and redemption.success:
        return ScoringOutcome(-REDEMPTION_PENALTY, "opponent", redemption=True)

    if (
        play_types.is_bad_throw(throw_type)
        and fifa_action is not None
        and len(defender_ids) > 0
        and caught
    ):
        return ScoringOutcome(FIFA_SAVE_POINTS, "opponent", fifa_save=True)

    if caught:
        return ScoringOutcome(0, "none")

    if throw_type == play_types.SELF_SINK:
        return ScoringOutcome(0, "none", self_sink=True)

    points = throw_def.points
    if throw_type == play_types.SINK:
        points = settings.sink_points

    return ScoringOutcome(points, "thrower")


def apply_score_policies(
    outcome: ScoringOutcome,
    recipient_score: int,
    settings: MatchSettings,
) -> ScoringOutcome:
    """
    Adjust an outcome for rules that depend on the current score.

    recipient_score is the receiving team's score before the play.
    """
    delta = outcome.point_delta

    if outcome.fifa_save and settings.suppress_fifa_save_at_match_point:
        if recipient_score >= settings.score_limit - 1:
            logger.debug("FIFA save suppressed at match point (score %d)", recipient_score)
            delta = 0

    if delta < 0:
        clamped = clamp_penalty(delta, recipient_score, settings)
        if clamped != delta:
            logger.debug("Penalty %d clamped to %d at score %d", delta, clamped, recipient_score)
        delta = clamped

    if delta == outcome.point_delta:
        return outcome

    return replace(outcome, point_delta=delta)


def clamp_penalty(delta: int, score: int, settings: MatchSettings) -> int:
    """Limit a negative delta so score does not drop below zero."""
    if delta >= 0 or settings.allow_negative_scores:
        return delta
    return -min(-delta, max(score, 0))
