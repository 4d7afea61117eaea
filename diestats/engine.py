"""
Play submission pipeline and match operations.

Every public function takes a MatchState and returns a new one; the
input is never modified, and a raised error means nothing was applied.
"""
import logging
import time
from copy import deepcopy
from typing import Iterable, List, Optional

from diestats import lifecycle, mvp, play_types, scoring, stats
from diestats.config import TEAMS
from diestats.exceptions import SubmissionError, UndoError, ValidationError
from diestats.models import (
    ABANDONED,
    ACTIVE,
    COMPLETED,
    PAUSED,
    PENDING,
    CandidatePlay,
    MatchSettings,
    MatchState,
    PlayEvent,
    Player,
    opponent_of,
)

logger = logging.getLogger(__name__)


# =========================================================
# MATCH CREATION
# =========================================================

def new_match(match_id: str, settings: MatchSettings, roster: List[Player]) -> MatchState:
    _validate_roster(roster)

    return MatchState(
        match_id=match_id,
        settings=settings,
        roster=list(roster),
        team_scores={team: 0 for team in TEAMS},
        player_stats=stats.init_player_stats(roster),
    )


def _validate_roster(roster: List[Player]):
    ids = [p.id for p in roster]
    if len(ids) != len(set(ids)):
        raise ValidationError("Duplicate player id in roster")

    for team in TEAMS:
        if not any(p.team == team for p in roster):
            raise ValidationError(f"Roster has no players for {team}")


# =========================================================
# PUBLIC API
# =========================================================

def submit_play(state: MatchState, candidate: CandidatePlay) -> MatchState:
    """
    Validate, score and record one play.

    Returns the new state with the finalized event appended. A play
    that satisfies the win condition, or a self sink, also completes
    the match.
    """
    if not lifecycle.can_submit(state.status):
        logger.warning("Play rejected for %s: match is %s", state.match_id, state.status)
        raise SubmissionError(f"Cannot submit plays to a match that is {state.status}")

    _validate_candidate(state, candidate)

    outcome = scoring.compute_outcome(
        candidate.throw_type,
        defense_type=candidate.defense_type,
        fifa_action=candidate.fifa_action,
        redemption=candidate.redemption,
        settings=state.settings,
        defender_ids=candidate.defender_ids,
    )

    recipient_team = outcome.recipient_team(candidate.team)
    if recipient_team is not None:
        outcome = scoring.apply_score_policies(
            outcome, state.team_scores[recipient_team], state.settings
        )

    target_point_delta = 0
    if outcome.redemption and candidate.redemption.target_player_id is not None:
        target_score = state.player_stats[candidate.redemption.target_player_id].score
        target_point_delta = scoring.clamp_penalty(outcome.point_delta, target_score, state.settings)

    projected = dict(state.team_scores)
    if recipient_team is not None:
        projected[recipient_team] += outcome.point_delta

    if outcome.self_sink:
        winner = opponent_of(candidate.team)
    else:
        winner = lifecycle.check_win(projected, state.settings)

    event = PlayEvent(
        id=candidate.event_id or _next_event_id(state),
        timestamp=candidate.timestamp if candidate.timestamp is not None else time.time(),
        thrower_id=candidate.thrower_id,
        team=candidate.team,
        throw_type=candidate.throw_type,
        point_delta=outcome.point_delta,
        recipient_team=recipient_team,
        defender_ids=tuple(candidate.defender_ids),
        defense_type=candidate.defense_type,
        fifa_action=candidate.fifa_action,
        kicker_id=candidate.kicker_id,
        redemption=candidate.redemption,
        target_point_delta=target_point_delta,
        fifa_save=outcome.fifa_save,
        self_sink=outcome.self_sink,
        ended_match=winner is not None,
    )

    new_state = deepcopy(state)
    stats.apply_event(new_state, event)
    new_state.current_mvp_id = mvp.rank(new_state.player_stats)

    if winner is not None:
        new_state.status = lifecycle.transition(new_state.status, lifecycle.COMPLETE)
        new_state.winner = winner
        new_state.loser = opponent_of(winner)
        new_state.completion_reason = "self_sink" if outcome.self_sink else "score_limit"
        logger.info(
            "Match %s completed (%s): %s beats %s %s",
            new_state.match_id,
            new_state.completion_reason,
            winner,
            new_state.loser,
            _score_line(new_state),
        )

    logger.debug(
        "Play %s: %s by %s -> %+d to %s (%s)",
        event.id,
        event.throw_type,
        event.thrower_id,
        event.point_delta,
        event.recipient_team,
        _score_line(new_state),
    )

    return new_state


def undo_last_play(state: MatchState) -> MatchState:
    """
    Remove the most recent play and everything derived from it.

    Undo works while the match is active, and also on a completed match
    when the last play is what completed it; that match is reopened.
    """
    if not state.events:
        raise UndoError("No plays to undo")

    last = state.events[-1]
    reopen = state.status == COMPLETED and last.ended_match

    if state.status != ACTIVE and not reopen:
        raise UndoError(f"Cannot undo plays in a match that is {state.status}")

    new_state = deepcopy(state)
    stats.revert_event(new_state, last)
    new_state.current_mvp_id = mvp.rank(new_state.player_stats)

    if reopen:
        new_state.status = lifecycle.transition(new_state.status, lifecycle.REOPEN)
        new_state.winner = None
        new_state.loser = None
        new_state.completion_reason = None

    logger.info("Undid play %s in match %s (%s)", last.id, state.match_id, _score_line(new_state))
    return new_state


def start_match(state: MatchState) -> MatchState:
    return _apply_transition(state, lifecycle.START)


def pause_match(state: MatchState) -> MatchState:
    return _apply_transition(state, lifecycle.PAUSE)


def resume_match(state: MatchState) -> MatchState:
    return _apply_transition(state, lifecycle.RESUME)


def end_match(state: MatchState) -> MatchState:
    """Explicit end. The leading team, if any, is recorded as winner."""
    new_state = _apply_transition(state, lifecycle.END)

    a, b = TEAMS
    if new_state.team_scores[a] != new_state.team_scores[b]:
        winner = a if new_state.team_scores[a] > new_state.team_scores[b] else b
        new_state.winner = winner
        new_state.loser = opponent_of(winner)
    new_state.completion_reason = "ended"
    return new_state


def abandon_match(state: MatchState) -> MatchState:
    return _apply_transition(state, lifecycle.ABANDON)


def replay_events(
    match_id: str,
    settings: MatchSettings,
    roster: List[Player],
    events: Iterable[PlayEvent],
) -> MatchState:
    """
    Rebuild a match from its event log.

    Each stored event is re-run through submit_play and must come out
    identical; a mismatch means the log was written under different rules.
    """
    state = start_match(new_match(match_id, settings, roster))

    for stored in events:
        state = submit_play(state, stored.as_candidate())
        rebuilt = state.events[-1]
        if rebuilt != stored:
            raise ValidationError(
                f"Event {stored.id} does not replay to the stored result "
                f"(stored {stored.point_delta:+d} to {stored.recipient_team}, "
                f"replayed {rebuilt.point_delta:+d} to {rebuilt.recipient_team})"
            )

    return state


def restore_status(
    state: MatchState,
    status: str,
    completion_reason: Optional[str] = None,
) -> MatchState:
    """
    Bring a replayed match to an authoritative status.

    replay_events leaves a match active, or completed when a play finished
    it. Pauses, abandons and explicit ends are not in the log, so they are
    reapplied here. Raises ValidationError when the log cannot reach status.
    """
    if status == PENDING:
        if state.events:
            raise ValidationError("Pending match cannot have plays")
        return new_match(state.match_id, state.settings, state.roster)

    if status == PAUSED and state.status == ACTIVE:
        state = pause_match(state)
    elif status == ABANDONED and state.status == ACTIVE:
        state = abandon_match(state)
    elif status == COMPLETED and state.status == ACTIVE:
        if completion_reason != "ended":
            raise ValidationError("Match is completed but its plays do not finish it")
        state = end_match(state)

    if state.status != status:
        raise ValidationError(f"Status {status} does not match replayed status {state.status}")

    return state


    return state


# =========================================================
# VALIDATION
# =========================================================

def _validate_candidate(state: MatchState, candidate: CandidatePlay):
    thrower = state.player(candidate.thrower_id)
    if thrower is None:
        raise ValidationError(f"Unknown thrower: {candidate.thrower_id}")

    if candidate.team not in TEAMS:
        raise ValidationError(f"Unknown team: {candidate.team}")

    if thrower.team != candidate.team:
        raise ValidationError(
            f"Thrower {thrower.id} plays for {thrower.team}, not {candidate.team}"
        )

    if candidate.throw_type not in play_types.throw_outcomes():
        raise ValidationError(f"Invalid throw result: {candidate.throw_type}")

    opponent = opponent_of(candidate.team)

    if candidate.defense_type is not None:
        if not play_types.is_known(candidate.defense_type):
            raise ValidationError(f"Unknown defense result: {candidate.defense_type}")
        if play_types.lookup(candidate.defense_type).category != "defense":
            raise ValidationError(f"Not a defense result: {candidate.defense_type}")

    for defender_id in candidate.defender_ids:
        defender = state.player(defender_id)
        if defender is None:
            raise ValidationError(f"Unknown defender: {defender_id}")
        if defender.team != opponent:
            raise ValidationError(f"Defender {defender_id} is not on the opposing team")

    if len(set(candidate.defender_ids)) != len(candidate.defender_ids):
        raise ValidationError("Defender listed twice")

    if candidate.fifa_action is not None:
        if candidate.fifa_action not in play_types.FIFA_ACTIONS:
            raise ValidationError(f"Invalid FIFA action: {candidate.fifa_action}")
        if candidate.kicker_id is None:
            raise ValidationError("FIFA action requires a kicker")
        if state.player(candidate.kicker_id) is None:
            raise ValidationError(f"Unknown FIFA kicker: {candidate.kicker_id}")
    elif candidate.kicker_id is not None:
        raise ValidationError("FIFA kicker given without a FIFA action")

    redemption = candidate.redemption
    if redemption is not None and redemption.target_player_id is not None:
        target = state.player(redemption.target_player_id)
        if target is None:
            raise ValidationError(f"Unknown redemption target: {redemption.target_player_id}")
        if target.team != opponent:
            raise ValidationError("Redemption target must be on the opposing team")

    if candidate.throw_type == play_types.SELF_SINK:
        if candidate.defense_type is not None or candidate.defender_ids:
            raise ValidationError("Defense not applicable for self sink")
        if candidate.fifa_action is not None:
            raise ValidationError("FIFA not applicable for self sink")
        if redemption is not None:
            raise ValidationError("Redemption not applicable for self sink")

    if candidate.event_id is not None:
        if candidate.event_id in state.event_ids:
            raise ValidationError(f"Duplicate event id: {candidate.event_id}")


# =========================================================
# HELPERS
# =========================================================

def _apply_transition(state: MatchState, action: str) -> MatchState:
    new_status = lifecycle.transition(state.status, action)
    new_state = deepcopy(state)
    new_state.status = new_status
    logger.info("Match %s: %s -> %s", state.match_id, state.status, new_status)
    return new_state


def _next_event_id(state: MatchState) -> str:
    n = len(state.events) + 1
    while f"{state.match_id}-{n:04d}" in state.event_ids:
        n += 1
    return f"{state.match_id}-{n:04d}"


def _score_line(state: MatchState) -> str:
    return " - ".join(str(state.team_scores[t]) for t in TEAMS)
