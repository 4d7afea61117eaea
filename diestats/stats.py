from copy import deepcopy
from typing import Dict, List

from diestats import play_types, streak
from diestats.exceptions import ReplayOrderError
from diestats.models import LivePlayerStats, MatchState, PlayEvent, Player


def init_player_stats(roster: List[Player]) -> Dict[str, LivePlayerStats]:
    return {
        p.id: LivePlayerStats(
            player_id=p.id,
            team=p.team,
            play_counts={play_id: 0 for play_id in play_types.PLAY_TYPES},
        )
        for p in roster
    }


# =========================================================
# PUBLIC API
# =========================================================

def fold(state: MatchState, event: PlayEvent) -> MatchState:
    """Return a copy of state with event folded in and appended to the log."""
    new_state = deepcopy(state)
    apply_event(new_state, event)
    return new_state


def unfold(state: MatchState, event: PlayEvent) -> MatchState:
    """Return a copy of state with its most recent event taken back out."""
    new_state = deepcopy(state)
    revert_event(new_state, event)
    return new_state


def apply_event(state: MatchState, event: PlayEvent):
    """In-place fold. The event becomes the new top of the log."""
    if event.id in state.event_ids:
        raise ReplayOrderError(f"Event {event.id} already folded")

    thrower = state.player_stats[event.thrower_id]
    thrower.streak_history.append(thrower.streak)
    thrower.set_streak(streak.apply_throw(thrower.streak, event.throw_type))

    _count(state, event, +1)
    state.events.append(event)
    state.event_ids.add(event.id)


def revert_event(state: MatchState, event: PlayEvent):
    """In-place unfold. Only the most recently folded event may be reverted."""
    if not state.events or state.events[-1].id != event.id:
        top = state.events[-1].id if state.events else None
        raise ReplayOrderError(
            f"Cannot unfold {event.id}: most recent event is {top}"
        )

    state.events.pop()
    state.event_ids.discard(event.id)
    _count(state, event, -1)

    thrower = state.player_stats[event.thrower_id]
    previous = thrower.streak_history.pop()
    thrower.set_streak(streak.unapply_throw(thrower.streak, previous))


# =========================================================
# COUNTERS
# =========================================================

def _count(state: MatchState, event: PlayEvent, sign: int):
    stats = state.player_stats
    throw_def = play_types.lookup(event.throw_type)
    delta = event.point_delta * sign

    # --- thrower ---
    thrower = stats[event.thrower_id]
    thrower.throws += sign
    thrower.play_counts[event.throw_type] += sign

    if throw_def.builds_streak:
        thrower.hits += sign
    if throw_def.is_special and throw_def.category == "throw":
        thrower.special_throws += sign
    if throw_def.is_blunder:
        thrower.blunders += sign

    if event.recipient_team == event.team:
        thrower.score += delta

    # --- defenders ---
    if event.defense_type is not None:
        defense_def = play_types.lookup(event.defense_type)

        for defender_id in event.defender_ids:
            defender = stats[defender_id]
            defender.play_counts[event.defense_type] += sign
            defender.catch_attempts += sign

            if defense_def.negates_points:
                defender.catches += sign
            if event.defense_type == play_types.CATCH_PLUS_AURA:
                defender.aura += sign
            if event.defense_type == play_types.DROP:
                defender.drops += sign
            if event.defense_type == play_types.MISS:
                defender.misses += sign
            if defense_def.is_blunder:
                defender.blunders += sign

    # --- FIFA ---
    if event.fifa_action is not None and event.kicker_id is not None:
        kicker = stats[event.kicker_id]
        kicker.fifa_attempts += sign
        kicker.play_counts[event.fifa_action] += sign
        if event.fifa_action == play_types.GOOD_KICK:
            kicker.fifa_success += sign

    if event.fifa_save and event.defender_ids:
        saver = stats[event.defender_ids[0]]
        saver.score += delta
        saver.fifa_success += sign
        saver.play_counts[play_types.FIFA_SAVE] += sign

    # --- redemption ---
    if event.redemption is not None and event.redemption.success:
        thrower.redemptions += sign
        thrower.play_counts[play_types.REDEMPTION] += sign
        target_id = event.redemption.target_player_id
        if target_id is not None:
            stats[target_id].score += event.target_point_delta * sign

    # --- team ---
    if event.recipient_team is not None:
        state.team_scores[event.recipient_team] += delta
