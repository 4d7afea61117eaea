from diestats import play_types
from diestats.config import ON_FIRE_THRESHOLD
from diestats.models import StreakState


def apply_throw(state: StreakState, throw_type: str) -> StreakState:
    """
    Advance a player's streak by one throw.

    Only throws flagged builds_streak extend the counter; anything else
    resets it and puts the fire out. Reaching the threshold lights the
    player up and bumps the lifetime on_fire_count once per run.
    """
    definition = play_types.lookup(throw_type)

    if not definition.builds_streak:
        return StreakState(
            hit_streak=0,
            longest_streak=state.longest_streak,
            currently_on_fire=False,
            on_fire_count=state.on_fire_count,
        )

    streak = state.hit_streak + 1
    on_fire_count = state.on_fire_count

    if streak == ON_FIRE_THRESHOLD:
        on_fire_count += 1

    return StreakState(
        hit_streak=streak,
        longest_streak=max(state.longest_streak, streak),
        currently_on_fire=streak >= ON_FIRE_THRESHOLD,
        on_fire_count=on_fire_count,
    )


def unapply_throw(state: StreakState, previous: StreakState) -> StreakState:
    """
    Inverse of apply_throw.

    The counter alone cannot be inverted after a reset, so the caller
    hands back the state recorded before the throw.
    """
    if state.on_fire_count < previous.on_fire_count:
        raise ValueError("previous streak state is newer than the current one")
    return previous
