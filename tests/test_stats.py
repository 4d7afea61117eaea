from copy import deepcopy

import pytest

from diestats.engine import new_match
from diestats.exceptions import ReplayOrderError
from diestats.models import MatchSettings, PlayEvent, Player, Redemption
from diestats.stats import apply_event, fold, revert_event, unfold


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------

def create_state():
    roster = [
        Player("p1", "team1"),
        Player("p2", "team1"),
        Player("p3", "team2"),
        Player("p4", "team2"),
    ]
    return new_match("m1", MatchSettings(), roster)


def make_event(event_id, thrower_id, throw_type, point_delta, recipient_team, **kwargs):
    team = "team1" if thrower_id in ("p1", "p2") else "team2"
    return PlayEvent(
        id=event_id,
        timestamp=float(len(event_id)),
        thrower_id=thrower_id,
        team=team,
        throw_type=throw_type,
        point_delta=point_delta,
        recipient_team=recipient_team,
        **kwargs,
    )


GOAL_DROPPED = make_event("e1", "p1", "goal", 2, "team1", defender_ids=("p3",), defense_type="drop")
AURA_CATCH = make_event("e2", "p1", "hit", 0, None, defender_ids=("p4",), defense_type="catch_plus_aura")
FIFA_SAVE = make_event(
    "e3", "p1", "short", 1, "team2",
    defender_ids=("p3",), defense_type="catch",
    fifa_action="good_kick", kicker_id="p2", fifa_save=True,
)
SINK = make_event("e4", "p3", "sink", 3, "team2")
REDEEMED = make_event(
    "e5", "p1", "goal", -1, "team2",
    redemption=Redemption(success=True, target_player_id="p3"),
    target_point_delta=-1,
)


# ---------------------------------------------------------
# Fold
# ---------------------------------------------------------

def test_fold_thrower_and_defender_counters():
    state = fold(create_state(), GOAL_DROPPED)

    p1 = state.player_stats["p1"]
    p3 = state.player_stats["p3"]

    assert state.team_scores == {"team1": 2, "team2": 0}
    assert p1.throws == 1
    assert p1.hits == 1
    assert p1.score == 2
    assert p1.play_counts["goal"] == 1
    assert p1.hit_streak == 1
    assert p3.drops == 1
    assert p3.blunders == 1
    assert p3.catch_attempts == 1
    assert p3.play_counts["drop"] == 1
    assert state.events == [GOAL_DROPPED]


def test_fold_catch_plus_aura():
    state = fold(create_state(), AURA_CATCH)

    p4 = state.player_stats["p4"]
    assert p4.catches == 1
    assert p4.aura == 1
    assert p4.blunders == 0
    assert state.team_scores == {"team1": 0, "team2": 0}
    # the throw itself still counts for the thrower
    assert state.player_stats["p1"].hits == 1


def test_fold_fifa_save():
    state = fold(create_state(), FIFA_SAVE)

    p1 = state.player_stats["p1"]
    p2 = state.player_stats["p2"]
    p3 = state.player_stats["p3"]

    assert state.team_scores == {"team1": 0, "team2": 1}
    assert p1.blunders == 1
    assert p1.score == 0
    assert p2.fifa_attempts == 1
    assert p2.fifa_success == 1
    assert p2.play_counts["good_kick"] == 1
    assert p3.score == 1
    assert p3.catches == 1
    assert p3.fifa_success == 1
    assert p3.play_counts["fifa_save"] == 1


def test_fold_redemption():
    state = fold(fold(create_state(), SINK), REDEEMED)

    assert state.team_scores == {"team1": 0, "team2": 2}
    assert state.player_stats["p3"].score == 2
    assert state.player_stats["p1"].redemptions == 1
    assert state.player_stats["p1"].score == 0


def test_fold_does_not_touch_input():
    state = create_state()
    before = deepcopy(state)

    fold(state, GOAL_DROPPED)

    assert state == before


# ---------------------------------------------------------
# Unfold
# ---------------------------------------------------------

@pytest.mark.parametrize("event", [GOAL_DROPPED, AURA_CATCH, FIFA_SAVE, SINK])
def test_unfold_is_exact_inverse(event):
    state = create_state()

    assert unfold(fold(state, event), event) == state


def test_unfold_sequence_in_reverse_order():
    events = [GOAL_DROPPED, AURA_CATCH, FIFA_SAVE, SINK, REDEEMED]
    initial = create_state()

    state = deepcopy(initial)
    for e in events:
        apply_event(state, e)

    for e in reversed(events):
        revert_event(state, e)

    assert state == initial


def test_streak_survives_round_trip_through_reset():
    hits = [make_event(f"h{i}", "p1", "hit", 1, "team1") for i in range(4)]
    miss = make_event("s1", "p1", "short", 0, "team1")

    state = create_state()
    for e in hits:
        apply_event(state, e)
    on_fire = deepcopy(state)

    apply_event(state, miss)
    assert state.player_stats["p1"].hit_streak == 0

    revert_event(state, miss)
    assert state == on_fire
    assert state.player_stats["p1"].hit_streak == 4
    assert state.player_stats["p1"].currently_on_fire


def test_unfold_out_of_order_is_fatal():
    state = fold(fold(create_state(), GOAL_DROPPED), SINK)

    with pytest.raises(ReplayOrderError):
        unfold(state, GOAL_DROPPED)


def test_unfold_empty_is_fatal():
    with pytest.raises(ReplayOrderError):
        unfold(create_state(), SINK)


def test_fold_same_event_twice_is_fatal():
    state = fold(create_state(), SINK)

    with pytest.raises(ReplayOrderError):
        fold(state, SINK)


def test_event_ids_follow_the_log():
    state = fold(fold(create_state(), GOAL_DROPPED), SINK)
    assert state.event_ids == {"e1", "e4"}

    state = unfold(state, SINK)
    assert state.event_ids == {"e1"}
