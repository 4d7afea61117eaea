import pytest

from diestats.engine import new_match, start_match, submit_play
from diestats.exceptions import ValidationError
from diestats.models import CandidatePlay, MatchSettings, PlayEvent, Player
from diestats.timeline import build_match_timeline, snapshot


def make_roster():
    return [
        Player("p1", "team1"),
        Player("p2", "team1"),
        Player("p3", "team2"),
        Player("p4", "team2"),
    ]


def played_events(settings, plays):
    state = start_match(new_match("m1", settings, make_roster()))
    for thrower_id, team, throw_type in plays:
        state = submit_play(state, CandidatePlay(thrower_id, team, throw_type, timestamp=float(len(state.events))))
    return state.events


def test_snapshot_after_each_play():
    settings = MatchSettings()
    events = played_events(settings, [
        ("p1", "team1", "goal"),
        ("p3", "team2", "sink"),
        ("p2", "team1", "hit"),
    ])

    timeline = build_match_timeline(settings, make_roster(), events)

    assert [(s.score_team1, s.score_team2) for s in timeline] == [(2, 0), (2, 3), (3, 3)]
    assert [s.index for s in timeline] == [1, 2, 3]
    assert [s.event_id for s in timeline] == [e.id for e in events]
    assert timeline[1].current_mvp_id == "p3"
    assert all(s.status == "active" for s in timeline)


def test_timeline_stops_at_completing_play():
    settings = MatchSettings(score_limit=3, win_by_two=False)
    events = played_events(settings, [("p1", "team1", "sink")])
    extra = PlayEvent(
        id="late", timestamp=9.0, thrower_id="p3", team="team2",
        throw_type="hit", point_delta=1, recipient_team="team2",
    )

    timeline = build_match_timeline(settings, make_roster(), list(events) + [extra])

    assert len(timeline) == 1
    assert timeline[-1].status == "completed"
    assert timeline[-1].winner == "team1"


def test_empty_log_gives_empty_timeline():
    assert build_match_timeline(MatchSettings(), make_roster(), []) == []


def test_invalid_event_raises():
    bad = PlayEvent(
        id="x", timestamp=0.0, thrower_id="ghost", team="team1",
        throw_type="hit", point_delta=1, recipient_team="team1",
    )

    with pytest.raises(ValidationError):
        build_match_timeline(MatchSettings(), make_roster(), [bad])


def test_snapshot_reads_last_event():
    settings = MatchSettings()
    state = start_match(new_match("m1", settings, make_roster()))
    state = submit_play(state, CandidatePlay("p4", "team2", "goal", timestamp=42.0))

    snap = snapshot(state)

    assert snap.timestamp == 42.0
    assert snap.score_team2 == 2
    assert snap.winner is None
