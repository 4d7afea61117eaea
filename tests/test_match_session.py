import pytest

from diestats.exceptions import InvalidTransition, SubmissionError, UndoError, ValidationError
from diestats.match_session import MatchSession
from diestats.models import CandidatePlay, MatchSettings, Player


def create_session(**settings):
    roster = [
        Player("p1", "team1"),
        Player("p2", "team1"),
        Player("p3", "team2"),
        Player("p4", "team2"),
    ]
    session = MatchSession("m1", MatchSettings(**settings), roster)
    session.start()
    return session


def test_submit_and_undo():
    session = create_session()

    session.submit(CandidatePlay("p1", "team1", "goal"))
    state = session.submit(CandidatePlay("p3", "team2", "hit"))
    assert state.team_scores == {"team1": 2, "team2": 1}

    state = session.undo()
    assert state.team_scores == {"team1": 2, "team2": 0}
    assert len(session.state.events) == 1


def test_state_is_a_copy():
    session = create_session()

    state = session.state
    state.team_scores["team1"] = 99
    state.events.append("junk")

    assert session.state.team_scores["team1"] == 0
    assert session.state.events == []


def test_failed_submit_keeps_state():
    session = create_session()
    session.submit(CandidatePlay("p1", "team1", "goal"))
    before = session.state

    with pytest.raises(ValidationError):
        session.submit(CandidatePlay("ghost", "team1", "goal"))

    assert session.state == before


def test_lifecycle_through_session():
    session = create_session()

    assert session.pause().status == "paused"
    with pytest.raises(SubmissionError):
        session.submit(CandidatePlay("p1", "team1", "hit"))
    with pytest.raises(UndoError):
        session.undo()

    assert session.resume().status == "active"
    assert session.end().status == "completed"

    with pytest.raises(InvalidTransition):
        session.abandon()


def test_export_and_replay():
    session = create_session()
    session.submit(CandidatePlay("p1", "team1", "sink"))
    session.submit(CandidatePlay("p4", "team2", "short", defender_ids=("p2",), defense_type="catch",
                                 fifa_action="good_kick", kicker_id="p4"))
    exported = session.export_events()
    expected = session.state

    other = create_session()
    state = other.replay(exported)

    assert state == expected
    assert state.team_scores == {"team1": 4, "team2": 0}


def test_replay_is_atomic():
    session = create_session()
    session.submit(CandidatePlay("p1", "team1", "goal"))
    before = session.state

    exported = session.export_events()
    exported.append(dict(exported[0], id="m1-0002", point_delta=7))

    with pytest.raises(ValidationError):
        session.replay(exported)

    assert session.state == before


def test_replay_requires_list():
    with pytest.raises(ValidationError):
        create_session().replay({"events": []})


def test_reset():
    session = create_session()
    session.submit(CandidatePlay("p1", "team1", "goal"))

    session.reset()

    assert session.state.status == "pending"
    assert session.state.events == []


def test_concurrent_write_rejected():
    session = create_session()
    session._lock.acquire()
    try:
        with pytest.raises(SubmissionError):
            session.submit(CandidatePlay("p1", "team1", "hit"))
    finally:
        session._lock.release()

    assert session.state.events == []
    session.submit(CandidatePlay("p1", "team1", "hit"))
    assert len(session.state.events) == 1


@pytest.mark.parametrize("halt", ["pause", "abandon"])
def test_replay_keeps_session_status(halt):
    session = create_session()
    session.submit(CandidatePlay("p1", "team1", "hit"))
    exported = session.export_events()
    expected = getattr(session, halt)()

    state = session.replay(exported)

    assert state == expected
    with pytest.raises(SubmissionError):
        session.submit(CandidatePlay("p3", "team2", "hit"))


def test_replay_takes_status_from_host():
    session = create_session()
    session.submit(CandidatePlay("p1", "team1", "hit"))
    exported = session.export_events()

    state = create_session().replay(exported, status="completed", completion_reason="ended")

    assert state.status == "completed"
    assert state.winner == "team1"
    assert state.completion_reason == "ended"


def test_replay_to_unreachable_status_is_rejected():
    session = create_session()
    session.submit(CandidatePlay("p1", "team1", "hit"))
    before = session.state

    with pytest.raises(ValidationError):
        session.replay(session.export_events(), status="pending")

    assert session.state == before
