from typing import Iterable, List

from diestats import engine
from diestats.config import TEAM_1, TEAM_2
from diestats.models import ACTIVE, MatchSettings, MatchSnapshot, MatchState, PlayEvent, Player


def snapshot(state: MatchState) -> MatchSnapshot:
    last = state.events[-1]
    return MatchSnapshot(
        index=len(state.events),
        event_id=last.id,
        timestamp=last.timestamp,
        score_team1=state.team_scores[TEAM_1],
        score_team2=state.team_scores[TEAM_2],
        status=state.status,
        current_mvp_id=state.current_mvp_id,
        winner=state.winner,
    )


def build_match_timeline(
    settings: MatchSettings,
    roster: List[Player],
    events: Iterable[PlayEvent],
    match_id: str = "timeline",
) -> List[MatchSnapshot]:
    """
    Replays a match from scratch and returns a snapshot after each play.
    Stops at the play that completed the match.
    Does NOT mutate external state.
    """
    state = engine.start_match(engine.new_match(match_id, settings, roster))

    timeline: List[MatchSnapshot] = []

    for event in events:
        state = engine.submit_play(state, event.as_candidate())
        timeline.append(snapshot(state))

        if state.status != ACTIVE:
            break

    return timeline
