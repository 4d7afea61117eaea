import logging
from contextlib import contextmanager
from copy import deepcopy
from threading import Lock
from typing import Callable, Dict, List, Optional

from diestats import engine
from diestats.exceptions import SubmissionError, ValidationError
from diestats.models import CandidatePlay, MatchSettings, MatchState, PlayEvent, Player

logger = logging.getLogger(__name__)


class MatchSession:
    """
    Single live match, as held by a host (client or server).

    Responsibilities:
    - Serialize submit / undo / status changes (one writer at a time;
      a second writer gets SubmissionError and the host retries)
    - Commit a new MatchState only when the engine call succeeds
    - Rebuild state atomically from an authoritative event log
    - Export the event log for persistence / broadcast
    """

    def __init__(self, match_id: str, settings: MatchSettings, roster: List[Player]):
        self._match_id = match_id
        self._settings = settings
        self._roster = list(roster)
        self._state = engine.new_match(match_id, settings, roster)
        self._lock = Lock()

    # ---------------------------------------------------------
    # Core API
    # ---------------------------------------------------------

    @property
    def state(self) -> MatchState:
        return deepcopy(self._state)

    def submit(self, candidate: CandidatePlay) -> MatchState:
        return self._run(lambda s: engine.submit_play(s, candidate))

    def undo(self) -> MatchState:
        return self._run(engine.undo_last_play)

    def start(self) -> MatchState:
        return self._run(engine.start_match)

    def pause(self) -> MatchState:
        return self._run(engine.pause_match)

    def resume(self) -> MatchState:
        return self._run(engine.resume_match)

    def end(self) -> MatchState:
        return self._run(engine.end_match)

    def abandon(self) -> MatchState:
        return self._run(engine.abandon_match)

    def replay(
        self,
        events: List[Dict],
        status: Optional[str] = None,
        completion_reason: Optional[str] = None,
    ) -> MatchState:
        """
        Replace local state with a replay of the given event log.
        Atomic: if any event fails -> no state mutation.

        status and completion_reason come from the host when it has them;
        otherwise the session keeps its current ones, so a paused match
        stays paused after a resync.
        """
        if not isinstance(events, list):
            raise ValidationError("events must be a list")

        play_events = [PlayEvent.from_dict(e) for e in events]

        def rebuild(current: MatchState) -> MatchState:
            replayed = engine.replay_events(
                self._match_id, self._settings, self._roster, play_events
            )
            return engine.restore_status(
                replayed,
                status or current.status,
                completion_reason if status else current.completion_reason,
            )

        return self._run(rebuild)

    def export_events(self) -> List[Dict]:
        return [e.to_dict() for e in self._state.events]

    def reset(self):
        with self._writer():
            self._state = engine.new_match(self._match_id, self._settings, self._roster)

    # ---------------------------------------------------------
    # Internals
    # ---------------------------------------------------------

    @contextmanager
    def _writer(self):
        if not self._lock.acquire(blocking=False):
            logger.warning("Concurrent write rejected for match %s", self._match_id)
            raise SubmissionError("Another submission is in progress for this match")
        try:
            yield
        finally:
            self._lock.release()

    def _run(self, operation: Callable[[MatchState], MatchState]) -> MatchState:
        with self._writer():
            new_state = operation(self._state)
            self._state = new_state
        return deepcopy(new_state)
