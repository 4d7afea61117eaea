class MatchEngineError(Exception):
    pass


class ValidationError(MatchEngineError, ValueError):
    """Candidate play references an unknown player, team or play type."""


class InvalidTransition(MatchEngineError):
    pass


class SubmissionError(MatchEngineError):
    """Play rejected because the match is not accepting submissions."""


class UndoError(MatchEngineError):
    pass


class ConfigurationError(MatchEngineError):
    """Rule table mismatch. Not recoverable."""


class ReplayOrderError(MatchEngineError):
    """Aggregate asked to unfold an event that is not the last one folded."""
