from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Literal, Optional, Set, Tuple

from diestats.config import (
    DEFAULT_PLAYER_NAMES,
    DEFAULT_SCORE_LIMIT,
    DEFAULT_SINK_POINTS,
    DEFAULT_TEAM_NAMES,
    DEFAULT_WIN_BY_TWO,
    SINK_POINTS_OPTIONS,
    TEAM_1,
    TEAM_2,
    TEAMS,
)
from diestats.exceptions import ValidationError


Category = Literal["throw", "defense", "fifa", "special"]
OutcomeClass = Literal["good", "bad", "variable"]
Recipient = Literal["thrower", "opponent", "none"]

PENDING = "pending"
ACTIVE = "active"
PAUSED = "paused"
COMPLETED = "completed"
ABANDONED = "abandoned"
STATUSES = (PENDING, ACTIVE, PAUSED, COMPLETED, ABANDONED)


def opponent_of(team: str) -> str:
    if team == TEAM_1:
        return TEAM_2
    if team == TEAM_2:
        return TEAM_1
    raise ValidationError(f"Unknown team: {team}")


@dataclass(frozen=True)
class PlayTypeDefinition:
    id: str
    name: str
    description: str
    category: Category
    outcome: OutcomeClass
    points: int = 0
    builds_streak: bool = False
    resets_streak: bool = False
    is_blunder: bool = False
    is_special: bool = False
    negates_points: bool = False


@dataclass(frozen=True)
class MatchSettings:
    score_limit: int = DEFAULT_SCORE_LIMIT
    win_by_two: bool = DEFAULT_WIN_BY_TWO
    sink_points: int = DEFAULT_SINK_POINTS
    team_names: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_TEAM_NAMES))
    player_names: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PLAYER_NAMES))
    # Open rule questions, kept as switches
    allow_negative_scores: bool = False
    suppress_fifa_save_at_match_point: bool = False

    def __post_init__(self):
        if not isinstance(self.score_limit, int) or self.score_limit <= 0:
            raise ValidationError("score_limit must be a positive integer")

        if self.sink_points not in SINK_POINTS_OPTIONS:
            raise ValidationError(f"sink_points must be one of {SINK_POINTS_OPTIONS}")

    def team_name(self, team: str) -> str:
        return self.team_names.get(team, DEFAULT_TEAM_NAMES.get(team, team))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "MatchSettings":
        return MatchSettings(
            score_limit=int(d.get("score_limit", DEFAULT_SCORE_LIMIT)),
            win_by_two=bool(d.get("win_by_two", DEFAULT_WIN_BY_TWO)),
            sink_points=int(d.get("sink_points", DEFAULT_SINK_POINTS)),
            team_names=dict(d.get("team_names") or DEFAULT_TEAM_NAMES),
            player_names=dict(d.get("player_names") or DEFAULT_PLAYER_NAMES),
            allow_negative_scores=bool(d.get("allow_negative_scores", False)),
            suppress_fifa_save_at_match_point=bool(
                d.get("suppress_fifa_save_at_match_point", False)
            ),
        )


@dataclass(frozen=True)
class Player:
    id: str
    team: str
    display_name: str = ""
    is_registered: bool = False

    def __post_init__(self):
        if self.team not in TEAMS:
            raise ValidationError(f"Invalid team for player {self.id}: {self.team}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Player":
        return Player(
            id=str(d["id"]),
            team=str(d["team"]),
            display_name=str(d.get("display_name", "")),
            is_registered=bool(d.get("is_registered", False)),
        )


@dataclass(frozen=True)
class Redemption:
    success: bool
    target_player_id: Optional[str] = None


@dataclass
class CandidatePlay:
    """
    A play as collected from the logger, before scoring.

    event_id and timestamp are optional; the pipeline fills them in.
    """
    thrower_id: str
    team: str
    throw_type: str
    defender_ids: Tuple[str, ...] = ()
    defense_type: Optional[str] = None
    fifa_action: Optional[str] = None
    kicker_id: Optional[str] = None
    redemption: Optional[Redemption] = None
    event_id: Optional[str] = None
    timestamp: Optional[float] = None


@dataclass(frozen=True)
class PlayEvent:
    """
    Finalized, immutable record of one play.

    point_delta and recipient_team are the applied result after
    score policies; target_point_delta is what the redemption target
    actually lost. ended_match marks the play that completed the match.
    """
    id: str
    timestamp: float
    thrower_id: str
    team: str
    throw_type: str
    point_delta: int
    recipient_team: Optional[str]
    defender_ids: Tuple[str, ...] = ()
    defense_type: Optional[str] = None
    fifa_action: Optional[str] = None
    kicker_id: Optional[str] = None
    redemption: Optional[Redemption] = None
    target_point_delta: int = 0
    fifa_save: bool = False
    self_sink: bool = False
    ended_match: bool = False

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["defender_ids"] = list(self.defender_ids)
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PlayEvent":
        redemption_raw = d.get("redemption")
        redemption = None
        if redemption_raw is not None:
            redemption = Redemption(
                success=bool(redemption_raw["success"]),
                target_player_id=redemption_raw.get("target_player_id"),
            )

        return PlayEvent(
            id=str(d["id"]),
            timestamp=float(d["timestamp"]),
            thrower_id=str(d["thrower_id"]),
            team=str(d["team"]),
            throw_type=str(d["throw_type"]),
            point_delta=int(d["point_delta"]),
            recipient_team=d.get("recipient_team"),
            defender_ids=tuple(d.get("defender_ids") or ()),
            defense_type=d.get("defense_type"),
            fifa_action=d.get("fifa_action"),
            kicker_id=d.get("kicker_id"),
            redemption=redemption,
            target_point_delta=int(d.get("target_point_delta", 0)),
            fifa_save=bool(d.get("fifa_save", False)),
            self_sink=bool(d.get("self_sink", False)),
            ended_match=bool(d.get("ended_match", False)),
        )

    def as_candidate(self) -> CandidatePlay:
        return CandidatePlay(
            thrower_id=self.thrower_id,
            team=self.team,
            throw_type=self.throw_type,
            defender_ids=self.defender_ids,
            defense_type=self.defense_type,
            fifa_action=self.fifa_action,
            kicker_id=self.kicker_id,
            redemption=self.redemption,
            event_id=self.id,
            timestamp=self.timestamp,
        )


@dataclass(frozen=True)
class StreakState:
    hit_streak: int = 0
    longest_streak: int = 0
    currently_on_fire: bool = False
    on_fire_count: int = 0


@dataclass
class LivePlayerStats:
    player_id: str
    team: str
    score: int = 0
    throws: int = 0
    hits: int = 0
    catches: int = 0
    catch_attempts: int = 0
    drops: int = 0
    misses: int = 0
    blunders: int = 0
    hit_streak: int = 0
    longest_streak: int = 0
    on_fire_count: int = 0
    currently_on_fire: bool = False
    fifa_attempts: int = 0
    fifa_success: int = 0
    aura: int = 0
    special_throws: int = 0
    redemptions: int = 0
    play_counts: Dict[str, int] = field(default_factory=dict)
    # previous streak states, most recent last
    streak_history: List[StreakState] = field(default_factory=list)

    @property
    def hit_rate(self) -> float:
        if self.throws == 0:
            return 0.0
        return self.hits / self.throws

    @property
    def streak(self) -> StreakState:
        return StreakState(
            hit_streak=self.hit_streak,
            longest_streak=self.longest_streak,
            currently_on_fire=self.currently_on_fire,
            on_fire_count=self.on_fire_count,
        )

    def set_streak(self, state: StreakState):
        self.hit_streak = state.hit_streak
        self.longest_streak = state.longest_streak
        self.currently_on_fire = state.currently_on_fire
        self.on_fire_count = state.on_fire_count


@dataclass
class MatchState:
    match_id: str
    settings: MatchSettings
    roster: List[Player]
    status: str = PENDING
    events: List[PlayEvent] = field(default_factory=list)
    # ids of everything in events
    event_ids: Set[str] = field(default_factory=set, repr=False)
    team_scores: Dict[str, int] = field(default_factory=lambda: {t: 0 for t in TEAMS})
    player_stats: Dict[str, LivePlayerStats] = field(default_factory=dict)
    current_mvp_id: Optional[str] = None
    winner: Optional[str] = None
    loser: Optional[str] = None
    completion_reason: Optional[str] = None

    def player(self, player_id: str) -> Optional[Player]:
        for p in self.roster:
            if p.id == player_id:
                return p
        return None

    def players_on(self, team: str) -> List[Player]:
        return [p for p in self.roster if p.team == team]


@dataclass(frozen=True)
class MatchSnapshot:
    index: int
    event_id: str
    timestamp: float
    score_team1: int
    score_team2: int
    status: str
    current_mvp_id: Optional[str]
    winner: Optional[str]
