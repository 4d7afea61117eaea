from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MATCHES_DIR = PROJECT_ROOT / "matches"

SCHEMA_VERSION = 1

TEAM_1 = "team1"
TEAM_2 = "team2"
TEAMS = (TEAM_1, TEAM_2)

DEFAULT_SCORE_LIMIT = 11
SCORE_LIMIT_OPTIONS = (7, 11, 15, 21)
DEFAULT_SINK_POINTS = 3
SINK_POINTS_OPTIONS = (3, 5)
DEFAULT_WIN_BY_TWO = True

DEFAULT_TEAM_NAMES = {TEAM_1: "Team 1", TEAM_2: "Team 2"}
DEFAULT_PLAYER_NAMES = {
    "player1": "Player 1",
    "player2": "Player 2",
    "player3": "Player 3",
    "player4": "Player 4",
}

# 3+ consecutive qualifying throws
ON_FIRE_THRESHOLD = 3

FIFA_SAVE_POINTS = 1
REDEMPTION_PENALTY = 1

# MVP composite: score + hit_rate * weight + bonus while on fire
MVP_HIT_RATE_WEIGHT = 2.0
MVP_ON_FIRE_BONUS = 1.5
