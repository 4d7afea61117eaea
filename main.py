import argparse
import logging
import sys
from pathlib import Path

from diestats.config import MATCHES_DIR, TEAMS
from diestats.exceptions import ConfigurationError, MatchEngineError, ValidationError
from diestats.storage import load_match


def print_match(match):
    settings = match.settings

    print("\n==========================")
    print(f"MATCH {match.match_id} ({match.status})")
    print("==========================")
    print(f"Score limit: {settings.score_limit}  Win by two: {settings.win_by_two}  Sink: {settings.sink_points}")
    print("Plays:", len(match.events))

    for team in TEAMS:
        print(f"{settings.team_name(team)}: {match.team_scores[team]}")

    if match.winner:
        print(f"Winner: {settings.team_name(match.winner)} ({match.completion_reason})")

    print("\nPlayers:")
    for player in match.roster:
        s = match.player_stats[player.id]
        fire = " 🔥" if s.currently_on_fire else ""
        print(
            f"  {player.display_name or player.id:<12} {player.team}  "
            f"score={s.score} throws={s.throws} hits={s.hits} "
            f"catches={s.catches} blunders={s.blunders} streak={s.hit_streak}{fire}"
        )

    print("MVP:", match.current_mvp_id or "-")
    print("==========================\n")


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Replay a stored match log and print the result")
    p.add_argument("path", nargs="?", default=str(MATCHES_DIR / "sample_match.json"))
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = Path(args.path)
    if not path.exists():
        print("❌ Match file not found:", path)
        return 1

    try:
        match = load_match(path)
    except ConfigurationError as e:
        print("❌ RULE TABLE MISMATCH:", e)
        return 2
    except ValidationError as e:
        print("❌ INVALID MATCH LOG:", e)
        return 1
    except MatchEngineError as e:
        print("❌ LOGIC ERROR:", e)
        return 1

    print_match(match)
    return 0


if __name__ == "__main__":
    sys.exit(main())
