# scripts/replay_matches.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from tqdm import tqdm

from diestats.config import MATCHES_DIR
from diestats.exceptions import MatchEngineError
from diestats.storage import load_match

logger = logging.getLogger("replay_matches")


def verify(path: Path) -> Optional[str]:
    """Return a problem description, or None if the log replays cleanly."""
    try:
        load_match(path)
    except (MatchEngineError, KeyError, TypeError, json.JSONDecodeError) as e:
        return f"{type(e).__name__}: {e}"
    return None


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(
        description="Replay every stored match log in a directory and report the ones that fail."
    )
    p.add_argument("--dir", default=str(MATCHES_DIR), help="Directory of match json files")
    p.add_argument("--pattern", default="*.json")
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    files = sorted(Path(args.dir).glob(args.pattern))
    if not files:
        print(f"No match logs in {args.dir}")
        return 0

    failures: List[Tuple[Path, str]] = []
    for path in tqdm(files, desc="Replaying", unit="match"):
        problem = verify(path)
        if problem is not None:
            logger.warning("%s: %s", path.name, problem)
            failures.append((path, problem))

    print(f"{len(files) - len(failures)}/{len(files)} match logs replay cleanly")
    for path, problem in failures:
        print(f"  {path.name}: {problem}")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
